"""
app/domain/insight.py

Derived per-machine insight structures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import RiskTier


@dataclass(frozen=True)
class InsightMetrics:
    """
    Fixed-shape event counts for one machine and one window.

    ``checklists_ok + checklists_problema + checklists_nao_realizado`` never
    exceeds ``total_checklists``; statuses outside those three are only
    counted in the total.
    """

    total_checklists: int = 0
    checklists_ok: int = 0
    checklists_problema: int = 0
    checklists_nao_realizado: int = 0
    total_paradas: int = 0
    total_diario_eventos: int = 0

    @property
    def problem_rate(self) -> float:
        """Share of checklists with ``problema`` status; 0.0 without checklists."""
        if self.total_checklists == 0:
            return 0.0
        return self.checklists_problema / self.total_checklists


@dataclass(frozen=True)
class TopIssue:
    item: str
    count: int


@dataclass(frozen=True)
class LastEvent:
    timestamp: datetime
    type: str
    detail: str


@dataclass(frozen=True)
class MachineInsight:
    """
    Risk tier, narrative and supporting evidence for one machine.
    """

    machine_id: str
    machine_name: str
    risk: RiskTier
    summary: str
    metrics: InsightMetrics
    top_issues: tuple[TopIssue, ...] = field(default_factory=tuple)
    last_events: tuple[LastEvent, ...] = field(default_factory=tuple)
