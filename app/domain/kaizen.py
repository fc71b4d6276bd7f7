"""
app/domain/kaizen.py

Kaizen report structures: evidence, suggestions, operator difficulty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import Category, DifficultyTier, Severity

UNIDENTIFIED_OPERATOR = "unidentified"
"""Operator id used for records that carry no operator."""

UNIDENTIFIED_OPERATOR_LABEL = "Operador não identificado"


@dataclass(frozen=True)
class Evidence:
    """
    Back-reference to the record that supports a suggestion.
    """

    kind: str
    source_id: str
    created_at: datetime


@dataclass(frozen=True)
class KaizenSuggestion:
    """
    One evidence-backed improvement suggestion.

    ``rule`` and ``trigger_count`` identify which rule fired and the count
    that crossed its threshold; the alert escalator keys off both.
    """

    title: str
    severity: Severity
    category: Category
    justification: str
    evidence: tuple[Evidence, ...]
    recommended_action: str
    rule: str = ""
    trigger_count: int = 0


@dataclass(frozen=True)
class DifficultyMetrics:
    taxa_nao_realizado: float
    taxa_problema: float
    paradas_count: int
    diario_count: int


@dataclass(frozen=True)
class OperatorDifficulty:
    operator_id: str
    operator_name: str
    tier: DifficultyTier
    metrics: DifficultyMetrics


@dataclass(frozen=True)
class KaizenReport:
    """
    Ranked difficulties, ranked suggestions and escalated alerts for one machine.
    """

    difficulties: tuple[OperatorDifficulty, ...] = field(default_factory=tuple)
    suggestions: tuple[KaizenSuggestion, ...] = field(default_factory=tuple)
    alerts: tuple[KaizenSuggestion, ...] = field(default_factory=tuple)
