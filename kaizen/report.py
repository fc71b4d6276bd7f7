"""
kaizen/report.py

Bundles difficulties, suggestions and alerts into a KaizenReport.
"""

from __future__ import annotations

from collections.abc import Sequence

from app.domain.enums import DIFFICULTY_RANK, SEVERITY_RANK
from app.domain.kaizen import KaizenReport, KaizenSuggestion, OperatorDifficulty


def assemble_report(
    difficulties: Sequence[OperatorDifficulty],
    suggestions: Sequence[KaizenSuggestion],
    alerts: Sequence[KaizenSuggestion],
) -> KaizenReport:
    """
    Rank difficulties by tier and suggestions by severity, highest first.

    Both sorts are stable, so ties keep generation order.  Alerts are
    kept in generation order.
    """
    return KaizenReport(
        difficulties=tuple(sorted(difficulties, key=lambda d: DIFFICULTY_RANK[d.tier], reverse=True)),
        suggestions=tuple(sorted(suggestions, key=lambda s: SEVERITY_RANK[s.severity], reverse=True)),
        alerts=tuple(alerts),
    )
