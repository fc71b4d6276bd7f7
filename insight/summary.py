"""
insight/summary.py

Narrative summary composer for machine insights (pt-BR, single locale).
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from app.config import InsightThresholds
from app.domain.events import EvaluationWindow
from app.domain.insight import InsightMetrics, LastEvent, TopIssue

_DATE_FORMAT = "%d/%m/%Y"
_DATETIME_FORMAT = "%d/%m/%Y, %H:%M:%S"

NO_RECURRING_ISSUE = "Nenhum problema recorrente detectado."

RECOMMEND_CHECKLIST_DISCIPLINE = "Reforçar com a equipe a obrigatoriedade dos checklists."
RECOMMEND_PREVENTIVE_REVIEW = "Programar revisão preventiva nos itens com problemas recorrentes."
RECOMMEND_STOP_ROOT_CAUSE = "Investigar causas raiz do alto volume de paradas no período."
RECOMMEND_KEEP_PATTERN = "Manter o padrão de operação atual."


def format_date(value: datetime) -> str:
    return value.strftime(_DATE_FORMAT)


def format_datetime(value: datetime) -> str:
    return value.strftime(_DATETIME_FORMAT)


def _recommendation(metrics: InsightMetrics, thresholds: InsightThresholds) -> str:
    # First match wins.
    if metrics.checklists_nao_realizado > 0:
        return RECOMMEND_CHECKLIST_DISCIPLINE
    if metrics.checklists_problema > 0:
        return RECOMMEND_PREVENTIVE_REVIEW
    if metrics.total_paradas > thresholds.summary_stops_threshold:
        return RECOMMEND_STOP_ROOT_CAUSE
    return RECOMMEND_KEEP_PATTERN


def build_summary(
    metrics: InsightMetrics,
    top_issues: Sequence[TopIssue],
    last_events: Sequence[LastEvent],
    window: EvaluationWindow,
    thresholds: InsightThresholds | None = None,
) -> str:
    """
    Compose the newline-joined narrative for one machine window.

    Lines, in order: period, checklist counts, stop count, attention
    points (top issue names or a fallback), the most recent event when
    one exists, and exactly one recommendation.
    """
    t = thresholds or InsightThresholds()

    lines = [
        f"Período: {format_date(window.start)} até {format_date(window.end)}",
        (
            f"Checklists: OK={metrics.checklists_ok} | "
            f"Problema={metrics.checklists_problema} | "
            f"Não realizado={metrics.checklists_nao_realizado}"
        ),
        f"Paradas: {metrics.total_paradas}",
    ]

    if top_issues:
        names = ", ".join(issue.item for issue in top_issues[: t.max_top_issues])
        lines.append(f"Pontos de atenção: {names}")
    else:
        lines.append(f"Pontos de atenção: {NO_RECURRING_ISSUE}")

    if last_events:
        latest = last_events[0]
        lines.append(f"Último registro: {format_datetime(latest.timestamp)} ({latest.type})")

    lines.append(f"Recomendação: {_recommendation(metrics, t)}")
    return "\n".join(lines)
