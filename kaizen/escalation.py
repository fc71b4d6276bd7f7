"""
kaizen/escalation.py

Selects the suggestions that must also be raised as alerts.

Escalation policy
-----------------
- Adherence suggestions become a CRITICA alert, retitled, when the
  not-performed count reaches ``adherence_alert_not_performed`` (3).
- Recurrent-problem suggestions are alerted unchanged when their count
  reaches ``recurrent_problem_critical`` (5).
- No other rule escalates.

Alerts are copies; the suggestion list keeps the original entries at
their original severity.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from app.config import KaizenThresholds
from app.domain.enums import Severity
from app.domain.kaizen import KaizenSuggestion
from kaizen.rules import RULE_ADHERENCE, RULE_RECURRENT_PROBLEM

ADHERENCE_ALERT_TITLE = "ALERTA: Quebra de Padrão Operacional"


def _escalate(suggestion: KaizenSuggestion, thresholds: KaizenThresholds) -> KaizenSuggestion | None:
    if suggestion.rule == RULE_ADHERENCE:
        if suggestion.trigger_count >= thresholds.adherence_alert_not_performed:
            return replace(suggestion, severity=Severity.CRITICA, title=ADHERENCE_ALERT_TITLE)
        return None

    if suggestion.rule == RULE_RECURRENT_PROBLEM:
        if suggestion.trigger_count >= thresholds.recurrent_problem_critical:
            return suggestion
        return None

    return None


def escalate_alerts(
    suggestions: Sequence[KaizenSuggestion],
    thresholds: KaizenThresholds | None = None,
) -> list[KaizenSuggestion]:
    """
    Return the alert copies for *suggestions*, in generation order.
    """
    t = thresholds or KaizenThresholds()
    alerts: list[KaizenSuggestion] = []
    for suggestion in suggestions:
        alert = _escalate(suggestion, t)
        if alert is not None:
            alerts.append(alert)
    return alerts
