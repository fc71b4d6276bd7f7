"""
risk/classifier.py

Checklist and stop based machine risk classifier implementing BaseRiskClassifier.
"""

from app.config import InsightThresholds
from app.domain.enums import RiskTier
from app.domain.insight import InsightMetrics
from risk.base import BaseRiskClassifier


class ChecklistRiskClassifier(BaseRiskClassifier):
    """Ordered-rule risk classifier for one machine window.

    Rules are evaluated in a fixed order and the first match wins:

        VERMELHO: not-performed >= red_not_performed
                  OR (problem rate >= red_problem_rate AND checklists >= min)
                  OR stops >= red_stops
        AMARELO:  not-performed == yellow_not_performed
                  OR (problem rate >= yellow_problem_rate AND checklists >= min)
                  OR stops == yellow_stops
        VERDE:    otherwise

    The problem rate is 0.0 when no checklist was recorded, so an empty
    window depends only on not-performed and stop counts.
    """

    def __init__(self, thresholds: InsightThresholds | None = None) -> None:
        """
        Args:
            thresholds: Rule thresholds; built-in defaults when omitted.
        """
        self._thresholds = thresholds or InsightThresholds()

    def classify(self, metrics: InsightMetrics) -> RiskTier:
        """Return the risk tier for *metrics*.

        Args:
            metrics: Event counts for one machine and one window.

        Returns:
            RiskTier.VERMELHO, RiskTier.AMARELO or RiskTier.VERDE.
        """
        t = self._thresholds
        problem_rate: float = metrics.problem_rate
        rate_applies: bool = metrics.total_checklists >= t.min_checklists_for_rate

        if (
            metrics.checklists_nao_realizado >= t.red_not_performed
            or (rate_applies and problem_rate >= t.red_problem_rate)
            or metrics.total_paradas >= t.red_stops
        ):
            return RiskTier.VERMELHO

        if (
            metrics.checklists_nao_realizado == t.yellow_not_performed
            or (rate_applies and problem_rate >= t.yellow_problem_rate)
            or metrics.total_paradas == t.yellow_stops
        ):
            return RiskTier.AMARELO

        return RiskTier.VERDE


def compute_risk(metrics: InsightMetrics, thresholds: InsightThresholds | None = None) -> RiskTier:
    """Classify *metrics* with a one-off ChecklistRiskClassifier."""
    return ChecklistRiskClassifier(thresholds).classify(metrics)
