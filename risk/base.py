"""
risk/base.py

Abstract base interface for machine risk classifiers.
All risk classifier implementations must inherit from BaseRiskClassifier.
"""

from abc import ABC, abstractmethod

from app.domain.enums import RiskTier
from app.domain.insight import InsightMetrics


class BaseRiskClassifier(ABC):
    """Abstract base class for machine risk classifiers.

    Defines the interface that all risk classifier implementations
    must follow. Enforces a total classify contract: every metrics
    record maps to exactly one tier.
    """

    @abstractmethod
    def classify(self, metrics: InsightMetrics) -> RiskTier:
        """Classify a machine's window metrics into a risk tier.

        Args:
            metrics: Event counts for one machine and one window.

        Returns:
            The RiskTier for the window.

        Raises:
            NotImplementedError: If the subclass does not implement
                                 this method.
        """
        raise NotImplementedError("Subclasses must implement classify()")
