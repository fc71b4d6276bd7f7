"""
kaizen/base.py

Abstract base class for kaizen suggestion rules and the shared
evaluation context every rule receives.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.config import KaizenThresholds
from app.domain.events import ChecklistEvent, LogbookEntry, StopEvent
from app.domain.insight import InsightMetrics
from app.domain.kaizen import KaizenSuggestion, OperatorDifficulty


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class RuleContext:
    """
    Read-only inputs shared by every rule in one kaizen evaluation.
    """

    metrics: InsightMetrics
    checklists: Sequence[ChecklistEvent]
    stops: Sequence[StopEvent]
    logbook: Sequence[LogbookEntry]
    difficulties: Sequence[OperatorDifficulty]
    thresholds: KaizenThresholds = field(default_factory=KaizenThresholds)
    clock: Callable[[], datetime] = utc_now


class BaseKaizenRule(ABC):
    """
    Contract for kaizen rule implementations.

    Each rule inspects the same :class:`RuleContext` independently and
    returns zero or more suggestions.  Rules never see each other's
    output, so their registration order does not affect which
    suggestions are produced.

    No I/O, no logging, and no side effects are permitted inside
    :meth:`evaluate`.
    """

    rule_id: str = ""

    @abstractmethod
    def evaluate(self, context: RuleContext) -> list[KaizenSuggestion]:
        """
        Apply the rule to *context*.

        Parameters
        ----------
        context:
            Metrics, raw records and operator difficulties for one
            machine window.

        Returns
        -------
        list[KaizenSuggestion]
            Suggestions produced by this rule, tagged with ``rule_id``
            and the count that crossed the rule's threshold.
        """
