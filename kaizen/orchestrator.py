"""
kaizen/orchestrator.py

Runs the kaizen pipeline for one machine window:

    DifficultyProfiler → rule battery → escalate_alerts → assemble_report

Rules are held in an ordered registry.  Each rule is evaluated against the
same context, independently of the others.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import datetime

from app.config import KaizenThresholds
from app.domain.events import ChecklistEvent, LogbookEntry, StopEvent
from app.domain.insight import InsightMetrics
from app.domain.kaizen import KaizenReport, KaizenSuggestion, OperatorDifficulty
from kaizen.base import BaseKaizenRule, RuleContext, utc_now
from kaizen.difficulty import DifficultyProfiler
from kaizen.escalation import escalate_alerts
from kaizen.report import assemble_report
from kaizen.rules import DEFAULT_RULES


class KaizenOrchestrator:
    """
    Coordinates difficulty profiling, rule evaluation, escalation and
    report assembly.  Contains no rule logic of its own.

    Parameters
    ----------
    rules:
        Ordered rule registry; defaults to :data:`kaizen.rules.DEFAULT_RULES`.
    thresholds:
        Rule thresholds shared by the profiler, rules and escalator.
    clock:
        Source of generation timestamps for synthetic evidence.
    """

    def __init__(
        self,
        rules: Sequence[BaseKaizenRule] | None = None,
        thresholds: KaizenThresholds | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        registry = tuple(DEFAULT_RULES if rules is None else rules)
        for rule in registry:
            if not isinstance(rule, BaseKaizenRule):
                raise TypeError(
                    f"Kaizen rules must inherit from BaseKaizenRule; got {type(rule).__name__}."
                )
        self._rules = registry
        self._thresholds = thresholds or KaizenThresholds()
        self._clock = clock
        self._profiler = DifficultyProfiler(self._thresholds)

    @property
    def rules(self) -> tuple[BaseKaizenRule, ...]:
        return self._rules

    def profile_operators(
        self,
        checklists: Sequence[ChecklistEvent],
        stops: Sequence[StopEvent],
        logbook: Sequence[LogbookEntry],
        operator_names: Mapping[str, str] | None = None,
    ) -> list[OperatorDifficulty]:
        return self._profiler.profile(checklists, stops, logbook, operator_names)

    def generate_suggestions(self, context: RuleContext) -> list[KaizenSuggestion]:
        suggestions: list[KaizenSuggestion] = []
        for rule in self._rules:
            suggestions.extend(rule.evaluate(context))
        return suggestions

    def generate(
        self,
        *,
        metrics: InsightMetrics,
        checklists: Sequence[ChecklistEvent],
        stops: Sequence[StopEvent],
        logbook: Sequence[LogbookEntry],
        difficulties: Sequence[OperatorDifficulty],
    ) -> KaizenReport:
        """
        Evaluate every rule, escalate alerts and assemble the report.

        Inputs must already be scoped to one machine and one window.
        """
        context = RuleContext(
            metrics=metrics,
            checklists=checklists,
            stops=stops,
            logbook=logbook,
            difficulties=difficulties,
            thresholds=self._thresholds,
            clock=self._clock,
        )
        suggestions = self.generate_suggestions(context)
        alerts = escalate_alerts(suggestions, self._thresholds)
        return assemble_report(difficulties, suggestions, alerts)

    def run(
        self,
        *,
        metrics: InsightMetrics,
        checklists: Sequence[ChecklistEvent],
        stops: Sequence[StopEvent],
        logbook: Sequence[LogbookEntry],
        operator_names: Mapping[str, str] | None = None,
    ) -> KaizenReport:
        """
        Profile operators, then :meth:`generate` the report.
        """
        difficulties = self.profile_operators(checklists, stops, logbook, operator_names)
        return self.generate(
            metrics=metrics,
            checklists=checklists,
            stops=stops,
            logbook=logbook,
            difficulties=difficulties,
        )
