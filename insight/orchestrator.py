"""
insight/orchestrator.py

Builds one MachineInsight per machine by composing MetricAggregator,
ChecklistRiskClassifier and the summary composer.  Contains no counting,
classification, or wording rules of its own beyond top-issue and
last-event extraction.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence

from app.config import InsightThresholds
from app.domain.events import (
    ChecklistEvent,
    EvaluationWindow,
    LogbookEntry,
    StopEvent,
    is_problem,
)
from app.domain.insight import LastEvent, MachineInsight, TopIssue
from insight.aggregator import MetricAggregator
from insight.summary import build_summary
from risk.base import BaseRiskClassifier
from risk.classifier import ChecklistRiskClassifier

EVENT_TYPE_CHECKLIST = "Checklist"
EVENT_TYPE_STOP = "Parada"
EVENT_TYPE_LOGBOOK = "Diário"

_UNNAMED_CHECKLIST_ISSUE = "Checklist Indefinido"
_UNNAMED_CHECKLIST_DETAIL = "Checklist"
_UNNAMED_STOP_DETAIL = "Parada registrada"


# ---------------------------------------------------------------------------
# Extraction helpers
# ---------------------------------------------------------------------------


def extract_top_issues(checklists: Sequence[ChecklistEvent], limit: int) -> list[TopIssue]:
    """
    Count ``problema`` checklists by name, most frequent first.

    Ties keep first-encountered order.
    """
    counts: Counter[str] = Counter(
        event.checklist_name or _UNNAMED_CHECKLIST_ISSUE
        for event in checklists
        if is_problem(event.status)
    )
    ranked = sorted(counts.items(), key=lambda pair: pair[1], reverse=True)
    return [TopIssue(item=name, count=count) for name, count in ranked[:limit]]


def extract_last_events(
    checklists: Sequence[ChecklistEvent],
    stops: Sequence[StopEvent],
    logbook: Sequence[LogbookEntry],
    limit: int,
) -> list[LastEvent]:
    """
    Merge all three streams and return the *limit* most recent events.
    """
    merged: list[LastEvent] = [
        LastEvent(
            timestamp=event.created_at,
            type=EVENT_TYPE_CHECKLIST,
            detail=event.checklist_name or _UNNAMED_CHECKLIST_DETAIL,
        )
        for event in checklists
    ]
    merged.extend(
        LastEvent(timestamp=stop.created_at, type=EVENT_TYPE_STOP, detail=stop.reason or _UNNAMED_STOP_DETAIL)
        for stop in stops
    )
    merged.extend(
        LastEvent(timestamp=entry.created_at, type=EVENT_TYPE_LOGBOOK, detail=entry.description)
        for entry in logbook
    )
    merged.sort(key=lambda event: event.timestamp, reverse=True)
    return merged[:limit]


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class InsightOrchestrator:
    """
    Composes aggregation, risk classification and summary for each machine.

    Stateless between calls; instances may be shared across threads.
    """

    def __init__(
        self,
        thresholds: InsightThresholds | None = None,
        *,
        aggregator: MetricAggregator | None = None,
        classifier: BaseRiskClassifier | None = None,
    ) -> None:
        self._thresholds = thresholds or InsightThresholds()
        self._aggregator = aggregator or MetricAggregator()
        self._classifier = classifier or ChecklistRiskClassifier(self._thresholds)

    def build_insight(
        self,
        *,
        machine_id: str,
        machine_name: str,
        window: EvaluationWindow,
        checklists: Sequence[ChecklistEvent],
        stops: Sequence[StopEvent],
        logbook: Sequence[LogbookEntry],
    ) -> MachineInsight:
        """
        Build the insight for one machine.

        Records belonging to other machines are ignored, so pooled
        streams may be passed unchanged.  A machine with no events gets
        a VERDE insight with zero metrics.
        """
        m_checklists = [event for event in checklists if event.machine_id == machine_id]
        m_stops = [stop for stop in stops if stop.machine_id == machine_id]
        m_logbook = [entry for entry in logbook if entry.machine_id == machine_id]

        metrics = self._aggregator.aggregate(m_checklists, m_stops, m_logbook)
        risk = self._classifier.classify(metrics)
        top_issues = extract_top_issues(m_checklists, self._thresholds.max_top_issues)
        last_events = extract_last_events(m_checklists, m_stops, m_logbook, self._thresholds.max_last_events)
        summary = build_summary(metrics, top_issues, last_events, window, self._thresholds)

        return MachineInsight(
            machine_id=machine_id,
            machine_name=machine_name,
            risk=risk,
            summary=summary,
            metrics=metrics,
            top_issues=tuple(top_issues),
            last_events=tuple(last_events),
        )

    def build_insights(
        self,
        *,
        machines: Mapping[str, str],
        window: EvaluationWindow,
        checklists: Sequence[ChecklistEvent],
        stops: Sequence[StopEvent],
        logbook: Sequence[LogbookEntry],
    ) -> list[MachineInsight]:
        """
        Build one insight per entry of the machine id→name mapping, in order.
        """
        return [
            self.build_insight(
                machine_id=machine_id,
                machine_name=machine_name,
                window=window,
                checklists=checklists,
                stops=stops,
                logbook=logbook,
            )
            for machine_id, machine_name in machines.items()
        ]
