"""
app/services/floor_insight_service.py

Per-machine evaluation of one time window.

Wires the two pipelines over the same scoped record set:

    InsightOrchestrator  – metrics, risk tier, narrative, top issues, last events
    KaizenOrchestrator   – operator difficulty, suggestions, alerts

Scoping
-------
Streams may be pooled across machines and may contain records outside
the window; both are dropped here (machine id equality, inclusive window
bounds) before either pipeline runs.

Failure contract
----------------
- Malformed raw records  → EventValidationError (logged, then re-raised)
- Inverted window        → pydantic ValidationError from EvaluationWindow
- Naive/aware mismatch   → EventValidationError on `created_at` (window and
                           records must agree on carrying a UTC offset)
- Well-typed inputs never fail; empty streams yield a VERDE insight and
  an empty report.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, TypeVar

from app.config import InsightThresholds, KaizenThresholds, get_insight_thresholds, get_kaizen_thresholds
from app.domain.events import (
    ChecklistEvent,
    EvaluationWindow,
    EventValidationError,
    LogbookEntry,
    StopEvent,
    check_window_timezones,
    parse_checklist_events,
    parse_logbook_entries,
    parse_stop_events,
)
from app.domain.insight import MachineInsight
from app.domain.kaizen import KaizenReport
from app.logging_utils import log_event
from insight.orchestrator import InsightOrchestrator
from kaizen.orchestrator import KaizenOrchestrator

logger = logging.getLogger(__name__)

_RecordT = TypeVar("_RecordT", ChecklistEvent, StopEvent, LogbookEntry)


@dataclass(frozen=True)
class MachineEvaluation:
    """
    Both derived artifacts for one machine window.
    """

    insight: MachineInsight
    report: KaizenReport


def _scope(records: Iterable[_RecordT], machine_id: str, window: EvaluationWindow) -> list[_RecordT]:
    return [
        record
        for record in records
        if record.machine_id == machine_id and window.contains(record.created_at)
    ]


class FloorInsightService:
    """
    Stateless facade that evaluates machines over one window.
    """

    def __init__(
        self,
        *,
        insight_thresholds: InsightThresholds | None = None,
        kaizen_thresholds: KaizenThresholds | None = None,
        insight_orchestrator: InsightOrchestrator | None = None,
        kaizen_orchestrator: KaizenOrchestrator | None = None,
    ) -> None:
        self._insights = insight_orchestrator or InsightOrchestrator(insight_thresholds)
        self._kaizen = kaizen_orchestrator or KaizenOrchestrator(thresholds=kaizen_thresholds)

    def evaluate_machine(
        self,
        *,
        machine_id: str,
        machine_name: str,
        window: EvaluationWindow,
        checklists: Sequence[ChecklistEvent],
        stops: Sequence[StopEvent],
        logbook: Sequence[LogbookEntry],
        operator_names: Mapping[str, str] | None = None,
    ) -> MachineEvaluation:
        """
        Run the insight and kaizen pipelines for one machine.

        Args:
            machine_id:     Machine whose records are evaluated.
            machine_name:   Display name copied into the insight.
            window:         Inclusive evaluation window.
            checklists:     Checklist events (may be pooled across machines).
            stops:          Stop events (may be pooled across machines).
            logbook:        Logbook entries (may be pooled across machines).
            operator_names: Operator id → display name lookup.

        Returns:
            MachineEvaluation with the insight and the kaizen report.
        """
        run_start = time.monotonic()

        for stream in (checklists, stops, logbook):
            check_window_timezones(window, stream)
        m_checklists = _scope(checklists, machine_id, window)
        m_stops = _scope(stops, machine_id, window)
        m_logbook = _scope(logbook, machine_id, window)
        logger.debug(
            "evaluate_machine machine=%r scoped checklists=%d/%d stops=%d/%d logbook=%d/%d",
            machine_id,
            len(m_checklists),
            len(checklists),
            len(m_stops),
            len(stops),
            len(m_logbook),
            len(logbook),
        )

        insight = self._insights.build_insight(
            machine_id=machine_id,
            machine_name=machine_name,
            window=window,
            checklists=m_checklists,
            stops=m_stops,
            logbook=m_logbook,
        )
        report = self._kaizen.run(
            metrics=insight.metrics,
            checklists=m_checklists,
            stops=m_stops,
            logbook=m_logbook,
            operator_names=operator_names,
        )

        log_event(
            logger,
            logging.INFO,
            "floor_insight.machine_evaluated",
            machine_id=machine_id,
            risk=insight.risk.value,
            suggestions=len(report.suggestions),
            alerts=len(report.alerts),
            difficulties=len(report.difficulties),
            elapsed_seconds=round(time.monotonic() - run_start, 6),
        )
        return MachineEvaluation(insight=insight, report=report)

    def evaluate_floor(
        self,
        *,
        machines: Mapping[str, str],
        window: EvaluationWindow,
        checklists: Sequence[ChecklistEvent],
        stops: Sequence[StopEvent],
        logbook: Sequence[LogbookEntry],
        operator_names: Mapping[str, str] | None = None,
    ) -> list[MachineEvaluation]:
        """
        Evaluate every machine of the id → name mapping, in mapping order.

        Machines without records are still returned (VERDE, empty report).
        """
        return [
            self.evaluate_machine(
                machine_id=machine_id,
                machine_name=machine_name,
                window=window,
                checklists=checklists,
                stops=stops,
                logbook=logbook,
                operator_names=operator_names,
            )
            for machine_id, machine_name in machines.items()
        ]

    def evaluate_payload(
        self,
        *,
        machines: Mapping[str, str],
        window_start: str,
        window_end: str,
        checklists: Iterable[Mapping[str, Any]],
        stops: Iterable[Mapping[str, Any]],
        logbook: Iterable[Mapping[str, Any]],
        operator_names: Mapping[str, str] | None = None,
    ) -> list[MachineEvaluation]:
        """
        Validate raw store rows and ISO-8601 window bounds, then
        :meth:`evaluate_floor`.

        Raises:
            EventValidationError: If any raw record is malformed, or its
                timestamp awareness differs from the window's.
            pydantic.ValidationError: If the window bounds are invalid.
        """
        window = EvaluationWindow.from_iso(window_start, window_end)
        try:
            parsed_checklists = parse_checklist_events(checklists)
            parsed_stops = parse_stop_events(stops)
            parsed_logbook = parse_logbook_entries(logbook)
            for stream in (parsed_checklists, parsed_stops, parsed_logbook):
                check_window_timezones(window, stream)
        except EventValidationError as exc:
            logger.warning(
                "evaluate_payload rejected %s batch invalid_fields=%d",
                exc.record_type,
                len(exc.errors),
            )
            raise

        return self.evaluate_floor(
            machines=machines,
            window=window,
            checklists=parsed_checklists,
            stops=parsed_stops,
            logbook=parsed_logbook,
            operator_names=operator_names,
        )


@lru_cache(maxsize=1)
def get_floor_insight_service() -> FloorInsightService:
    """
    Build and cache the service with env-driven thresholds.
    """
    return FloorInsightService(
        insight_thresholds=get_insight_thresholds(),
        kaizen_thresholds=get_kaizen_thresholds(),
    )
