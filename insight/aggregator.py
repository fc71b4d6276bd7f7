"""
insight/aggregator.py

Reduces one machine's raw event streams into InsightMetrics.

Expected inputs
---------------
checklists : Sequence[ChecklistEvent]
    Checklist executions for one machine within one window.
stops : Sequence[StopEvent]
    Downtime events for the same machine and window.
logbook : Sequence[LogbookEntry]
    Logbook entries for the same machine and window.

Counts
------
total_checklists          = len(checklists)
checklists_ok             = status == "ok"
checklists_problema       = status == "problema"
checklists_nao_realizado  = status in {"NAO_REALIZADO", "nao_realizado"}
total_paradas             = len(stops)
total_diario_eventos      = len(logbook)

Status matching is exact and case-sensitive; only the not-performed state
accepts its two known spellings.  Empty inputs yield all-zero metrics.
"""

from __future__ import annotations

from collections.abc import Sequence

from app.domain.events import ChecklistEvent, LogbookEntry, StopEvent, is_not_performed, is_ok, is_problem
from app.domain.insight import InsightMetrics


class MetricAggregator:
    """
    Deterministic event counter.  No I/O, no logging, no side effects.
    """

    def aggregate(
        self,
        checklists: Sequence[ChecklistEvent],
        stops: Sequence[StopEvent],
        logbook: Sequence[LogbookEntry],
    ) -> InsightMetrics:
        """
        Count checklist statuses, stops and logbook entries.

        Parameters
        ----------
        checklists, stops, logbook:
            Event records already scoped to one machine and one window.

        Returns
        -------
        InsightMetrics
        """
        return InsightMetrics(
            total_checklists=len(checklists),
            checklists_ok=_count_status(checklists, is_ok),
            checklists_problema=_count_status(checklists, is_problem),
            checklists_nao_realizado=_count_status(checklists, is_not_performed),
            total_paradas=len(stops),
            total_diario_eventos=len(logbook),
        )


def _count_status(checklists: Sequence[ChecklistEvent], predicate) -> int:
    return sum(1 for event in checklists if predicate(event.status))
