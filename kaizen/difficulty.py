"""
kaizen/difficulty.py

Operator difficulty profiler.

Groups checklist events by operator and classifies each operator's
adherence into a DifficultyTier.

Formulas
--------
taxa_nao_realizado = not_performed / total
taxa_problema      = problema / total

Both rates are 0.0 when an operator has no checklist (never reached in
practice, since operators are keyed by their checklist events).

Tiers (first match wins)
------------------------
ALTA   not_performed >= 2 OR taxa_nao_realizado >= 0.20
       OR (taxa_problema >= 0.30 AND total >= 6)
MEDIA  not_performed == 1 OR (taxa_problema >= 0.15 AND total >= 6)
BAIXA  otherwise

Stop and logbook counts are attached only to operators that already have
at least one checklist event; operators seen only in stops or logbook are
not profiled.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from app.config import KaizenThresholds
from app.domain.enums import DifficultyTier
from app.domain.events import ChecklistEvent, LogbookEntry, StopEvent, is_not_performed, is_problem
from app.domain.kaizen import (
    UNIDENTIFIED_OPERATOR,
    UNIDENTIFIED_OPERATOR_LABEL,
    DifficultyMetrics,
    OperatorDifficulty,
)


@dataclass
class _OperatorTally:
    checklists: list[ChecklistEvent] = field(default_factory=list)
    paradas: int = 0
    diario: int = 0


def operator_key(operator_id: str | None) -> str:
    """Return *operator_id*, or the unidentified sentinel when missing."""
    return operator_id or UNIDENTIFIED_OPERATOR


def resolve_operator_name(operator_id: str, operator_names: Mapping[str, str]) -> str:
    if operator_id == UNIDENTIFIED_OPERATOR:
        return UNIDENTIFIED_OPERATOR_LABEL
    return operator_names.get(operator_id) or operator_id


def _rate(part: int, total: int) -> float:
    if total == 0:
        return 0.0
    return part / total


def classify_difficulty(
    not_performed: int,
    problema: int,
    total: int,
    thresholds: KaizenThresholds | None = None,
) -> DifficultyTier:
    """Map one operator's checklist counts to a DifficultyTier."""
    t = thresholds or KaizenThresholds()
    taxa_nao_realizado = _rate(not_performed, total)
    taxa_problema = _rate(problema, total)
    rate_applies = total >= t.difficulty_min_checklists_for_rate

    if (
        not_performed >= t.difficulty_high_not_performed
        or taxa_nao_realizado >= t.difficulty_high_rate_not_performed
        or (rate_applies and taxa_problema >= t.difficulty_high_rate_problem)
    ):
        return DifficultyTier.ALTA

    if not_performed == t.difficulty_medium_not_performed or (
        rate_applies and taxa_problema >= t.difficulty_medium_rate_problem
    ):
        return DifficultyTier.MEDIA

    return DifficultyTier.BAIXA


class DifficultyProfiler:
    """
    Stateless per-operator difficulty profiler.  No I/O, no logging.
    """

    def __init__(self, thresholds: KaizenThresholds | None = None) -> None:
        self._thresholds = thresholds or KaizenThresholds()

    def profile(
        self,
        checklists: Sequence[ChecklistEvent],
        stops: Sequence[StopEvent],
        logbook: Sequence[LogbookEntry],
        operator_names: Mapping[str, str] | None = None,
    ) -> list[OperatorDifficulty]:
        """
        Return one OperatorDifficulty per operator seen in *checklists*,
        in first-seen order.
        """
        names = operator_names or {}
        tallies: dict[str, _OperatorTally] = {}

        for event in checklists:
            tallies.setdefault(operator_key(event.operator_id), _OperatorTally()).checklists.append(event)

        for stop in stops:
            tally = tallies.get(operator_key(stop.operator_id))
            if tally is not None:
                tally.paradas += 1

        for entry in logbook:
            tally = tallies.get(operator_key(entry.operator_id))
            if tally is not None:
                tally.diario += 1

        return [
            self._build(operator_id, tally, names)
            for operator_id, tally in tallies.items()
        ]

    def _build(
        self,
        operator_id: str,
        tally: _OperatorTally,
        operator_names: Mapping[str, str],
    ) -> OperatorDifficulty:
        total = len(tally.checklists)
        not_performed = sum(1 for event in tally.checklists if is_not_performed(event.status))
        problema = sum(1 for event in tally.checklists if is_problem(event.status))

        return OperatorDifficulty(
            operator_id=operator_id,
            operator_name=resolve_operator_name(operator_id, operator_names),
            tier=classify_difficulty(not_performed, problema, total, self._thresholds),
            metrics=DifficultyMetrics(
                taxa_nao_realizado=_rate(not_performed, total),
                taxa_problema=_rate(problema, total),
                paradas_count=tally.paradas,
                diario_count=tally.diario,
            ),
        )
