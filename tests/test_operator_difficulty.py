"""
tests/test_operator_difficulty.py

Pytest unit tests for DifficultyProfiler and classify_difficulty.
"""

from __future__ import annotations

import pytest

from app.domain.enums import DifficultyTier
from app.domain.kaizen import UNIDENTIFIED_OPERATOR, UNIDENTIFIED_OPERATOR_LABEL
from kaizen.difficulty import DifficultyProfiler, classify_difficulty


@pytest.fixture()
def profiler() -> DifficultyProfiler:
    return DifficultyProfiler()


class TestClassifyDifficulty:
    @pytest.mark.parametrize(
        "not_performed, problema, total, expected",
        [
            (2, 0, 10, DifficultyTier.ALTA),   # rate exactly 0.20
            (2, 0, 50, DifficultyTier.ALTA),   # count alone
            (1, 0, 4, DifficultyTier.ALTA),    # rate 0.25
            (1, 0, 10, DifficultyTier.MEDIA),  # rate 0.10, single miss
            (0, 2, 6, DifficultyTier.ALTA),    # problem rate ~0.33
            (0, 1, 6, DifficultyTier.MEDIA),   # problem rate ~0.167
            (0, 1, 7, DifficultyTier.BAIXA),   # problem rate ~0.143
            (0, 3, 5, DifficultyTier.BAIXA),   # below minimum sample
            (0, 0, 0, DifficultyTier.BAIXA),
        ],
    )
    def test_tier_rules(self, not_performed: int, problema: int, total: int, expected: DifficultyTier) -> None:
        assert classify_difficulty(not_performed, problema, total) is expected

    def test_problem_rate_exactly_030_is_alta(self) -> None:
        assert classify_difficulty(0, 3, 10) is DifficultyTier.ALTA


class TestDifficultyProfiler:
    def test_ten_checklists_two_missed_is_alta(self, profiler, make_checklist) -> None:
        checklists = [make_checklist("NAO_REALIZADO") for _ in range(2)]
        checklists += [make_checklist("ok") for _ in range(8)]

        [difficulty] = profiler.profile(checklists, [], [], {"op-1": "Ana"})

        assert difficulty.operator_name == "Ana"
        assert difficulty.metrics.taxa_nao_realizado == pytest.approx(0.2)
        assert difficulty.tier is DifficultyTier.ALTA

    def test_missing_operator_uses_sentinel(self, profiler, make_checklist) -> None:
        [difficulty] = profiler.profile([make_checklist("ok", operator_id=None)], [], [], {})
        assert difficulty.operator_id == UNIDENTIFIED_OPERATOR
        assert difficulty.operator_name == UNIDENTIFIED_OPERATOR_LABEL

    def test_unknown_operator_name_falls_back_to_id(self, profiler, make_checklist) -> None:
        [difficulty] = profiler.profile([make_checklist("ok", operator_id="op-77")], [], [], {"op-1": "Ana"})
        assert difficulty.operator_name == "op-77"

    def test_counts_stops_and_logbook_per_operator(self, profiler, make_checklist, make_stop, make_entry) -> None:
        difficulties = profiler.profile(
            [make_checklist("ok", operator_id="op-1"), make_checklist("ok", operator_id=None)],
            [make_stop(operator_id="op-1"), make_stop(operator_id="op-1"), make_stop(operator_id=None)],
            [make_entry(operator_id=None)],
        )
        by_id = {d.operator_id: d for d in difficulties}

        assert by_id["op-1"].metrics.paradas_count == 2
        assert by_id["op-1"].metrics.diario_count == 0
        assert by_id[UNIDENTIFIED_OPERATOR].metrics.paradas_count == 1
        assert by_id[UNIDENTIFIED_OPERATOR].metrics.diario_count == 1

    def test_operator_without_checklists_is_not_profiled(self, profiler, make_checklist, make_stop, make_entry) -> None:
        # Known boundary: stop/logbook-only operators are left out of the profile.
        difficulties = profiler.profile(
            [make_checklist("ok", operator_id="op-1")],
            [make_stop(operator_id="op-2")],
            [make_entry(operator_id="op-3")],
        )
        assert [d.operator_id for d in difficulties] == ["op-1"]

    def test_empty_inputs(self, profiler) -> None:
        assert profiler.profile([], [], []) == []
