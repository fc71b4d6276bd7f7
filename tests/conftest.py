"""
Shared record factories for pipeline tests.
"""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.events import ChecklistEvent, EvaluationWindow, LogbookEntry, StopEvent

BASE_TIME = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)
MACHINE_ID = "maq-01"


@pytest.fixture()
def window() -> EvaluationWindow:
    return EvaluationWindow(start=BASE_TIME, end=BASE_TIME + timedelta(days=1))


@pytest.fixture()
def make_checklist():
    ids = itertools.count(1)

    def _make(
        status: str = "ok",
        name: str | None = "Check Lubrificação",
        *,
        operator_id: str | None = "op-1",
        machine_id: str = MACHINE_ID,
        minute: int = 0,
    ) -> ChecklistEvent:
        return ChecklistEvent(
            id=f"chk-{next(ids)}",
            machine_id=machine_id,
            operator_id=operator_id,
            status=status,
            checklist_name=name,
            created_at=BASE_TIME + timedelta(minutes=minute),
        )

    return _make


@pytest.fixture()
def make_stop():
    ids = itertools.count(1)

    def _make(
        reason: str | None = "Troca de ferramenta",
        *,
        operator_id: str | None = "op-1",
        machine_id: str = MACHINE_ID,
        minute: int = 0,
    ) -> StopEvent:
        return StopEvent(
            id=f"stp-{next(ids)}",
            machine_id=machine_id,
            operator_id=operator_id,
            reason=reason,
            created_at=BASE_TIME + timedelta(minutes=minute),
        )

    return _make


@pytest.fixture()
def make_entry():
    ids = itertools.count(1)

    def _make(
        description: str = "Ajuste de pressão",
        *,
        operator_id: str | None = "op-1",
        machine_id: str = MACHINE_ID,
        minute: int = 0,
    ) -> LogbookEntry:
        return LogbookEntry(
            id=f"dia-{next(ids)}",
            machine_id=machine_id,
            operator_id=operator_id,
            description=description,
            created_at=BASE_TIME + timedelta(minutes=minute),
        )

    return _make
