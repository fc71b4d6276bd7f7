"""
app/domain/events.py

Typed shop-floor event records and the evaluation window.

Records are supplied by the external event store, already scoped (or
scopable) to one machine and one time window.  The pipelines only read
them; every model here is frozen.

Malformed payloads are rejected at this boundary by the ``parse_*``
helpers, which raise :class:`EventValidationError` with one
:class:`EventErrorDetail` per offending field.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

# ---------------------------------------------------------------------------
# Checklist status tokens
# ---------------------------------------------------------------------------

STATUS_OK = "ok"
STATUS_PROBLEMA = "problema"

# Upstream writes the not-performed state with two spellings; both count.
STATUS_NAO_REALIZADO = "NAO_REALIZADO"
STATUS_NAO_REALIZADO_LOWER = "nao_realizado"
NOT_PERFORMED_STATUSES: frozenset[str] = frozenset(
    {STATUS_NAO_REALIZADO, STATUS_NAO_REALIZADO_LOWER}
)


def is_not_performed(status: str) -> bool:
    return status in NOT_PERFORMED_STATUSES


def is_problem(status: str) -> bool:
    return status == STATUS_PROBLEMA


def is_ok(status: str) -> bool:
    return status == STATUS_OK


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

# String fields are kept verbatim; status matching is exact.
_RECORD_CONFIG = ConfigDict(extra="forbid", frozen=True)


class _EventRecord(BaseModel):
    model_config = _RECORD_CONFIG

    id: str = Field(min_length=1)
    machine_id: str = Field(min_length=1)
    operator_id: str | None = None
    created_at: datetime

    @field_validator("operator_id", mode="before")
    @classmethod
    def _blank_operator_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ChecklistEvent(_EventRecord):
    """One recorded execution (or miss) of a machine checklist."""

    status: str
    checklist_name: str | None = None


class StopEvent(_EventRecord):
    """One machine downtime occurrence."""

    reason: str | None = None


class LogbookEntry(_EventRecord):
    """Free-text operational note tied to a machine."""

    description: str


def is_timezone_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


class EvaluationWindow(BaseModel):
    """
    Inclusive ``[start, end]`` time range of one evaluation.

    Both bounds must share timezone awareness (both naive or both
    offset-aware), and records evaluated against the window must match it.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> EvaluationWindow:
        if is_timezone_aware(self.start) != is_timezone_aware(self.end):
            raise ValueError(
                "window start and end must both carry a UTC offset or both omit it; "
                f"got {self.start.isoformat()} and {self.end.isoformat()}"
            )
        if self.start > self.end:
            raise ValueError(
                f"window start must not be after end; "
                f"got {self.start.isoformat()} > {self.end.isoformat()}"
            )
        return self

    @classmethod
    def from_iso(cls, start: str, end: str) -> EvaluationWindow:
        return cls(start=start, end=end)

    @property
    def is_aware(self) -> bool:
        return is_timezone_aware(self.start)

    def contains(self, timestamp: datetime) -> bool:
        return self.start <= timestamp <= self.end


# ---------------------------------------------------------------------------
# Boundary parsing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EventErrorDetail:
    """
    One field-level validation failure inside a raw record batch.
    """

    index: int
    field: str
    message: str


class EventValidationError(ValueError):
    """
    Raised when a raw record batch contains malformed items.
    """

    def __init__(self, *, record_type: str, errors: Iterable[EventErrorDetail]) -> None:
        self.record_type = record_type
        self.errors = tuple(errors)
        self.message = f"{len(self.errors)} invalid field(s) in {record_type} batch"
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "record_type": self.record_type,
            "errors": [
                {"index": error.index, "field": error.field, "message": error.message}
                for error in self.errors
            ],
        }


_RecordT = TypeVar("_RecordT", bound=_EventRecord)


def _parse_batch(
    model: type[_RecordT],
    raw_records: Iterable[Mapping[str, Any] | _RecordT],
) -> list[_RecordT]:
    parsed: list[_RecordT] = []
    errors: list[EventErrorDetail] = []

    for index, raw in enumerate(raw_records):
        if isinstance(raw, model):
            parsed.append(raw)
            continue
        try:
            parsed.append(model.model_validate(raw))
        except ValidationError as exc:
            for item in exc.errors():
                location = ".".join(str(part) for part in item["loc"]) or "<record>"
                errors.append(EventErrorDetail(index=index, field=location, message=item["msg"]))

    if errors:
        raise EventValidationError(record_type=model.__name__, errors=errors)
    return parsed


def parse_checklist_events(raw_records: Iterable[Mapping[str, Any] | ChecklistEvent]) -> list[ChecklistEvent]:
    return _parse_batch(ChecklistEvent, raw_records)


def parse_stop_events(raw_records: Iterable[Mapping[str, Any] | StopEvent]) -> list[StopEvent]:
    return _parse_batch(StopEvent, raw_records)


def parse_logbook_entries(raw_records: Iterable[Mapping[str, Any] | LogbookEntry]) -> list[LogbookEntry]:
    return _parse_batch(LogbookEntry, raw_records)


def check_window_timezones(window: EvaluationWindow, records: Iterable[_EventRecord]) -> None:
    """
    Reject records whose ``created_at`` awareness differs from the window's.

    Raises:
        EventValidationError: One detail per mismatching record, naming
            ``created_at``.
    """
    expected = "offset-aware" if window.is_aware else "naive"
    record_type = ""
    errors: list[EventErrorDetail] = []
    for index, record in enumerate(records):
        if is_timezone_aware(record.created_at) == window.is_aware:
            continue
        record_type = record_type or type(record).__name__
        errors.append(
            EventErrorDetail(
                index=index,
                field="created_at",
                message=(
                    f"timestamp {record.created_at.isoformat()} must be {expected} "
                    "to match the evaluation window"
                ),
            )
        )
    if errors:
        raise EventValidationError(record_type=record_type, errors=errors)
