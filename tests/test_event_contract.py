from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from app.domain.events import (
    ChecklistEvent,
    EvaluationWindow,
    EventValidationError,
    check_window_timezones,
    parse_checklist_events,
    parse_logbook_entries,
    parse_stop_events,
)
from insight.aggregator import MetricAggregator


def _checklist_payload(**overrides) -> dict:
    payload = {
        "id": "chk-1",
        "machine_id": "maq-01",
        "operator_id": "op-1",
        "status": "problema",
        "checklist_name": "Check Lubrificação",
        "created_at": "2026-03-02T08:15:00+00:00",
    }
    payload.update(overrides)
    return payload


def test_parse_checklist_events_contract() -> None:
    [event] = parse_checklist_events([_checklist_payload()])

    assert isinstance(event, ChecklistEvent)
    assert event.created_at == datetime(2026, 3, 2, 8, 15, tzinfo=timezone.utc)
    with pytest.raises(ValidationError):
        event.status = "ok"


def test_blank_operator_is_normalized_to_missing() -> None:
    [event] = parse_checklist_events([_checklist_payload(operator_id="  ")])
    assert event.operator_id is None


def test_parse_accepts_already_typed_records() -> None:
    typed = ChecklistEvent.model_validate(_checklist_payload())
    assert parse_checklist_events([typed]) == [typed]


def test_malformed_batch_reports_every_bad_field() -> None:
    batch = [
        _checklist_payload(),
        _checklist_payload(created_at="not-a-date"),
        _checklist_payload(extra_field="not allowed"),
    ]
    with pytest.raises(EventValidationError) as ctx:
        parse_checklist_events(batch)

    details = ctx.value.to_dict()
    assert details["record_type"] == "ChecklistEvent"
    assert {(e["index"], e["field"]) for e in details["errors"]} == {
        (1, "created_at"),
        (2, "extra_field"),
    }


def test_stop_and_logbook_payloads() -> None:
    [stop] = parse_stop_events(
        [{"id": "stp-1", "machine_id": "maq-01", "reason": None, "created_at": "2026-03-02T09:00:00Z"}]
    )
    assert stop.reason is None
    assert stop.operator_id is None

    with pytest.raises(EventValidationError):
        parse_logbook_entries([{"id": "dia-1", "machine_id": "maq-01", "created_at": "2026-03-02T09:00:00Z"}])


def test_window_is_inclusive_on_both_ends() -> None:
    window = EvaluationWindow.from_iso("2026-03-01T00:00:00+00:00", "2026-03-02T00:00:00+00:00")
    assert window.contains(window.start)
    assert window.contains(window.end)
    assert not window.contains(datetime(2026, 3, 2, 0, 0, 1, tzinfo=timezone.utc))


def test_inverted_window_is_rejected() -> None:
    with pytest.raises(ValidationError):
        EvaluationWindow.from_iso("2026-03-02T00:00:00+00:00", "2026-03-01T00:00:00+00:00")


def test_padded_status_is_kept_verbatim_and_counts_only_toward_total() -> None:
    [event] = parse_checklist_events(
        [_checklist_payload(status=" problema ", checklist_name=" Check Lubrificação")]
    )
    assert event.status == " problema "
    assert event.checklist_name == " Check Lubrificação"

    metrics = MetricAggregator().aggregate([event], [], [])
    assert metrics.total_checklists == 1
    assert metrics.checklists_problema == 0


def test_window_bounds_must_agree_on_utc_offset() -> None:
    with pytest.raises(ValidationError, match="UTC offset"):
        EvaluationWindow.from_iso("2026-03-01T00:00:00", "2026-03-02T00:00:00+00:00")


def test_records_must_match_window_awareness() -> None:
    naive_window = EvaluationWindow.from_iso("2026-03-02T00:00:00", "2026-03-02T23:59:59")
    stops = parse_stop_events(
        [
            {"id": "stp-1", "machine_id": "maq-01", "created_at": "2026-03-02T08:00:00"},
            {"id": "stp-2", "machine_id": "maq-01", "created_at": "2026-03-02T09:00:00Z"},
        ]
    )

    with pytest.raises(EventValidationError) as ctx:
        check_window_timezones(naive_window, stops)

    assert ctx.value.record_type == "StopEvent"
    assert [(e.index, e.field) for e in ctx.value.errors] == [(1, "created_at")]
    check_window_timezones(naive_window, stops[:1])
