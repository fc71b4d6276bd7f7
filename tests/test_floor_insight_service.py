"""
tests/test_floor_insight_service.py

Pytest tests for FloorInsightService and the text report export.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.enums import RiskTier, Severity
from app.domain.events import EvaluationWindow, EventValidationError
from app.services.floor_insight_service import FloorInsightService
from app.services.report_export_service import render_text_report
from kaizen.orchestrator import KaizenOrchestrator

FROZEN_NOW = datetime(2026, 3, 3, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def service() -> FloorInsightService:
    return FloorInsightService(kaizen_orchestrator=KaizenOrchestrator(clock=lambda: FROZEN_NOW))


class TestEvaluateMachine:
    def test_records_outside_window_or_machine_are_dropped(
        self, service, window, make_checklist, make_stop
    ) -> None:
        checklists = [
            make_checklist("NAO_REALIZADO"),
            make_checklist("NAO_REALIZADO", minute=-1),
            make_checklist("NAO_REALIZADO", minute=24 * 60 + 1),
            make_checklist("NAO_REALIZADO", machine_id="maq-02"),
        ]
        evaluation = service.evaluate_machine(
            machine_id="maq-01",
            machine_name="Injetora 1",
            window=window,
            checklists=checklists,
            stops=[make_stop(minute=24 * 60)],
            logbook=[],
        )

        assert evaluation.insight.metrics.checklists_nao_realizado == 1
        assert evaluation.insight.metrics.total_paradas == 1
        assert evaluation.insight.risk is RiskTier.AMARELO

    def test_kaizen_report_uses_insight_metrics(self, service, window, make_checklist) -> None:
        checklists = [make_checklist("NAO_REALIZADO", minute=i) for i in range(3)]
        evaluation = service.evaluate_machine(
            machine_id="maq-01",
            machine_name="Injetora 1",
            window=window,
            checklists=checklists,
            stops=[],
            logbook=[],
            operator_names={"op-1": "Ana"},
        )

        assert evaluation.insight.risk is RiskTier.VERMELHO
        assert [s.severity for s in evaluation.report.suggestions] == [Severity.ALTA]
        assert [a.severity for a in evaluation.report.alerts] == [Severity.CRITICA]
        assert evaluation.report.difficulties[0].operator_name == "Ana"

    def test_logs_structured_event(self, service, window, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="app.services.floor_insight_service"):
            service.evaluate_machine(
                machine_id="maq-01", machine_name="Injetora 1", window=window, checklists=[], stops=[], logbook=[]
            )

        payloads = [json.loads(record.getMessage()) for record in caplog.records if record.levelno == logging.INFO]
        assert payloads[-1]["event"] == "floor_insight.machine_evaluated"
        assert payloads[-1]["risk"] == "VERDE"
        assert payloads[-1]["suggestions"] == 0


class TestEvaluateFloor:
    def test_every_machine_gets_an_evaluation(self, service, window, make_stop) -> None:
        stops = [make_stop(machine_id="maq-02", minute=i) for i in range(3)]
        evaluations = service.evaluate_floor(
            machines={"maq-01": "Injetora 1", "maq-02": "Injetora 2", "maq-03": "Prensa"},
            window=window,
            checklists=[],
            stops=stops,
            logbook=[],
        )

        assert [e.insight.machine_name for e in evaluations] == ["Injetora 1", "Injetora 2", "Prensa"]
        assert [e.insight.risk for e in evaluations] == [RiskTier.VERDE, RiskTier.VERMELHO, RiskTier.VERDE]

    def test_evaluate_payload_parses_raw_rows(self, service) -> None:
        start = datetime(2026, 3, 2, tzinfo=timezone.utc)
        raw_stops = [
            {"id": f"stp-{i}", "machine_id": "maq-01", "reason": "Setup", "created_at": (start + timedelta(hours=i)).isoformat()}
            for i in range(2)
        ]
        [evaluation] = service.evaluate_payload(
            machines={"maq-01": "Injetora 1"},
            window_start="2026-03-02T00:00:00+00:00",
            window_end="2026-03-02T23:59:59+00:00",
            checklists=[],
            stops=raw_stops,
            logbook=[],
        )

        assert evaluation.insight.risk is RiskTier.AMARELO
        assert [s.title for s in evaluation.report.suggestions] == ["Otimizar Disponibilidade: Setup"]

    def test_evaluate_payload_rejects_malformed_rows(self, service, caplog) -> None:
        with caplog.at_level(logging.WARNING), pytest.raises(EventValidationError):
            service.evaluate_payload(
                machines={"maq-01": "Injetora 1"},
                window_start="2026-03-02T00:00:00+00:00",
                window_end="2026-03-02T23:59:59+00:00",
                checklists=[{"id": "chk-1", "machine_id": "maq-01"}],
                stops=[],
                logbook=[],
            )
        assert any("ChecklistEvent" in record.getMessage() for record in caplog.records)

    def test_naive_window_with_offset_records_is_rejected(self, service, caplog) -> None:
        raw_stops = [{"id": "stp-1", "machine_id": "maq-01", "reason": "Setup", "created_at": "2026-03-02T08:00:00Z"}]

        with caplog.at_level(logging.WARNING), pytest.raises(EventValidationError) as ctx:
            service.evaluate_payload(
                machines={"maq-01": "Injetora 1"},
                window_start="2026-03-02T00:00:00",
                window_end="2026-03-02T23:59:59",
                checklists=[],
                stops=raw_stops,
                logbook=[],
            )

        assert ctx.value.to_dict()["errors"][0]["field"] == "created_at"
        assert any("StopEvent" in record.getMessage() for record in caplog.records)

    def test_typed_records_with_mismatched_awareness_are_rejected(self, service, make_checklist) -> None:
        naive_window = EvaluationWindow(start=datetime(2026, 3, 2), end=datetime(2026, 3, 3))

        with pytest.raises(EventValidationError, match="ChecklistEvent"):
            service.evaluate_machine(
                machine_id="maq-01",
                machine_name="Injetora 1",
                window=naive_window,
                checklists=[make_checklist("ok")],
                stops=[],
                logbook=[],
            )


class TestTextReport:
    def test_renders_all_sections(self, service, window, make_checklist) -> None:
        checklists = [make_checklist("NAO_REALIZADO", minute=i) for i in range(3)]
        checklists += [make_checklist("ok", operator_id="op-2") for _ in range(3)]
        evaluation = service.evaluate_machine(
            machine_id="maq-01",
            machine_name="Injetora 1",
            window=window,
            checklists=checklists,
            stops=[],
            logbook=[],
            operator_names={"op-1": "Ana", "op-2": "Bia"},
        )

        text = render_text_report(evaluation.insight, evaluation.report)

        assert text.startswith("=== RELATÓRIO DE INSIGHTS IA - INJETORA 1 ===\n\n")
        assert evaluation.insight.summary in text
        assert "--- ALERTAS CRÍTICOS ---\n[!] ALERTA: Quebra de Padrão Operacional - " in text
        assert "• [PADRONIZACAO] Reforçar Disciplina e Autocontrole\n" in text
        assert "• Ana: Dificuldade ALTA\n" in text
        assert "Bia" not in text

    def test_omits_alert_block_when_clear(self, service, window) -> None:
        evaluation = service.evaluate_machine(
            machine_id="maq-01", machine_name="Prensa", window=window, checklists=[], stops=[], logbook=[]
        )
        text = render_text_report(evaluation.insight, evaluation.report)

        assert "ALERTAS CRÍTICOS" not in text
        assert text.endswith("--- SUGESTÕES KAIZEN ---\n--- DIFICULDADE DE OPERADORES ---\n")
