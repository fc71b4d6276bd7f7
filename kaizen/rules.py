"""
kaizen/rules.py

Deterministic kaizen rule battery.

Rules
-----
1. Adherence          – not-performed checklists >= 2            ALTA / PADRONIZACAO
2. Recurrent problem  – same checklist in ``problema`` >= 3 times  ALTA (CRITICA >= 5) / QUALIDADE
3. Repeated stop      – same stop reason >= 2 times                ALTA / MANUTENCAO
4. Logbook overload   – logbook entries >= 10                      MEDIA / TREINAMENTO
5. Unidentified operator – unidentified operator with misses       MEDIA / DADOS

Rules 2 and 3 fire once per group that crosses the threshold, in the
order groups are first encountered.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

from app.domain.enums import Category, Severity
from app.domain.events import is_not_performed, is_problem
from app.domain.kaizen import UNIDENTIFIED_OPERATOR, Evidence, KaizenSuggestion
from kaizen.base import BaseKaizenRule, RuleContext

RULE_ADHERENCE = "adherence"
RULE_RECURRENT_PROBLEM = "recurrent_problem"
RULE_REPEATED_STOP = "repeated_stop"
RULE_LOGBOOK_OVERLOAD = "logbook_overload"
RULE_UNIDENTIFIED_OPERATOR = "unidentified_operator"

EVIDENCE_NOT_PERFORMED = "Checklist Não Realizado"
EVIDENCE_RECURRENT_FAILURE = "Falha Recorrente"
EVIDENCE_RECURRENT_STOP = "Parada Recorrente"
EVIDENCE_LOGBOOK = "Evento Diário"
EVIDENCE_IDENTIFICATION = "Falha de Identificação"
SYSTEM_SOURCE_ID = "SISTEMA"

_UNNAMED_ITEM = "Item Indefinido"
_UNKNOWN_REASON = "Motivo não informado"

_T = TypeVar("_T")


def _group_by(records: Iterable[_T], key: Callable[[_T], str]) -> dict[str, list[_T]]:
    groups: dict[str, list[_T]] = {}
    for record in records:
        groups.setdefault(key(record), []).append(record)
    return groups


class AdherenceRule(BaseKaizenRule):
    """Checklists skipped repeatedly within the window."""

    rule_id = RULE_ADHERENCE

    def evaluate(self, context: RuleContext) -> list[KaizenSuggestion]:
        missed = context.metrics.checklists_nao_realizado
        if missed < context.thresholds.adherence_min_not_performed:
            return []

        evidence = tuple(
            Evidence(kind=EVIDENCE_NOT_PERFORMED, source_id=event.id, created_at=event.created_at)
            for event in context.checklists
            if is_not_performed(event.status)
        )
        return [
            KaizenSuggestion(
                title="Reforçar Disciplina e Autocontrole",
                severity=Severity.ALTA,
                category=Category.PADRONIZACAO,
                justification=(
                    f"Foram identificados {missed} esquecimentos de checklist. "
                    "A falta de registro impede a rastreabilidade real do processo."
                ),
                evidence=evidence,
                recommended_action=(
                    'Realizar um "Diálogo Diário de Segurança e Qualidade" focado na importância '
                    "do registro em tempo real para evitar perdas de informação."
                ),
                rule=self.rule_id,
                trigger_count=missed,
            )
        ]


class RecurrentProblemRule(BaseKaizenRule):
    """The same checklist item failing again and again."""

    rule_id = RULE_RECURRENT_PROBLEM

    def evaluate(self, context: RuleContext) -> list[KaizenSuggestion]:
        t = context.thresholds
        groups = _group_by(
            (event for event in context.checklists if is_problem(event.status)),
            lambda event: event.checklist_name or _UNNAMED_ITEM,
        )

        suggestions: list[KaizenSuggestion] = []
        for item, events in groups.items():
            count = len(events)
            if count < t.recurrent_problem_min:
                continue
            suggestions.append(
                KaizenSuggestion(
                    title=f"Eliminar Causa Raiz de Falha: {item}",
                    severity=Severity.CRITICA if count >= t.recurrent_problem_critical else Severity.ALTA,
                    category=Category.QUALIDADE,
                    justification=(
                        f'O item "{item}" falhou {count} vezes. '
                        "Isso indica uma instabilidade crônica no setup ou componente."
                    ),
                    evidence=tuple(
                        Evidence(kind=EVIDENCE_RECURRENT_FAILURE, source_id=event.id, created_at=event.created_at)
                        for event in events
                    ),
                    recommended_action=(
                        'Aplicar a metodologia dos "5 Porquês". Verificar se há desgaste prematuro '
                        "de peças ou variação na matéria-prima."
                    ),
                    rule=self.rule_id,
                    trigger_count=count,
                )
            )
        return suggestions


class RepeatedStopRule(BaseKaizenRule):
    """The machine stopping repeatedly for the same reason."""

    rule_id = RULE_REPEATED_STOP

    def evaluate(self, context: RuleContext) -> list[KaizenSuggestion]:
        groups = _group_by(context.stops, lambda stop: stop.reason or _UNKNOWN_REASON)

        suggestions: list[KaizenSuggestion] = []
        for reason, stops in groups.items():
            count = len(stops)
            if count < context.thresholds.repeated_stop_min:
                continue
            suggestions.append(
                KaizenSuggestion(
                    title=f"Otimizar Disponibilidade: {reason}",
                    severity=Severity.ALTA,
                    category=Category.MANUTENCAO,
                    justification=(
                        f"A máquina parou {count} vezes pelo mesmo motivo ({reason}). "
                        "Isso impacta diretamente o OEE."
                    ),
                    evidence=tuple(
                        Evidence(kind=EVIDENCE_RECURRENT_STOP, source_id=stop.id, created_at=stop.created_at)
                        for stop in stops
                    ),
                    recommended_action=(
                        "Avaliar a necessidade de uma intervenção técnica preventiva. "
                        "O custo da parada recorrente supera o custo do reparo planejado."
                    ),
                    rule=self.rule_id,
                    trigger_count=count,
                )
            )
        return suggestions


class LogbookOverloadRule(BaseKaizenRule):
    """Operators spending too much time on manual logbook notes."""

    rule_id = RULE_LOGBOOK_OVERLOAD

    def evaluate(self, context: RuleContext) -> list[KaizenSuggestion]:
        t = context.thresholds
        total = len(context.logbook)
        if total < t.logbook_overload_min:
            return []

        return [
            KaizenSuggestion(
                title="Simplificar Registros Operacionais",
                severity=Severity.MEDIA,
                category=Category.TREINAMENTO,
                justification=(
                    f"Volume alto de registros manuais ({total}). "
                    "Isso consome tempo produtivo do operador."
                ),
                evidence=tuple(
                    Evidence(kind=EVIDENCE_LOGBOOK, source_id=entry.id, created_at=entry.created_at)
                    for entry in context.logbook[: t.logbook_evidence_cap]
                ),
                recommended_action=(
                    "Verificar se existem novos tipos de ocorrências que poderiam ser automatizados "
                    "ou transformados em botões rápidos no painel."
                ),
                rule=self.rule_id,
                trigger_count=total,
            )
        ]


class UnidentifiedOperatorRule(BaseKaizenRule):
    """Missed checklists that cannot be traced back to an operator."""

    rule_id = RULE_UNIDENTIFIED_OPERATOR

    def evaluate(self, context: RuleContext) -> list[KaizenSuggestion]:
        unidentified = next(
            (d for d in context.difficulties if d.operator_id == UNIDENTIFIED_OPERATOR),
            None,
        )
        if unidentified is None or unidentified.metrics.taxa_nao_realizado <= 0:
            return []

        return [
            KaizenSuggestion(
                title="Garantir Rastreabilidade de Pessoas",
                severity=Severity.MEDIA,
                category=Category.DADOS,
                justification=(
                    "Existem falhas de processo que não podem ser atribuídas a um responsável para feedback."
                ),
                evidence=(
                    Evidence(kind=EVIDENCE_IDENTIFICATION, source_id=SYSTEM_SOURCE_ID, created_at=context.clock()),
                ),
                recommended_action=(
                    "Auditar o uso de crachás/logins no terminal e garantir que nenhum operador "
                    "inicie o turno sem se identificar."
                ),
                rule=self.rule_id,
                trigger_count=1,
            )
        ]


DEFAULT_RULES: tuple[BaseKaizenRule, ...] = (
    AdherenceRule(),
    RecurrentProblemRule(),
    RepeatedStopRule(),
    LogbookOverloadRule(),
    UnidentifiedOperatorRule(),
)
