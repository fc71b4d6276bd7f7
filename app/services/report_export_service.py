"""
app/services/report_export_service.py

Plain-text export of one machine's insight and kaizen report.
"""

from __future__ import annotations

from app.domain.enums import DifficultyTier
from app.domain.insight import MachineInsight
from app.domain.kaizen import KaizenReport

MAX_EXPORTED_SUGGESTIONS = 5


def render_text_report(insight: MachineInsight, report: KaizenReport) -> str:
    """
    Render the shareable text report for one machine.

    Sections: header, narrative summary, critical alerts (only when
    present), the top suggestions, and every operator above BAIXA.
    """
    parts: list[str] = [
        f"=== RELATÓRIO DE INSIGHTS IA - {insight.machine_name.upper()} ===\n\n",
        insight.summary + "\n\n",
    ]

    if report.alerts:
        parts.append("--- ALERTAS CRÍTICOS ---\n")
        parts.extend(f"[!] {alert.title} - {alert.justification}\n" for alert in report.alerts)
        parts.append("\n")

    parts.append("--- SUGESTÕES KAIZEN ---\n")
    for suggestion in report.suggestions[:MAX_EXPORTED_SUGGESTIONS]:
        parts.append(
            f"• [{suggestion.category.value}] {suggestion.title}\n"
            f"  Justificativa: {suggestion.justification}\n"
            f"  Ação: {suggestion.recommended_action}\n\n"
        )

    parts.append("--- DIFICULDADE DE OPERADORES ---\n")
    parts.extend(
        f"• {difficulty.operator_name}: Dificuldade {difficulty.tier.value}\n"
        for difficulty in report.difficulties
        if difficulty.tier is not DifficultyTier.BAIXA
    )

    return "".join(parts)
