"""
app/services package marker.
"""

from app.services.floor_insight_service import (
    FloorInsightService,
    MachineEvaluation,
    get_floor_insight_service,
)
from app.services.report_export_service import render_text_report

__all__ = [
    "FloorInsightService",
    "MachineEvaluation",
    "get_floor_insight_service",
    "render_text_report",
]
