"""
app/domain package marker.
"""

from app.domain.enums import Category, DifficultyTier, RiskTier, Severity
from app.domain.events import (
    ChecklistEvent,
    EvaluationWindow,
    EventErrorDetail,
    EventValidationError,
    LogbookEntry,
    StopEvent,
)
from app.domain.insight import InsightMetrics, LastEvent, MachineInsight, TopIssue
from app.domain.kaizen import (
    DifficultyMetrics,
    Evidence,
    KaizenReport,
    KaizenSuggestion,
    OperatorDifficulty,
)

__all__ = [
    "Category",
    "ChecklistEvent",
    "DifficultyMetrics",
    "DifficultyTier",
    "EvaluationWindow",
    "EventErrorDetail",
    "EventValidationError",
    "Evidence",
    "InsightMetrics",
    "KaizenReport",
    "KaizenSuggestion",
    "LastEvent",
    "LogbookEntry",
    "MachineInsight",
    "OperatorDifficulty",
    "RiskTier",
    "Severity",
    "StopEvent",
    "TopIssue",
]
