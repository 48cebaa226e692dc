from .events import (
    EmotionLogRecord,
    AssignmentLogRecord,
    ResetLogRecord,
    WellnessActionLogRecord,
)
from .cognitive import (
    AssignmentComplexityScore,
    CognitiveCapacitySnapshot,
    AssignmentOutcome,
)

__all__ = [
    "EmotionLogRecord",
    "AssignmentLogRecord",
    "ResetLogRecord",
    "WellnessActionLogRecord",
    "AssignmentComplexityScore",
    "CognitiveCapacitySnapshot",
    "AssignmentOutcome",
]
