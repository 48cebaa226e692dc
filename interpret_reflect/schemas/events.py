"""
Event log request / response schemas.

POST /events/{user_id}/emotions          → EmotionLogRequest        → EventLoggedResponse
POST /events/{user_id}/assignments       → AssignmentLogRequest     → EventLoggedResponse
POST /events/{user_id}/resets            → ResetLogRequest          → EventLoggedResponse
POST /events/{user_id}/wellness-actions  → WellnessActionLogRequest → EventLoggedResponse
GET  /events/{user_id}                   → UserDataResponse
"""
from __future__ import annotations

import enum
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from interpret_reflect.models.events import Difficulty, WellnessCategory

Rating = Annotated[int, Field(ge=1, le=5)]


class TimeOfDay(str, enum.Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"
    night = "night"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class EmotionContextIn(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    assignment_type: Optional[str] = Field(default=None, max_length=64)
    day_of_week: Optional[str] = Field(default=None, max_length=16)
    time_of_day: Optional[TimeOfDay] = None
    post_assignment: Optional[bool] = None


class EmotionLogRequest(BaseModel):
    emotion: str = Field(
        min_length=1, max_length=64,
        description="Emotion tag, e.g. exhausted, stressed, anxious, calm.",
        examples=["exhausted"],
    )
    intensity: Rating = Field(description="1 (mild) – 5 (intense).")
    timestamp: datetime = Field(description="When the emotion was felt. Naive values are UTC.")
    context: Optional[EmotionContextIn] = None


class AssignmentLogRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    type: str = Field(
        min_length=1, max_length=64,
        description="Assignment type tag, e.g. medical, legal, court, educational.",
        examples=["medical"],
    )
    duration: int = Field(ge=0, description="Minutes.")
    difficulty: Difficulty
    timestamp: datetime
    completed: bool = True
    emotion_after: Optional[str] = Field(default=None, max_length=64)


class ResetLogRequest(BaseModel):
    type: str = Field(min_length=1, max_length=64, examples=["professional-boundaries"])
    timestamp: datetime
    skipped: bool = False
    effectiveness: Optional[Rating] = None
    reason: Optional[str] = Field(default=None, max_length=2_000)


class WellnessActionLogRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    action: str = Field(min_length=1, max_length=128, examples=["box breathing"])
    category: WellnessCategory
    timestamp: datetime
    duration: Optional[int] = Field(default=None, ge=0, description="Minutes.")
    effectiveness: Optional[Rating] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class EventLoggedResponse(BaseModel):
    id: int
    user_id: str
    kind: str = Field(description='"emotion" | "assignment" | "reset" | "wellness_action"')
    timestamp: str


class EmotionOut(BaseModel):
    emotion: str
    intensity: int
    timestamp: str
    context: Optional[EmotionContextIn] = None


class AssignmentOut(BaseModel):
    type: str
    duration: int
    difficulty: str
    timestamp: str
    completed: bool
    emotion_after: Optional[str] = None


class ResetOut(BaseModel):
    type: str
    timestamp: str
    skipped: bool
    effectiveness: Optional[int] = None
    reason: Optional[str] = None


class WellnessActionOut(BaseModel):
    action: str
    category: str
    timestamp: str
    duration: Optional[int] = None
    effectiveness: Optional[int] = None


class UserDataResponse(BaseModel):
    """One user's event history, oldest first."""
    user_id: str
    current_streak: int = Field(description="Consecutive active days ending today or yesterday.")
    emotions: list[EmotionOut]
    assignments: list[AssignmentOut]
    resets: list[ResetOut]
    wellness_actions: list[WellnessActionOut]
