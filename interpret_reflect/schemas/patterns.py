"""
Pattern engine response schemas.

POST   /patterns/{user_id}/analyze          → AnalyzeRequest → NudgeListResponse
GET    /patterns/{user_id}/nudges           → NudgeListResponse
DELETE /patterns/{user_id}/nudges/{id}      → 204
GET    /patterns/{user_id}/recommendations  → RecommendationsResponse
GET    /patterns/{user_id}                  → PatternListResponse
"""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    since: Optional[datetime] = Field(
        default=None,
        description="Only evaluate events at or after this instant. Omit for full history.",
    )
    current_streak: Optional[int] = Field(
        default=None,
        ge=0,
        description="Override the streak computed from logged activity.",
    )


class NudgeActionOut(BaseModel):
    label: str
    target: str


class NudgeOut(BaseModel):
    id: str
    rule_id: str
    priority: str = Field(description='"high" | "medium" | "low"')
    type: str = Field(description='"insight" | "suggestion" | "encouragement" | "warning"')
    title: str
    message: str
    action: Optional[NudgeActionOut] = None
    dismissible: bool
    expires_in: Optional[int] = Field(default=None, description="Hours after created_at.")
    created_at: str
    expires_at: Optional[str] = None


class NudgeListResponse(BaseModel):
    total: int
    items: list[NudgeOut]


class PatternOut(BaseModel):
    rule_id: str
    type: str
    pattern: str
    confidence: float
    occurrences: int
    timeframe: str
    last_detected: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class PatternListResponse(BaseModel):
    total: int
    items: list[PatternOut]


class RecommendationsResponse(BaseModel):
    items: list[str]
