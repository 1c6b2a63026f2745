from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DailyMetrics(BaseModel):
    """A day's biometrics. `date` may be any moment within the day."""

    model_config = ConfigDict(from_attributes=True)

    date: datetime
    steps: int = Field(0, ge=0)
    heart_rate: float = Field(0.0, ge=0, description="Average bpm over the day")
    sleep_hours: float = Field(0.0, ge=0)
    active_calories: float = Field(0.0, ge=0)


class Insight(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    type: str
    created_at: datetime


class ChatMessage(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    content: str
    is_user: bool
    timestamp: datetime = Field(default_factory=datetime.now)
