"""Pydantic schemas for athletes."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AthleteCreate(BaseModel):
    """Schema for enrolling an athlete in an academy."""

    academy_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    level: Optional[str] = Field(None, max_length=50)


class AthleteResponse(BaseModel):
    id: str
    academy_id: str
    name: str
    level: Optional[str] = None
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
