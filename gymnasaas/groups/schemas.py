"""Pydantic schemas for training groups."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GroupCreate(BaseModel):
    academy_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    discipline: Optional[str] = Field(None, max_length=50)


class GroupResponse(BaseModel):
    id: str
    academy_id: str
    name: str
    discipline: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
