"""Pydantic schemas for training classes."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ClassCreate(BaseModel):
    academy_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    capacity: Optional[int] = Field(None, ge=1)
    monthly_fee: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class ClassResponse(BaseModel):
    id: str
    academy_id: str
    name: str
    capacity: Optional[int] = None
    monthly_fee: Optional[Decimal] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
