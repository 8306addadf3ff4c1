"""Pydantic schemas for academies."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AcademyCreate(BaseModel):
    """Schema for creating an academy."""

    name: str = Field(..., min_length=2, max_length=255)
    academy_type: Optional[str] = Field(None, max_length=50)
    country: Optional[str] = Field(None, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    is_public: bool = True


class AcademyResponse(BaseModel):
    """Schema for academy response."""

    id: str
    tenant_id: str
    owner_id: Optional[str] = None
    name: str
    academy_type: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    is_suspended: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicAcademyResponse(BaseModel):
    """Academy as shown in the public directory."""

    id: str
    name: str
    academy_type: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
