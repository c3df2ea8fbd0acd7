"""Pydantic schemas for service offerings."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from pipecraft.schemas.common import PatchBody

Feature = Annotated[str, Field(min_length=2, max_length=200)]


class ServiceCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    features: list[Feature] = Field(default_factory=list)
    is_active: bool = True


class ServiceUpdate(PatchBody):
    title: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=1000)
    features: Optional[list[Feature]] = None
    is_active: Optional[bool] = None


class ServiceRead(BaseModel):
    id: str
    title: str
    description: str
    features: list[str]
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
