"""Pydantic schemas for portfolio projects."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from pipecraft.schemas.common import PatchBody


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    client: str = Field(..., min_length=2, max_length=100)
    scope: str = Field(..., min_length=10, max_length=2000)


class ProjectUpdate(PatchBody):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    client: Optional[str] = Field(None, min_length=2, max_length=100)
    scope: Optional[str] = Field(None, min_length=10, max_length=2000)


class ProjectRead(BaseModel):
    id: str
    name: str
    client: str
    scope: str
    image: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
