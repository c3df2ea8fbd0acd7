"""Pydantic schemas for contact-form submissions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from pipecraft.schemas.common import EMAIL_PATTERN, PatchBody


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, min_length=7, max_length=15)
    company_name: Optional[str] = Field(None, min_length=2, max_length=100)
    service_interested: Optional[str] = Field(None, min_length=2, max_length=100)
    message: str = Field(..., min_length=10, max_length=1000)


class ContactUpdate(PatchBody):
    nullable_fields = frozenset({"phone", "company_name", "service_interested"})

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[str] = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, min_length=7, max_length=15)
    company_name: Optional[str] = Field(None, min_length=2, max_length=100)
    service_interested: Optional[str] = Field(None, min_length=2, max_length=100)
    message: Optional[str] = Field(None, min_length=10, max_length=1000)


class ContactRead(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    company_name: Optional[str] = None
    service_interested: Optional[str] = None
    message: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
