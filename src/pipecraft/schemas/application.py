"""Pydantic schemas for job applications."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from pipecraft.schemas.career import CareerRead
from pipecraft.schemas.common import EMAIL_PATTERN


class ApplicationCreate(BaseModel):
    career_id: str = Field(..., min_length=1)
    applicant_name: str = Field(..., min_length=2, max_length=100)
    applicant_email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    applicant_phone: Optional[str] = Field(None, min_length=7, max_length=15)
    cover_letter: Optional[str] = Field(None, min_length=10, max_length=5000)


class ApplicationRead(BaseModel):
    id: str
    career_id: str
    applicant_name: str
    applicant_email: str
    applicant_phone: Optional[str] = None
    resume_link: str
    cover_letter: Optional[str] = None
    applied_at: datetime

    model_config = {"from_attributes": True}


class CareerApplications(BaseModel):
    job: CareerRead
    applications: list[ApplicationRead]
    total_applications: int
