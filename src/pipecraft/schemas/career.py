"""Pydantic schemas for job postings."""

from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, Field

from pipecraft.schemas.common import PatchBody

JobType = Literal["Full-time", "Part-time", "Contract", "Internship"]
ExperienceLevel = Literal["Entry Level", "Mid Level", "Senior Level", "Lead"]

ListItem = Annotated[str, Field(min_length=2, max_length=500)]


class Salary(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"


class CareerCreate(BaseModel):
    job_title: str = Field(..., min_length=2, max_length=100)
    department: str = Field(..., min_length=2, max_length=100)
    location: str = Field(..., min_length=2, max_length=100)
    job_type: JobType
    experience_level: ExperienceLevel
    description: str = Field(..., min_length=10, max_length=5000)
    responsibilities: list[ListItem]
    requirements: list[ListItem]
    qualifications: Optional[list[ListItem]] = None
    salary: Optional[Salary] = None
    is_active: bool = True
    number_of_positions: int = Field(1, gt=0)
    application_deadline: Optional[datetime] = None


class CareerUpdate(PatchBody):
    nullable_fields = frozenset(
        {"qualifications", "salary", "application_deadline"}
    )

    job_title: Optional[str] = Field(None, min_length=2, max_length=100)
    department: Optional[str] = Field(None, min_length=2, max_length=100)
    location: Optional[str] = Field(None, min_length=2, max_length=100)
    job_type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    description: Optional[str] = Field(None, min_length=10, max_length=5000)
    responsibilities: Optional[list[ListItem]] = None
    requirements: Optional[list[ListItem]] = None
    qualifications: Optional[list[ListItem]] = None
    salary: Optional[Salary] = None
    is_active: Optional[bool] = None
    number_of_positions: Optional[int] = Field(None, gt=0)
    application_deadline: Optional[datetime] = None


class CareerRead(BaseModel):
    id: str
    job_title: str
    department: str
    location: str
    job_type: str
    experience_level: str
    description: str
    responsibilities: list[str]
    requirements: list[str]
    qualifications: Optional[list[str]] = None
    salary: Optional[Salary] = None
    is_active: bool
    number_of_positions: int
    application_deadline: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
