"""Career service — job postings."""

from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.db.models import Career, new_id
from pipecraft.services.patch import PartialUpdateBuilder
from pipecraft.services.records import get_or_404

logger = structlog.get_logger()

CAREER_NOT_FOUND = "Job posting not found"

career_patch = PartialUpdateBuilder(
    Career,
    fields=(
        "job_title",
        "department",
        "location",
        "job_type",
        "experience_level",
        "description",
        "responsibilities",
        "requirements",
        "qualifications",
        "salary",
        "is_active",
        "number_of_positions",
        "application_deadline",
    ),
    not_found=CAREER_NOT_FOUND,
)


class CareerService:
    """Business logic for job postings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_career(self, fields: dict[str, Any]) -> Career:
        career = Career(id=new_id("CAR"), **fields)
        self.db.add(career)
        await self.db.commit()
        logger.info("career.created", career_id=career.id)
        return career

    async def list_careers(
        self,
        is_active: Optional[bool] = None,
        department: Optional[str] = None,
        job_type: Optional[str] = None,
        experience_level: Optional[str] = None,
    ) -> list[Career]:
        """List postings, newest first, optionally filtered."""
        query = select(Career).order_by(Career.created_at.desc())
        if is_active is not None:
            query = query.where(Career.is_active == is_active)
        if department:
            query = query.where(Career.department == department)
        if job_type:
            query = query.where(Career.job_type == job_type)
        if experience_level:
            query = query.where(Career.experience_level == experience_level)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_career(self, career_id: str) -> Career:
        return await get_or_404(self.db, Career, career_id, CAREER_NOT_FOUND)

    async def update_career(self, career_id: str, changes: dict[str, Any]) -> Career:
        await self.get_career(career_id)
        career = await career_patch.apply(self.db, career_id, changes)
        await self.db.commit()
        logger.info("career.updated", career_id=career_id, fields=sorted(changes))
        return career

    async def delete_career(self, career_id: str) -> None:
        career = await self.get_career(career_id)
        await self.db.delete(career)
        await self.db.commit()
        logger.info("career.deleted", career_id=career_id)
