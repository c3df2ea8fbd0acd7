"""Application service — candidates applying to job postings.

Learn: Submitting is public. The posting must exist, be active and not
past its deadline; only then is the resume uploaded and the row written.
If the insert fails after the upload, the resume is removed again on a
best-effort basis.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.db.models import Application, Career, new_id, utcnow
from pipecraft.errors import ValidationError
from pipecraft.services.career_service import CAREER_NOT_FOUND
from pipecraft.services.records import get_or_404
from pipecraft.storage.blob import object_key
from pipecraft.storage.lifecycle import BlobLifecycle, UploadedFile

logger = structlog.get_logger()

APPLICATION_NOT_FOUND = "Application not found"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class ApplicationService:
    def __init__(self, db: AsyncSession, blobs: BlobLifecycle):
        self.db = db
        self.blobs = blobs

    async def submit(
        self, fields: dict[str, Any], resume: Optional[UploadedFile]
    ) -> Application:
        career = await get_or_404(self.db, Career, fields["career_id"], CAREER_NOT_FOUND)

        if not career.is_active:
            raise ValidationError("This job posting is no longer accepting applications")
        if career.application_deadline and _as_utc(career.application_deadline) < utcnow():
            raise ValidationError("Application deadline has passed")
        if resume is None:
            raise ValidationError("Resume file is required")

        application_id = new_id("APP")
        resume_link = await self.blobs.create(
            resume, object_key("resumes", application_id, resume.filename)
        )
        application = Application(id=application_id, resume_link=resume_link, **fields)
        self.db.add(application)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            await self.blobs.remove_for_deleted_record(resume_link)
            raise
        logger.info("application.submitted", application_id=application_id, career_id=career.id)
        return application

    async def list_applications(self, career_id: Optional[str] = None) -> list[Application]:
        query = select(Application).order_by(Application.applied_at.desc())
        if career_id:
            query = query.where(Application.career_id == career_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_for_career(self, career_id: str) -> tuple[Career, list[Application]]:
        career = await get_or_404(self.db, Career, career_id, CAREER_NOT_FOUND)
        return career, await self.list_applications(career_id)

    async def get_application(self, application_id: str) -> Application:
        return await get_or_404(self.db, Application, application_id, APPLICATION_NOT_FOUND)

    async def delete_application(self, application_id: str) -> None:
        application = await self.get_application(application_id)
        resume = application.resume_link
        await self.db.delete(application)
        await self.db.commit()
        await self.blobs.remove_for_deleted_record(resume)
        logger.info("application.deleted", application_id=application_id)
