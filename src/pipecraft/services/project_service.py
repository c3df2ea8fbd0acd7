"""Project service — portfolio projects and their cover images.

Learn: The image is the blob field. Creating uploads it before the row is
inserted; updating uploads the replacement, commits the row, then
best-effort deletes the old object; deleting removes the row first and
the object after.
"""

from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.db.models import Project, new_id
from pipecraft.services.patch import PartialUpdateBuilder
from pipecraft.services.records import get_or_404
from pipecraft.storage.blob import object_key
from pipecraft.storage.lifecycle import BlobLifecycle, UploadedFile

logger = structlog.get_logger()

PROJECT_NOT_FOUND = "Project not found"

project_patch = PartialUpdateBuilder(
    Project,
    fields=("name", "client", "scope"),
    blob_field="image",
    not_found=PROJECT_NOT_FOUND,
)


class ProjectService:
    def __init__(self, db: AsyncSession, blobs: BlobLifecycle):
        self.db = db
        self.blobs = blobs

    async def create_project(
        self, fields: dict[str, Any], image: Optional[UploadedFile] = None
    ) -> Project:
        project_id = new_id("PRJ")
        image_ref = None
        if image is not None:
            image_ref = await self.blobs.create(
                image, object_key("projects", project_id, image.filename)
            )
        project = Project(id=project_id, image=image_ref, **fields)
        self.db.add(project)
        await self.db.commit()
        logger.info("project.created", project_id=project_id, has_image=image_ref is not None)
        return project

    async def list_projects(self) -> list[Project]:
        result = await self.db.execute(
            select(Project).order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_project(self, project_id: str) -> Project:
        return await get_or_404(self.db, Project, project_id, PROJECT_NOT_FOUND)

    async def update_project(
        self,
        project_id: str,
        changes: dict[str, Any],
        image: Optional[UploadedFile] = None,
    ) -> Project:
        project = await self.get_project(project_id)
        current_image = project.image

        key = object_key("projects", project_id, image.filename) if image else None
        async with self.blobs.replace(current_image, image, key) as new_image:
            updated = await project_patch.apply(
                self.db,
                project_id,
                changes,
                current_blob=current_image,
                new_blob=new_image,
            )
            await self.db.commit()
        logger.info("project.updated", project_id=project_id, fields=sorted(changes))
        return updated

    async def delete_project(self, project_id: str) -> None:
        project = await self.get_project(project_id)
        image = project.image
        await self.db.delete(project)
        await self.db.commit()
        await self.blobs.remove_for_deleted_record(image)
        logger.info("project.deleted", project_id=project_id)
