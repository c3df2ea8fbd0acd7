"""Catalog service — the service offerings listed on the site.

Learn: Titles are kept unique with a read-then-write check, like the
original API did. Two concurrent creates with the same title can both
pass it; that is accepted for content managed by a handful of admins.
"""

from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.db.models import Service, new_id
from pipecraft.errors import ConflictError
from pipecraft.services.patch import PartialUpdateBuilder
from pipecraft.services.records import get_or_404

logger = structlog.get_logger()

SERVICE_NOT_FOUND = "Service not found"
TITLE_TAKEN = "Service with this title already exists"

service_patch = PartialUpdateBuilder(
    Service,
    fields=("title", "description", "features", "is_active"),
    not_found=SERVICE_NOT_FOUND,
)


class CatalogService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _title_taken(self, title: str) -> bool:
        result = await self.db.execute(select(Service.id).where(Service.title == title))
        return result.first() is not None

    async def create_service(self, fields: dict[str, Any]) -> Service:
        if await self._title_taken(fields["title"]):
            raise ConflictError(TITLE_TAKEN)
        service = Service(id=new_id("SRV"), **fields)
        self.db.add(service)
        await self.db.commit()
        logger.info("service.created", service_id=service.id)
        return service

    async def list_services(self, is_active: Optional[bool] = None) -> list[Service]:
        query = select(Service).order_by(Service.created_at.desc())
        if is_active is not None:
            query = query.where(Service.is_active == is_active)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_service(self, service_id: str) -> Service:
        return await get_or_404(self.db, Service, service_id, SERVICE_NOT_FOUND)

    async def update_service(self, service_id: str, changes: dict[str, Any]) -> Service:
        service = await self.get_service(service_id)
        title = changes.get("title")
        if title and title != service.title and await self._title_taken(title):
            raise ConflictError(TITLE_TAKEN)
        updated = await service_patch.apply(self.db, service_id, changes)
        await self.db.commit()
        logger.info("service.updated", service_id=service_id, fields=sorted(changes))
        return updated

    async def delete_service(self, service_id: str) -> None:
        service = await self.get_service(service_id)
        await self.db.delete(service)
        await self.db.commit()
        logger.info("service.deleted", service_id=service_id)
