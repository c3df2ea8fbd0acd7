"""Services API — the service catalog. Reading is public, writing is admin only."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.auth.dependencies import IdentityContext, require_admin
from pipecraft.db.engine import get_db
from pipecraft.errors import envelope
from pipecraft.schemas.service import ServiceCreate, ServiceRead, ServiceUpdate
from pipecraft.services.catalog_service import CatalogService

router = APIRouter(prefix="/services")


def _svc(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


@router.get("")
async def list_services(
    is_active: Optional[bool] = Query(None),
    svc: CatalogService = Depends(_svc),
):
    services = await svc.list_services(is_active=is_active)
    return envelope(
        "Services retrieved successfully",
        [ServiceRead.model_validate(s) for s in services],
    )


@router.get("/{service_id}")
async def get_service(service_id: str, svc: CatalogService = Depends(_svc)):
    service = await svc.get_service(service_id)
    return envelope("Service retrieved successfully", ServiceRead.model_validate(service))


@router.post("", status_code=201)
async def create_service(
    body: ServiceCreate,
    _admin: IdentityContext = Depends(require_admin),
    svc: CatalogService = Depends(_svc),
):
    service = await svc.create_service(body.model_dump())
    return envelope("Service created successfully", ServiceRead.model_validate(service))


@router.put("/{service_id}")
async def update_service(
    service_id: str,
    body: ServiceUpdate,
    _admin: IdentityContext = Depends(require_admin),
    svc: CatalogService = Depends(_svc),
):
    service = await svc.update_service(service_id, body.changes())
    return envelope("Service updated successfully", ServiceRead.model_validate(service))


@router.delete("/{service_id}")
async def delete_service(
    service_id: str,
    _admin: IdentityContext = Depends(require_admin),
    svc: CatalogService = Depends(_svc),
):
    await svc.delete_service(service_id)
    return envelope("Service deleted successfully", {})
