"""Careers API — job postings. Reading is public, writing is admin only."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.auth.dependencies import IdentityContext, require_admin
from pipecraft.db.engine import get_db
from pipecraft.errors import envelope
from pipecraft.schemas.career import CareerCreate, CareerRead, CareerUpdate
from pipecraft.services.career_service import CareerService

router = APIRouter(prefix="/careers")


def _svc(db: AsyncSession = Depends(get_db)) -> CareerService:
    return CareerService(db)


@router.get("")
async def list_careers(
    is_active: Optional[bool] = Query(None),
    department: Optional[str] = Query(None),
    job_type: Optional[str] = Query(None),
    experience_level: Optional[str] = Query(None),
    svc: CareerService = Depends(_svc),
):
    careers = await svc.list_careers(
        is_active=is_active,
        department=department,
        job_type=job_type,
        experience_level=experience_level,
    )
    return envelope(
        "Job postings retrieved successfully",
        [CareerRead.model_validate(c) for c in careers],
    )


@router.get("/{career_id}")
async def get_career(career_id: str, svc: CareerService = Depends(_svc)):
    career = await svc.get_career(career_id)
    return envelope("Job posting retrieved successfully", CareerRead.model_validate(career))


@router.post("", status_code=201)
async def create_career(
    body: CareerCreate,
    _admin: IdentityContext = Depends(require_admin),
    svc: CareerService = Depends(_svc),
):
    career = await svc.create_career(body.model_dump())
    return envelope("Job posting created successfully", CareerRead.model_validate(career))


@router.put("/{career_id}")
async def update_career(
    career_id: str,
    body: CareerUpdate,
    _admin: IdentityContext = Depends(require_admin),
    svc: CareerService = Depends(_svc),
):
    career = await svc.update_career(career_id, body.changes())
    return envelope("Job posting updated successfully", CareerRead.model_validate(career))


@router.delete("/{career_id}")
async def delete_career(
    career_id: str,
    _admin: IdentityContext = Depends(require_admin),
    svc: CareerService = Depends(_svc),
):
    await svc.delete_career(career_id)
    return envelope("Job posting deleted successfully", {})
