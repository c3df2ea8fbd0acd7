"""Applications API — public submission with resume upload, admin review."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.api.uploads import read_upload
from pipecraft.auth.dependencies import IdentityContext, require_admin
from pipecraft.config import Settings, get_settings
from pipecraft.db.engine import get_db
from pipecraft.errors import envelope
from pipecraft.schemas.application import (
    ApplicationCreate,
    ApplicationRead,
    CareerApplications,
)
from pipecraft.schemas.career import CareerRead
from pipecraft.schemas.common import parse_form
from pipecraft.services.application_service import ApplicationService
from pipecraft.storage.lifecycle import BlobLifecycle, get_blob_lifecycle

router = APIRouter(prefix="/applications")


def _svc(
    db: AsyncSession = Depends(get_db),
    blobs: BlobLifecycle = Depends(get_blob_lifecycle),
) -> ApplicationService:
    return ApplicationService(db, blobs)


@router.post("", status_code=201)
async def submit_application(
    career_id: str = Form(...),
    applicant_name: str = Form(...),
    applicant_email: str = Form(...),
    applicant_phone: Optional[str] = Form(None),
    cover_letter: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    svc: ApplicationService = Depends(_svc),
    settings: Settings = Depends(get_settings),
):
    body = parse_form(
        ApplicationCreate,
        {
            "career_id": career_id,
            "applicant_name": applicant_name,
            "applicant_email": applicant_email,
            "applicant_phone": applicant_phone,
            "cover_letter": cover_letter,
        },
    )
    application = await svc.submit(
        body.model_dump(), resume=await read_upload(resume, settings)
    )
    return envelope(
        "Application submitted successfully",
        ApplicationRead.model_validate(application),
    )


@router.get("")
async def list_applications(
    career_id: Optional[str] = Query(None),
    _admin: IdentityContext = Depends(require_admin),
    svc: ApplicationService = Depends(_svc),
):
    applications = await svc.list_applications(career_id)
    return envelope(
        "Applications retrieved successfully",
        [ApplicationRead.model_validate(a) for a in applications],
    )


@router.get("/career/{career_id}")
async def list_applications_for_career(
    career_id: str,
    _admin: IdentityContext = Depends(require_admin),
    svc: ApplicationService = Depends(_svc),
):
    career, applications = await svc.list_for_career(career_id)
    return envelope(
        "Applications retrieved successfully",
        CareerApplications(
            job=CareerRead.model_validate(career),
            applications=[ApplicationRead.model_validate(a) for a in applications],
            total_applications=len(applications),
        ),
    )


@router.get("/{application_id}")
async def get_application(
    application_id: str,
    _admin: IdentityContext = Depends(require_admin),
    svc: ApplicationService = Depends(_svc),
):
    application = await svc.get_application(application_id)
    return envelope(
        "Application retrieved successfully",
        ApplicationRead.model_validate(application),
    )


@router.delete("/{application_id}")
async def delete_application(
    application_id: str,
    _admin: IdentityContext = Depends(require_admin),
    svc: ApplicationService = Depends(_svc),
):
    await svc.delete_application(application_id)
    return envelope("Application deleted successfully", {})
