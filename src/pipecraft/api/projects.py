"""Projects API — portfolio entries with an optional cover image.

Learn: Create and update take multipart form data so the image can ride
along with the text fields.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.api.uploads import read_upload
from pipecraft.auth.dependencies import IdentityContext, require_admin
from pipecraft.config import Settings, get_settings
from pipecraft.db.engine import get_db
from pipecraft.errors import envelope
from pipecraft.schemas.common import parse_form
from pipecraft.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from pipecraft.services.project_service import ProjectService
from pipecraft.storage.lifecycle import BlobLifecycle, get_blob_lifecycle

router = APIRouter(prefix="/projects")


def _svc(
    db: AsyncSession = Depends(get_db),
    blobs: BlobLifecycle = Depends(get_blob_lifecycle),
) -> ProjectService:
    return ProjectService(db, blobs)


@router.get("")
async def list_projects(svc: ProjectService = Depends(_svc)):
    projects = await svc.list_projects()
    return envelope(
        "Projects retrieved successfully",
        [ProjectRead.model_validate(p) for p in projects],
    )


@router.get("/{project_id}")
async def get_project(project_id: str, svc: ProjectService = Depends(_svc)):
    project = await svc.get_project(project_id)
    return envelope("Project retrieved successfully", ProjectRead.model_validate(project))


@router.post("", status_code=201)
async def create_project(
    name: str = Form(...),
    client: str = Form(...),
    scope: str = Form(...),
    image: Optional[UploadFile] = File(None),
    _admin: IdentityContext = Depends(require_admin),
    svc: ProjectService = Depends(_svc),
    settings: Settings = Depends(get_settings),
):
    body = parse_form(ProjectCreate, {"name": name, "client": client, "scope": scope})
    project = await svc.create_project(
        body.model_dump(), image=await read_upload(image, settings)
    )
    return envelope("Project created successfully", ProjectRead.model_validate(project))


@router.put("/{project_id}")
async def update_project(
    project_id: str,
    name: Optional[str] = Form(None),
    client: Optional[str] = Form(None),
    scope: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    _admin: IdentityContext = Depends(require_admin),
    svc: ProjectService = Depends(_svc),
    settings: Settings = Depends(get_settings),
):
    body = parse_form(ProjectUpdate, {"name": name, "client": client, "scope": scope})
    project = await svc.update_project(
        project_id, body.changes(), image=await read_upload(image, settings)
    )
    return envelope("Project updated successfully", ProjectRead.model_validate(project))


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    _admin: IdentityContext = Depends(require_admin),
    svc: ProjectService = Depends(_svc),
):
    await svc.delete_project(project_id)
    return envelope("Project deleted successfully", {})
