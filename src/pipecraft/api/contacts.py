"""Contacts API — anyone can submit the contact form, admins manage it."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.auth.dependencies import IdentityContext, require_admin
from pipecraft.db.engine import get_db
from pipecraft.errors import envelope
from pipecraft.schemas.contact import ContactCreate, ContactRead, ContactUpdate
from pipecraft.services.contact_service import ContactService

router = APIRouter(prefix="/contacts")


def _svc(db: AsyncSession = Depends(get_db)) -> ContactService:
    return ContactService(db)


@router.post("", status_code=201)
async def create_contact(body: ContactCreate, svc: ContactService = Depends(_svc)):
    contact = await svc.create_contact(body.model_dump())
    return envelope("Contact created successfully", ContactRead.model_validate(contact))


@router.get("/all")
async def list_contacts(
    _admin: IdentityContext = Depends(require_admin),
    svc: ContactService = Depends(_svc),
):
    contacts = await svc.list_contacts()
    return envelope(
        "Contacts retrieved successfully",
        [ContactRead.model_validate(c) for c in contacts],
    )


@router.get("/{contact_id}")
async def get_contact(
    contact_id: str,
    _admin: IdentityContext = Depends(require_admin),
    svc: ContactService = Depends(_svc),
):
    contact = await svc.get_contact(contact_id)
    return envelope("Contact retrieved successfully", ContactRead.model_validate(contact))


@router.put("/{contact_id}")
async def update_contact(
    contact_id: str,
    body: ContactUpdate,
    _admin: IdentityContext = Depends(require_admin),
    svc: ContactService = Depends(_svc),
):
    contact = await svc.update_contact(contact_id, body.changes())
    return envelope("Contact updated successfully", ContactRead.model_validate(contact))


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: str,
    _admin: IdentityContext = Depends(require_admin),
    svc: ContactService = Depends(_svc),
):
    await svc.delete_contact(contact_id)
    return envelope("Contact deleted successfully", {})
