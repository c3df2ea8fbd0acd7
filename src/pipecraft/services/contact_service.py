"""Contact service — submissions from the public contact form."""

from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.db.models import Contact, new_id
from pipecraft.services.patch import PartialUpdateBuilder
from pipecraft.services.records import get_or_404

logger = structlog.get_logger()

CONTACT_NOT_FOUND = "Contact not found"

contact_patch = PartialUpdateBuilder(
    Contact,
    fields=("name", "email", "phone", "company_name", "service_interested", "message"),
    not_found=CONTACT_NOT_FOUND,
)


class ContactService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_contact(self, fields: dict[str, Any]) -> Contact:
        contact = Contact(id=new_id("CNT"), **fields)
        self.db.add(contact)
        await self.db.commit()
        logger.info("contact.created", contact_id=contact.id)
        return contact

    async def list_contacts(self) -> list[Contact]:
        result = await self.db.execute(
            select(Contact).order_by(Contact.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_contact(self, contact_id: str) -> Contact:
        return await get_or_404(self.db, Contact, contact_id, CONTACT_NOT_FOUND)

    async def update_contact(self, contact_id: str, changes: dict[str, Any]) -> Contact:
        await self.get_contact(contact_id)
        contact = await contact_patch.apply(self.db, contact_id, changes)
        await self.db.commit()
        return contact

    async def delete_contact(self, contact_id: str) -> None:
        contact = await self.get_contact(contact_id)
        await self.db.delete(contact)
        await self.db.commit()
        logger.info("contact.deleted", contact_id=contact_id)
