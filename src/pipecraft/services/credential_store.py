"""Credential store — persistence for user identities.

Learn: The one guarantee that must hold under concurrent registrations
("one user per email") is enforced by the UNIQUE constraint on
users.email. create() just inserts and translates the constraint
violation; there is no check-then-insert window.

Reads use populate_existing so that a session that already holds a User
(e.g. across requests in one test session) always sees the stored row,
refresh_token included.
"""

from collections.abc import Mapping
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.db.models import User
from pipecraft.errors import ConflictError
from pipecraft.services.patch import patch_record

USER_NOT_FOUND = "User not found"
EMAIL_TAKEN = "Email already exists"


class CredentialStore:
    """Data access for the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user: User) -> User:
        """Insert a user; ConflictError if the email is already registered."""
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(EMAIL_TAKEN) from e
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User)
            .where(User.email == email)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def find_by_id(self, user_id: str) -> Optional[User]:
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def email_taken(self, email: str) -> bool:
        """Non-atomic pre-check used by profile edits (may race; see DESIGN.md)."""
        return await self.find_by_email(email) is not None

    async def list_all(self) -> list[User]:
        result = await self.db.execute(
            select(User)
            .order_by(User.created_at)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def patch(self, user_id: str, changeset: Mapping[str, Any]) -> User:
        """Apply a field-level mutation; NotFoundError if the user is gone."""
        return await patch_record(
            self.db,
            User,
            user_id,
            changeset,
            not_found=USER_NOT_FOUND,
            conflict=EMAIL_TAKEN,
        )

    async def delete(self, user_id: str) -> bool:
        result = await self.db.execute(delete(User).where(User.id == user_id))
        return result.rowcount > 0
