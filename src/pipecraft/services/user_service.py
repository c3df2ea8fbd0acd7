"""User administration — list, edit and delete accounts (admin only).

Learn: Profile edits go through the same PartialUpdateBuilder as every
other resource. The avatar is the blob field: a new upload replaces the
old object (upload, commit the row, then best-effort delete the old one),
and the avatar column is only written when the ref actually changed.
"""

from typing import Any, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.db.models import User
from pipecraft.errors import ConflictError, NotFoundError
from pipecraft.services.credential_store import (
    EMAIL_TAKEN,
    USER_NOT_FOUND,
    CredentialStore,
)
from pipecraft.services.patch import PartialUpdateBuilder
from pipecraft.storage.blob import object_key
from pipecraft.storage.lifecycle import BlobLifecycle, UploadedFile

logger = structlog.get_logger()

user_patch = PartialUpdateBuilder(
    User,
    fields=("name", "email", "phone", "age"),
    blob_field="avatar",
    not_found=USER_NOT_FOUND,
    conflict=EMAIL_TAKEN,
)


class UserService:
    """Business logic for account administration."""

    def __init__(self, db: AsyncSession, blobs: BlobLifecycle):
        self.db = db
        self.store = CredentialStore(db)
        self.blobs = blobs

    async def list_users(self) -> list[User]:
        return await self.store.list_all()

    async def get_user(self, user_id: str) -> User:
        user = await self.store.find_by_id(user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    async def update_user(
        self,
        user_id: str,
        changes: dict[str, Any],
        avatar: Optional[UploadedFile] = None,
    ) -> User:
        user = await self.get_user(user_id)

        # Read-then-write: two concurrent edits can both pass this check,
        # the unique constraint then rejects the loser in user_patch.apply().
        new_email = changes.get("email")
        if new_email and new_email != user.email and await self.store.email_taken(new_email):
            raise ConflictError(EMAIL_TAKEN)

        current_avatar = user.avatar
        key = object_key("avatars", user_id, avatar.filename) if avatar else None
        async with self.blobs.replace(current_avatar, avatar, key) as new_avatar:
            updated = await user_patch.apply(
                self.db,
                user_id,
                changes,
                current_blob=current_avatar,
                new_blob=new_avatar,
            )
            await self.db.commit()
        logger.info("user.updated", user_id=user_id, fields=sorted(changes))
        return updated

    async def delete_user(self, user_id: str) -> None:
        user = await self.get_user(user_id)
        avatar = user.avatar
        await self.store.delete(user_id)
        await self.db.commit()
        await self.blobs.remove_for_deleted_record(avatar)
        logger.info("user.deleted", user_id=user_id)
