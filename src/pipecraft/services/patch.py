"""Partial updates — turn a sparse payload into one atomic UPDATE.

Learn: Every updatable resource (user profile, job posting, contact,
project, service) is patched the same way:

1. Each whitelisted field that is PRESENT in the payload goes into the
   changeset, even if its value equals what is stored.
2. The blob field (avatar, image) only goes in when its new ref differs
   from the stored one.
3. updated_at is always stamped.
4. A changeset with nothing but updated_at is rejected before the
   database is touched.
5. The changeset is sent as a single UPDATE … RETURNING, so the caller
   gets the post-update row without a second read.

"Present" means the key exists in the payload — False, 0 and "" are real
values. Pydantic's model_dump(exclude_unset=True) produces exactly that.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Generic, Optional, TypeVar

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.db.models import Base, utcnow
from pipecraft.errors import ConflictError, NotFoundError, ValidationError

ModelT = TypeVar("ModelT", bound=Base)

NO_FIELDS_MESSAGE = "No fields to update"


async def patch_record(
    db: AsyncSession,
    model: type[ModelT],
    record_id: str,
    changeset: Mapping[str, Any],
    not_found: str = "Record not found",
    conflict: str = "Record already exists",
) -> ModelT:
    """Apply a changeset to one row atomically and return the updated row."""
    stmt = (
        update(model)
        .where(model.id == record_id)
        .values(**changeset)
        .returning(model)
        .execution_options(populate_existing=True)
    )
    try:
        result = await db.execute(stmt)
    except IntegrityError as e:
        # A unique constraint rejected the new values
        await db.rollback()
        raise ConflictError(conflict) from e
    row = result.scalars().first()
    if row is None:
        raise NotFoundError(not_found)
    return row


class PartialUpdateBuilder(Generic[ModelT]):
    """Builds and applies patches for one model over a field whitelist."""

    def __init__(
        self,
        model: type[ModelT],
        fields: Iterable[str],
        blob_field: Optional[str] = None,
        not_found: str = "Record not found",
        conflict: str = "Record already exists",
    ):
        self.model = model
        self.fields = tuple(fields)
        self.blob_field = blob_field
        self.not_found = not_found
        self.conflict = conflict

    def build(
        self,
        payload: Mapping[str, Any],
        *,
        current_blob: Optional[str] = None,
        new_blob: Optional[str] = None,
    ) -> dict[str, Any]:
        """Compute the changeset. Raises ValidationError if it would be empty."""
        changeset = {name: payload[name] for name in self.fields if name in payload}

        if self.blob_field and new_blob is not None and new_blob != current_blob:
            changeset[self.blob_field] = new_blob

        if not changeset:
            raise ValidationError(NO_FIELDS_MESSAGE)

        changeset["updated_at"] = utcnow()
        return changeset

    async def apply(
        self,
        db: AsyncSession,
        record_id: str,
        payload: Mapping[str, Any],
        *,
        current_blob: Optional[str] = None,
        new_blob: Optional[str] = None,
    ) -> ModelT:
        """Build the changeset and persist it in one statement."""
        changeset = self.build(payload, current_blob=current_blob, new_blob=new_blob)
        return await patch_record(
            db,
            self.model,
            record_id,
            changeset,
            not_found=self.not_found,
            conflict=self.conflict,
        )
