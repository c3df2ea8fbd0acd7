"""Blob lifecycle — how uploaded files follow the records that point at them.

Learn: The database and the object store are not transactional with each
other, so the order of operations decides what can go wrong:

- replace: upload the new object FIRST, let the caller mutate and commit
  the record, and only then delete the old object. If the upload fails
  nothing changed. If the record mutation fails the fresh upload is
  removed again and the old object stays, so the row never points at a
  deleted object. If the final delete fails the old object is orphaned,
  which is logged and tolerated.
- remove_for_deleted_record: best-effort delete, same tolerance.

Orphaned objects are a known, visible (logged) failure mode; they are
never reported to the caller as a failed request.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import structlog
from fastapi import Depends

from pipecraft.errors import DependencyError
from pipecraft.storage.blob import BlobStore, get_blob_store, key_from_ref

logger = structlog.get_logger()


@dataclass(frozen=True)
class UploadedFile:
    """A file received with a request, already read into memory."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class BlobLifecycle:
    """Coordinates uploads and deletions for blob refs held by records."""

    def __init__(self, store: BlobStore):
        self.store = store

    async def create(self, file: UploadedFile, key: str) -> str:
        """Plain upload for a new record. Returns the new ref."""
        try:
            ref = await self.store.upload(key, file.content, file.content_type)
        except Exception as e:
            logger.error("blob.upload_failed", key=key, error=str(e))
            raise DependencyError("File upload failed") from e
        logger.info("blob.uploaded", key=key, size=len(file.content))
        return ref

    @asynccontextmanager
    async def replace(
        self, old_ref: Optional[str], file: Optional[UploadedFile], key: Optional[str]
    ) -> AsyncIterator[Optional[str]]:
        """Upload a replacement and yield its ref (None when there is no file).

        The body of the ``async with`` block must persist the record. The
        old object is deleted only after the block succeeds; if the block
        raises, the fresh upload is deleted instead.

            async with blobs.replace(user.avatar, upload, key) as new_ref:
                await user_patch.apply(db, user.id, changes, new_blob=new_ref)
                await db.commit()
        """
        if file is None or key is None:
            yield None
            return

        new_ref = await self.create(file, key)
        # Same key means the upload overwrote the old object in place
        same_object = old_ref is not None and key_from_ref(old_ref) == key
        try:
            yield new_ref
        except Exception:
            if not same_object:
                await self._delete_quietly(key, reason="mutation_failed")
            raise
        if old_ref and not same_object:
            await self._delete_quietly(key_from_ref(old_ref), reason="replaced")

    async def remove_for_deleted_record(self, ref: Optional[str]) -> None:
        """Best-effort delete of a deleted record's file."""
        if ref:
            await self._delete_quietly(key_from_ref(ref), reason="record_deleted")

    async def _delete_quietly(self, key: str, reason: str) -> None:
        try:
            await self.store.delete(key)
        except Exception as e:
            # The record state is already settled; leave the orphan, log it
            logger.warning("blob.delete_failed", key=key, reason=reason, error=str(e))
            return
        logger.info("blob.deleted", key=key, reason=reason)


def get_blob_lifecycle(store: BlobStore = Depends(get_blob_store)) -> BlobLifecycle:
    """FastAPI dependency."""
    return BlobLifecycle(store)
