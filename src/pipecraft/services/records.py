"""Small helpers shared by the resource services."""

from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.db.models import Base
from pipecraft.errors import NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


async def get_or_404(
    db: AsyncSession, model: type[ModelT], record_id: str, message: str
) -> ModelT:
    result = await db.execute(
        select(model)
        .where(model.id == record_id)
        .execution_options(populate_existing=True)
    )
    record = result.scalars().first()
    if record is None:
        raise NotFoundError(message)
    return record
