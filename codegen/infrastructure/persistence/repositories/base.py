"""Base repository: insert for one model."""

from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from codegen.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository bound to one session and one model.

    Subclasses add their own queries; all work joins the session's
    current transaction and never commits.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and load server-generated columns."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
