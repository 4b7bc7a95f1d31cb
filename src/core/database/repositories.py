from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from loggers import get_logger
from src.core.database.base import Base as SQLAlchemyBase
from src.core.pagination.schemas import calculate_offset

logger = get_logger(__name__)

T = TypeVar("T", bound=SQLAlchemyBase)


class BaseRepository(Generic[T]):
    """Base repository with common SQLAlchemy operations using context-managed sessions.

    Lookups that find nothing return ``None``. Any other storage failure is
    re-raised unchanged, so callers can tell an absent row from a failed query.
    """

    model: type[T]

    def __init__(self) -> None:
        if not hasattr(self, "model"):
            raise NotImplementedError("Subclasses must define class variable 'model'")

    async def create(
        self, session: AsyncSession, data: dict[str, Any], commit: bool = False
    ) -> T:
        """Create a new record using the provided session."""
        try:
            instance = self.model(**data)
            session.add(instance)
            if commit:
                await session.commit()
                await session.refresh(instance)
                logger.info("%s created successfully [Committed].", self.model.__name__)
            else:
                logger.debug(
                    "%s created [Staged, pending commit].", self.model.__name__
                )
            return instance
        except (IntegrityError, SQLAlchemyError):
            if commit:
                await session.rollback()
            raise

    async def get_single(self, session: AsyncSession, **filters: Any) -> T | None:
        """Retrieve a single record using the provided session."""
        query = select(self.model).filter_by(**filters).limit(1)
        result = await session.execute(query)
        return result.scalars().first()

    async def get_paginated_list(
        self,
        session: AsyncSession,
        page: int,
        limit: int,
        **filters: Any,
    ) -> tuple[list[T], int]:
        """Retrieve one page of records in creation order plus the filtered total.

        The count runs first. A page that starts past the last matching record
        is returned empty without issuing the offset query, so arbitrarily large
        page numbers never reach the database.
        """
        if page < 1:
            raise ValueError("page must be greater than or equal to 1")
        if limit < 1:
            raise ValueError("limit must be greater than or equal to 1")

        total = await self.count(session, **filters)
        offset = calculate_offset(page, limit)
        if offset >= total:
            return [], total

        query = (
            select(self.model)
            .filter_by(**filters)
            .order_by(self._creation_order())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(query)
        return list(result.scalars().all()), total

    async def count(self, session: AsyncSession, **filters: Any) -> int:
        """Count records matching the provided filters using the given session."""
        query = select(func.count()).select_from(self.model).filter_by(**filters)
        result = await session.execute(query)
        return int(result.scalar_one())

    async def update(
        self,
        session: AsyncSession,
        data: dict[str, Any],
        commit: bool = False,
        **filters: Any,
    ) -> T | None:
        """Update a record using the provided session."""
        self._ensure_filters_present(filters)
        try:
            query = select(self.model).filter_by(**filters)
            result = await session.execute(query)
            instance = result.scalars().first()
            if instance is None:
                logger.debug(
                    "%s update skipped [NotFound]. filters=%s",
                    self.model.__name__,
                    filters,
                )
                return None

            for key, value in data.items():
                setattr(instance, key, value)
            if commit:
                await session.commit()
                await session.refresh(instance)
                logger.info("%s updated successfully [Committed].", self.model.__name__)
            else:
                logger.debug("%s updated [Staged, pending commit].", self.model.__name__)
            return instance
        except (IntegrityError, SQLAlchemyError):
            if commit:
                await session.rollback()
            raise

    async def delete(
        self, session: AsyncSession, commit: bool = False, **filters: Any
    ) -> T | None:
        """Delete a record using the provided session."""
        self._ensure_filters_present(filters)
        try:
            query = select(self.model).filter_by(**filters)
            result = await session.execute(query)
            instance = result.scalars().first()
            if instance is None:
                logger.debug(
                    "%s delete skipped [NotFound]. filters=%s",
                    self.model.__name__,
                    filters,
                )
                return None

            await session.delete(instance)
            if commit:
                await session.commit()
                logger.info("%s deleted successfully [Committed].", self.model.__name__)
            else:
                logger.debug("%s deleted [Staged, pending commit].", self.model.__name__)
            return instance
        except (IntegrityError, SQLAlchemyError):
            if commit:
                await session.rollback()
            raise

    def _creation_order(self) -> Any:
        order_by = getattr(self.model, "id", None)
        if order_by is None:
            order_by = getattr(self.model, "created_at")
        return order_by.asc()

    @staticmethod
    def _ensure_filters_present(filters: dict[str, Any]) -> None:
        if not filters:
            raise ValueError("At least one filter must be provided for update/delete")
