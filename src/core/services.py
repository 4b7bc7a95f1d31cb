from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.base import Base as SQLAlchemyBase
from src.core.database.repositories import BaseRepository
from src.core.errors.exceptions import InstanceNotFoundException
from src.core.pagination import (
    PaginatedResponse,
    PaginationParams,
    make_paginated_response,
)
from src.core.schemas import Base as PydanticBase

ModelType = TypeVar("ModelType", bound=SQLAlchemyBase)
CreateSchema = TypeVar("CreateSchema", bound=PydanticBase)
UpdateSchema = TypeVar("UpdateSchema", bound=PydanticBase)
RepositoryType = TypeVar("RepositoryType", bound=BaseRepository)  # type: ignore
ResponseSchema = TypeVar("ResponseSchema", bound=PydanticBase)


class BaseService(
    Generic[ModelType, CreateSchema, UpdateSchema, RepositoryType, ResponseSchema]
):
    """
    Lightweight generic service that wraps a repository to perform straightforward CRUD operations.

    Write methods (create/update/delete) commit automatically, so changes are
    persisted immediately. The ``*_or_404`` variants turn an absent record into
    ``InstanceNotFoundException``; every other failure propagates untouched.
    """

    def __init__(
        self,
        repository: RepositoryType,
        response_schema: type[ResponseSchema] | None = None,
    ):
        self.repository = repository
        self._response_schema = response_schema

    @property
    def _model_name(self) -> str:
        return str(self.repository.model.__name__)

    async def create(
        self,
        session: AsyncSession,
        data: CreateSchema,
    ) -> ModelType:
        """Create a new record."""
        result = await self.repository.create(
            session=session, data=data.model_dump(), commit=True
        )
        return cast(ModelType, result)

    async def get_single(
        self,
        session: AsyncSession,
        **filters: Any,
    ) -> ModelType | None:
        """Retrieve a single record matching the filters."""
        return await self.repository.get_single(session=session, **filters)

    async def get_single_or_404(
        self, session: AsyncSession, **filters: Any
    ) -> ModelType:
        """Retrieve a single record matching the filters or raise a 404 error."""
        obj = await self.repository.get_single(session=session, **filters)
        if obj is None:
            raise InstanceNotFoundException(
                f"{self._model_name} not found", additional_info=filters
            )
        return cast(ModelType, obj)

    async def get_paginated_list(
        self,
        session: AsyncSession,
        pagination: PaginationParams,
        **filters: Any,
    ) -> PaginatedResponse[ResponseSchema]:
        """Retrieve a paginated list of records matching the filters."""
        schema_to_use: type[ResponseSchema] | None = self._response_schema
        if schema_to_use is None:
            raise ValueError("response_schema must be provided for paginated responses")

        items, total = await self.repository.get_paginated_list(
            session=session,
            page=pagination.page,
            limit=pagination.limit,
            **filters,
        )
        return make_paginated_response(
            items=items,
            total=total,
            pagination=pagination,
            schema=schema_to_use,
        )

    async def update(
        self,
        session: AsyncSession,
        data: UpdateSchema,
        **filters: Any,
    ) -> ModelType | None:
        """Update a record matching the filters with the fields the client actually sent."""
        return await self.repository.update(
            session=session,
            data=data.model_dump(exclude_unset=True),
            **filters,
            commit=True,
        )

    async def update_or_404(
        self,
        session: AsyncSession,
        data: UpdateSchema,
        **filters: Any,
    ) -> ModelType:
        obj = await self.update(session, data, **filters)
        if obj is None:
            raise InstanceNotFoundException(
                f"{self._model_name} not found", additional_info=filters
            )
        return obj

    async def delete(self, session: AsyncSession, **filters: Any) -> ModelType | None:
        """Delete a record matching the filters."""
        return await self.repository.delete(session=session, **filters, commit=True)

    async def delete_or_404(self, session: AsyncSession, **filters: Any) -> ModelType:
        obj = await self.delete(session, **filters)
        if obj is None:
            raise InstanceNotFoundException(
                f"{self._model_name} not found", additional_info=filters
            )
        return obj
