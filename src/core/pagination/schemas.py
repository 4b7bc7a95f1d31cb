from collections.abc import Sequence
from math import ceil
from typing import Any, Generic, TypeVar, overload

from pydantic import Field

from src.core.schemas import Base

T = TypeVar("T")
SchemaT = TypeVar("SchemaT", bound=Base)
ItemT = TypeVar("ItemT")


class PaginationParams(Base):
    """Pagination request parameters.

    - page: page number starting from 1
    - limit: page size, at least 1
    """

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)


class PaginatedResponse(Base, Generic[T]):
    """Generic paginated response container."""

    page: int
    limit: int
    total_pages: int = Field(serialization_alias="totalPages")
    total_items: int = Field(serialization_alias="totalItems")
    items: list[T]


def calculate_offset(page: int, limit: int) -> int:
    """Number of records to skip before the first item of ``page``."""
    return (page - 1) * limit


def calculate_total_pages(total: int, limit: int) -> int:
    return ceil(total / limit) if total else 0


@overload
def make_paginated_response(
    *,
    items: Sequence[ItemT],
    total: int,
    pagination: PaginationParams,
    schema: None = None,
) -> PaginatedResponse[ItemT]: ...


@overload
def make_paginated_response(
    *,
    items: Sequence[Any],
    total: int,
    pagination: PaginationParams,
    schema: type[SchemaT],
) -> PaginatedResponse[SchemaT]: ...


def make_paginated_response(
    *,
    items: Sequence[Any],
    total: int,
    pagination: PaginationParams,
    schema: type[SchemaT] | None = None,
) -> PaginatedResponse[Any]:
    """Construct a paginated response using total count and request params."""
    if schema is not None:
        parsed_items = [
            item if isinstance(item, schema) else schema.model_validate(item)
            for item in items
        ]
    else:
        parsed_items = list(items)
    return PaginatedResponse(
        page=pagination.page,
        limit=pagination.limit,
        total_pages=calculate_total_pages(total, pagination.limit),
        total_items=total,
        items=parsed_items,
    )
