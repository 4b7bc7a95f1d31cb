"""Pagination-related schemas and utilities."""

from .dependencies import get_pagination_params, parse_optional_bool
from .schemas import (
    PaginatedResponse,
    PaginationParams,
    calculate_offset,
    calculate_total_pages,
    make_paginated_response,
)

__all__ = [
    "PaginatedResponse",
    "PaginationParams",
    "calculate_offset",
    "calculate_total_pages",
    "get_pagination_params",
    "make_paginated_response",
    "parse_optional_bool",
]
