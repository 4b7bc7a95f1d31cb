from typing import Annotated

from fastapi import Query

from src.core.pagination.schemas import PaginationParams
from src.main.config import config

DEFAULT_PAGE = 1


def _parse_positive_int(raw: str | None, default: int) -> int:
    """Lenient integer parsing: anything that is not a positive integer becomes ``default``."""
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def parse_optional_bool(raw: str | None) -> bool | None:
    """Map a query string flag to a filter value; empty or missing means no filter."""
    if raw is None or not raw.strip():
        return None
    return raw.strip().lower() == "true"


def get_pagination_params(
    page: Annotated[str | None, Query(description="Page number")] = None,
    limit: Annotated[
        str | None, Query(description="Number of items per page")
    ] = None,
) -> PaginationParams:
    """
    Build pagination params from raw query values.

    Missing or malformed values fall back to page 1 and the configured default
    limit instead of failing the request. The limit is capped at
    ``PAGINATION_MAX_LIMIT``.
    """
    default_limit = config.app.PAGINATION_DEFAULT_LIMIT
    parsed_limit = _parse_positive_int(limit, default_limit)
    return PaginationParams(
        page=_parse_positive_int(page, DEFAULT_PAGE),
        limit=min(parsed_limit, config.app.PAGINATION_MAX_LIMIT),
    )
