"""
Utilities for pagination.
"""

import math

from pydantic import BaseModel


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


def get_offset(page: int, limit: int) -> int:
    """Number of rows to skip before the requested page."""
    return (page - 1) * limit


def paginate(page: int, limit: int, total: int) -> Pagination:
    """
    Build pagination metadata for a listing.

    Args:
        page: 1-based page number
        limit: page size; no upper bound is applied
        total: total number of matching rows

    Returns:
        Pagination with ``pages = ceil(total / limit)``, or 0 pages when the
        limit is not positive.
    """
    pages = math.ceil(total / limit) if limit > 0 else 0
    return Pagination(page=page, limit=limit, total=total, pages=pages)
