"""Helpers for page/limit pagination."""

import math
from typing import Any, Dict


def page_offset(page: int, limit: int) -> int:
    """Number of records to skip for a 1-based page."""
    return (page - 1) * limit


def build_pagination(page: int, limit: int, total: int, returned: int) -> Dict[str, Any]:
    """Build the pagination block returned by list endpoints.

    Args:
        page: Current 1-based page.
        limit: Page size.
        total: Total number of matching records.
        returned: Number of records on this page.

    Returns:
        Dictionary with current page, total pages and next/previous flags.

    Example:
        >>> build_pagination(page=2, limit=10, total=25, returned=10)
        {'current': 2, 'total': 3, 'hasNext': True, 'hasPrev': True}
    """
    return {
        "current": page,
        "total": math.ceil(total / limit) if limit else 0,
        "hasNext": page_offset(page, limit) + returned < total,
        "hasPrev": page > 1,
    }
