"""Pagination and search-filter helpers shared by the repositories."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# Keeps (page - 1) * limit inside SQLite's 64-bit INTEGER range.
MAX_PAGE = sys.maxsize // MAX_LIMIT


def _to_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def clamp_page(page: Any = None) -> int:
    """Return page as an int in [1, MAX_PAGE] (defaults to 1)."""
    return min(MAX_PAGE, max(1, _to_int(page, DEFAULT_PAGE)))


def clamp_limit(limit: Any = None) -> int:
    """Return limit as an int in [1, MAX_LIMIT] (defaults to 20)."""
    return min(MAX_LIMIT, max(1, _to_int(limit, DEFAULT_LIMIT)))


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit


def normalize_query(q: str | None) -> str | None:
    """Return the search substring, or None when no filter applies."""
    if q is None:
        return None
    q = str(q)
    return q if q.strip() else None


@dataclass
class Page(Generic[T]):
    """One page of results plus the total number of matches."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
