"""Pagination response schemas for cursor-based pagination."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class CursorPage(BaseModel, Generic[T]):
    """One page of a keyset-paginated listing.

    Attributes:
        items: Rows on this page, at most ``limit`` of them.
        next_cursor: Opaque cursor for the following page, None on the last page.
        has_more: Whether a following page exists.
        limit: Normalized page size the page was produced with.
    """

    items: list[T] = Field(default_factory=list, description="Rows on this page")
    next_cursor: str | None = Field(default=None, description="Cursor to fetch next page")
    has_more: bool = Field(default=False, description="Whether more items exist")
    limit: int = Field(ge=1, description="Normalized page size")
