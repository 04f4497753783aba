"""Turn an over-fetched result into a page plus an optional next cursor.

Backends fetch ``limit + 1`` rows. A row at index ``limit`` proves a
next page exists without a separate count query; it is a probe and is
never returned. The next cursor is minted from index ``limit - 1``, the
last row the client actually receives, so the following page starts
exactly after it: minting from the probe would skip it, minting from
an earlier row would repeat rows.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from teamflow_tasks.core.pagination.schemas import CursorPage

T = TypeVar("T")


def paginate(rows: Sequence[T], *, limit: int, mint: Callable[[T], str]) -> CursorPage[T]:
    """Build a page from up to ``limit + 1`` rows.

    Args:
        rows: Rows in final order, as returned by the backend.
        limit: Normalized page size (>= 1).
        mint: Produces the next cursor from the last returned row.

    Returns:
        Page with at most ``limit`` items.
    """
    if limit < 1:
        msg = "limit must be at least 1"
        raise ValueError(msg)

    if len(rows) <= limit:
        return CursorPage(items=list(rows), next_cursor=None, has_more=False, limit=limit)

    page_rows = list(rows[:limit])
    return CursorPage(items=page_rows, next_cursor=mint(rows[limit - 1]), has_more=True, limit=limit)


__all__ = ["paginate"]
