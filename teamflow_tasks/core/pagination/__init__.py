"""Keyset pagination with signed, opaque cursors.

The cursor encodes the seek position (``createdAt``, ``id``) of the last
row on a page plus the project and filter fingerprint it was issued for.
Cursors are HMAC-signed so clients pass them back unchanged.

    codec = CursorCodec(secret)
    page = paginate(rows, limit=query.limit, mint=lambda row: codec.mint(...))
"""

from teamflow_tasks.core.pagination.cursor import (
    CURSOR_VERSION,
    DEFAULT_CURSOR_TTL_SECONDS,
    CursorCodec,
    CursorPayload,
    CursorPosition,
)
from teamflow_tasks.core.pagination.fingerprint import compute_fingerprint
from teamflow_tasks.core.pagination.paginator import paginate
from teamflow_tasks.core.pagination.schemas import CursorPage

__all__ = [
    "CURSOR_VERSION",
    "DEFAULT_CURSOR_TTL_SECONDS",
    "CursorCodec",
    "CursorPage",
    "CursorPayload",
    "CursorPosition",
    "compute_fingerprint",
    "paginate",
]
