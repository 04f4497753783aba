"""Query fingerprints ("qhash") binding cursors to the query they came from.

A fingerprint is a SHA-256 digest over a canonical JSON document of the
scoping project id and the semantic filter dimensions. Multi-valued
dimensions are sorted, absent and empty dimensions are dropped, and keys
are sorted, so the same effective filter set always produces the same
fingerprint, in any process, across restarts.

Sort order, limit and cursor are not filter dimensions and must not be
passed in.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from datetime import date
from typing import Any

from teamflow_tasks.core.pagination.cursor import b64url_encode

# Digest prefix length kept in the cursor (128 bits).
FINGERPRINT_BYTES = 16


def _is_absent(value: Any) -> bool:
    if isinstance(value, (list, tuple, set, frozenset)):
        return not value
    return value is None or value == ""


def _canonical_value(value: Any) -> Any:
    if isinstance(value, (list, tuple, set, frozenset)):
        return sorted(str(item) for item in value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def canonicalize(dimensions: Mapping[str, Any]) -> str:
    """Serialize filter dimensions into their canonical JSON text."""
    document = {
        key: _canonical_value(value)
        for key, value in dimensions.items()
        if not _is_absent(value)
    }
    return json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_fingerprint(project_id: str, dimensions: Mapping[str, Any]) -> str:
    """Fingerprint a project id plus filter dimensions.

    Args:
        project_id: Project the query is scoped to.
        dimensions: Filter name to effective value (scalars, dates, or
            collections whose order is irrelevant).

    Returns:
        Unpadded base64url of the first ``FINGERPRINT_BYTES`` of the digest.

    Example:
        a = compute_fingerprint("p1", {"status": ["todo", "done"]})
        b = compute_fingerprint("p1", {"status": ["done", "todo"]})
        assert a == b
    """
    document = canonicalize({**dimensions, "projectId": project_id})
    digest = hashlib.sha256(document.encode("utf-8")).digest()
    return b64url_encode(digest[:FINGERPRINT_BYTES])


__all__ = ["FINGERPRINT_BYTES", "canonicalize", "compute_fingerprint"]
