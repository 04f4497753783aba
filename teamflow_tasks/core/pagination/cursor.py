"""Signed, opaque keyset-pagination cursors.

A cursor carries the seek position of the last row a client received,
bound to the project and filter fingerprint it was issued for, and
signed so clients cannot forge or alter it.

Wire format:
    base64url(JSON payload) "." base64url(HMAC-SHA256(secret, encoded payload))

Both segments are unpadded. Example payload:
    {"v":1,"createdAt":"2026-01-15T10:30:00.000001Z","id":"task-001",
     "projectId":"proj-1","qhash":"3q2-7w","iat":1768473000}

The server persists nothing about issued cursors; every check happens
when the cursor comes back.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from teamflow_tasks.core.exceptions import (
    CursorExpiredError,
    CursorFormatError,
    CursorQueryMismatchError,
    CursorSignatureError,
)
from teamflow_tasks.infra.logging import get_lazy_logger

CURSOR_VERSION = 1
DEFAULT_CURSOR_TTL_SECONDS = 86_400
# Issued cursors are a few hundred characters; longer input is never parsed.
MAX_CURSOR_LENGTH = 2048

_B64URL_RE = re.compile(r"^[A-Za-z0-9_-]+$")
# RFC 3339 with an optional fraction of any length; digits past the
# sixth are dropped before parsing.
_FRACTION_RE = re.compile(r"^(?P<head>[^.]+T\d{2}:\d{2}:\d{2})(?:\.(?P<frac>\d+))?(?P<tz>Z|[+-]\d{2}:\d{2})$")

_lazy = get_lazy_logger(__name__)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as UTC RFC 3339 text at microsecond precision.

    Naive values are taken to be UTC (SQLite returns them that way).
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    """Parse RFC 3339 text, truncating any sub-microsecond digits.

    Raises:
        ValueError: Not an RFC 3339 timestamp with an offset.
    """
    match = _FRACTION_RE.match(text)
    if match is None:
        msg = f"not an RFC 3339 timestamp: {text!r}"
        raise ValueError(msg)
    fraction = (match.group("frac") or "")[:6]
    offset = "+00:00" if match.group("tz") == "Z" else match.group("tz")
    normalized = match.group("head") + (f".{fraction.ljust(6, '0')}" if fraction else "") + offset
    return datetime.fromisoformat(normalized).astimezone(UTC)


def b64url_encode(data: bytes) -> str:
    """Base64url without ``=`` padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(text: str) -> bytes:
    """Strict inverse of :func:`b64url_encode`.

    Rejects padding, foreign characters, and non-canonical encodings
    (unused low bits set in the final character), so every distinct
    string maps to distinct bytes.

    Raises:
        ValueError: ``text`` is not canonical unpadded base64url.
    """
    if not _B64URL_RE.match(text) or len(text) % 4 == 1:
        msg = "not unpadded base64url"
        raise ValueError(msg)
    try:
        data = base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
    except binascii.Error as exc:
        raise ValueError(str(exc)) from exc
    if b64url_encode(data) != text:
        msg = "non-canonical base64url"
        raise ValueError(msg)
    return data


class CursorPayload(BaseModel):
    """Signed cursor content.

    Attributes:
        version: Payload schema version (``v``).
        created_at: Seek ``createdAt`` as RFC 3339 text, microsecond precision.
        id: Seek row id (tie-break).
        project_id: Project the cursor was issued for.
        qhash: Filter fingerprint the cursor was issued for.
        issued_at: Unix seconds at issue (``iat``).
    """

    version: int = Field(default=CURSOR_VERSION, alias="v")
    created_at: str = Field(alias="createdAt")
    id: str
    project_id: str = Field(alias="projectId")
    qhash: str
    issued_at: int = Field(alias="iat")

    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True)

    @field_validator("created_at")
    @classmethod
    def _truncate_created_at(cls, value: str) -> str:
        return format_timestamp(parse_timestamp(value))

    @property
    def created_at_datetime(self) -> datetime:
        return parse_timestamp(self.created_at)

    def to_json(self) -> str:
        return json.dumps(self.model_dump(by_alias=True), separators=(",", ":"))


@dataclass(frozen=True)
class CursorPosition:
    """A verified seek position, ready to drive a keyset query."""

    created_at: datetime
    id: str
    project_id: str
    qhash: str
    issued_at: int


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CursorCodec:
    """Encode, sign, decode and verify pagination cursors.

    The secret and clock are constructor dependencies so tests can pin
    both.

    Usage:
        codec = CursorCodec(b"secret")
        token = codec.mint(created_at=row.created_at, row_id=row.id,
                           project_id="proj-1", qhash=query.fingerprint("proj-1"))
        position = codec.verify(token, project_id="proj-1",
                                qhash=query.fingerprint("proj-1"))
    """

    def __init__(
        self,
        secret: bytes | str,
        *,
        ttl_seconds: int = DEFAULT_CURSOR_TTL_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize codec.

        Args:
            secret: HMAC-SHA256 key; must be non-empty.
            ttl_seconds: Seconds after ``iat`` at which a cursor expires.
            clock: Returns the current aware datetime.

        Raises:
            ValueError: Empty secret.
        """
        key = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
        if not key:
            msg = "cursor secret must not be empty"
            raise ValueError(msg)
        self._secret = key
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    def _sign(self, encoded_payload: str) -> bytes:
        return hmac.new(self._secret, encoded_payload.encode("ascii"), hashlib.sha256).digest()

    def now_unix(self) -> int:
        return int(self._clock().timestamp())

    def encode(self, payload: CursorPayload) -> str:
        """Serialize and sign a payload into its wire form."""
        encoded_payload = b64url_encode(payload.to_json().encode("utf-8"))
        return f"{encoded_payload}.{b64url_encode(self._sign(encoded_payload))}"

    def decode(self, cursor: str) -> CursorPayload:
        """Parse and authenticate a cursor, then check its age.

        Raises:
            CursorFormatError: Malformed, oversized or unknown-version token.
            CursorSignatureError: Signature does not match the payload.
            CursorExpiredError: Issued more than ``ttl_seconds`` ago.
        """
        if len(cursor) > MAX_CURSOR_LENGTH:
            raise CursorFormatError
        segments = cursor.split(".")
        if len(segments) != 2 or not all(segments):
            raise CursorFormatError
        encoded_payload, encoded_sig = segments

        try:
            raw = json.loads(b64url_decode(encoded_payload))
            signature = b64url_decode(encoded_sig)
        except (ValueError, RecursionError) as exc:  # JSONDecodeError, UnicodeDecodeError, deep nesting
            raise CursorFormatError from exc
        if not isinstance(raw, dict):
            raise CursorFormatError

        if not hmac.compare_digest(signature, self._sign(encoded_payload)):
            raise CursorSignatureError

        try:
            payload = CursorPayload.model_validate(raw)
        except ValidationError as exc:
            raise CursorFormatError from exc
        if payload.version != CURSOR_VERSION:
            raise CursorFormatError

        if self.now_unix() - payload.issued_at > self._ttl_seconds:
            raise CursorExpiredError
        return payload

    def verify(self, cursor: str, *, project_id: str, qhash: str) -> CursorPosition:
        """Decode a cursor and check it belongs to the current request.

        Args:
            cursor: Wire cursor from the client.
            project_id: Project the current request is scoped to.
            qhash: Fingerprint of the current request's filters.

        Raises:
            CursorFormatError, CursorSignatureError, CursorExpiredError:
                As for :meth:`decode`.
            CursorQueryMismatchError: Issued for another project or filter set.
        """
        payload = self.decode(cursor)
        if payload.project_id != project_id or payload.qhash != qhash:
            raise CursorQueryMismatchError

        _lazy.debug(lambda: f"cursor.verify: project={project_id} seek=({payload.created_at}, {payload.id})")
        return CursorPosition(
            created_at=payload.created_at_datetime,
            id=payload.id,
            project_id=payload.project_id,
            qhash=payload.qhash,
            issued_at=payload.issued_at,
        )

    def mint(self, *, created_at: datetime, row_id: str, project_id: str, qhash: str) -> str:
        """Issue a fresh cursor positioned after the given row."""
        payload = CursorPayload(
            v=CURSOR_VERSION,
            createdAt=format_timestamp(created_at),
            id=row_id,
            projectId=project_id,
            qhash=qhash,
            iat=self.now_unix(),
        )
        return self.encode(payload)


__all__ = [
    "CURSOR_VERSION",
    "DEFAULT_CURSOR_TTL_SECONDS",
    "MAX_CURSOR_LENGTH",
    "CursorCodec",
    "CursorPayload",
    "CursorPosition",
    "b64url_decode",
    "b64url_encode",
    "format_timestamp",
    "parse_timestamp",
]
