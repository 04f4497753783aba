"""Unit tests for signed pagination cursors."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from teamflow_tasks.core.exceptions import (
    CursorError,
    CursorExpiredError,
    CursorFormatError,
    CursorQueryMismatchError,
    CursorSignatureError,
    ValidationCode,
)
from teamflow_tasks.core.pagination import cursor as cursor_module
from teamflow_tasks.core.pagination.cursor import (
    CURSOR_VERSION,
    MAX_CURSOR_LENGTH,
    CursorCodec,
    CursorPayload,
    b64url_decode,
    b64url_encode,
    format_timestamp,
    parse_timestamp,
)
from tests.utils import BASE_TIME, PROJECT_ID


def _payload(**overrides) -> CursorPayload:
    fields = {
        "v": CURSOR_VERSION,
        "createdAt": "2026-01-15T10:30:00.000001Z",
        "id": "task-001",
        "projectId": PROJECT_ID,
        "qhash": "abc123",
        "iat": int(BASE_TIME.timestamp()),
    }
    fields.update(overrides)
    return CursorPayload.model_validate(fields)


def _signed(codec: CursorCodec, raw_payload: bytes) -> str:
    encoded = b64url_encode(raw_payload)
    return f"{encoded}.{b64url_encode(codec._sign(encoded))}"


@pytest.mark.unit
class TestWireFormat:
    def test_two_unpadded_segments(self, codec):
        token = codec.encode(_payload())

        assert token.count(".") == 1
        assert "=" not in token
        encoded_payload, _ = token.split(".")
        body = json.loads(b64url_decode(encoded_payload))
        assert set(body) == {"v", "createdAt", "id", "projectId", "qhash", "iat"}
        assert body["v"] == 1

    def test_round_trip(self, codec):
        payload = _payload()

        assert codec.decode(codec.encode(payload)) == payload

    @pytest.mark.parametrize("secret", [b"k", b"another-secret", "unicode-é-secret"])
    def test_round_trip_any_secret(self, clock, secret):
        codec = CursorCodec(secret, clock=clock)
        payload = _payload(id="task-ü", qhash="q/+=")

        assert codec.decode(codec.encode(payload)) == payload

    def test_empty_secret_rejected(self, clock):
        with pytest.raises(ValueError, match="must not be empty"):
            CursorCodec(b"", clock=clock)


@pytest.mark.unit
class TestTimestampPrecision:
    def test_sub_microsecond_digits_truncated(self):
        payload = _payload(createdAt="2026-01-15T10:30:00.123456789Z")

        assert payload.created_at == "2026-01-15T10:30:00.123456Z"

    def test_offset_normalized_to_utc(self):
        payload = _payload(createdAt="2026-01-15T19:30:00.5+09:00")

        assert payload.created_at == "2026-01-15T10:30:00.500000Z"

    def test_naive_datetime_treated_as_utc(self):
        assert format_timestamp(datetime(2026, 1, 15, 10, 30)) == "2026-01-15T10:30:00.000000Z"

    def test_parse_rejects_missing_offset(self):
        with pytest.raises(ValueError):
            parse_timestamp("2026-01-15T10:30:00")

    def test_mint_keeps_microseconds(self, codec):
        created_at = datetime(2026, 1, 15, 10, 30, 0, 654321, tzinfo=UTC)
        token = codec.mint(created_at=created_at, row_id="task-001", project_id=PROJECT_ID, qhash="h")

        position = codec.verify(token, project_id=PROJECT_ID, qhash="h")

        assert position.created_at == created_at
        assert position.id == "task-001"
        assert position.issued_at == int(BASE_TIME.timestamp())


@pytest.mark.unit
class TestTamperDetection:
    def test_every_single_character_change_is_rejected(self, codec):
        token = codec.encode(_payload())

        for index, char in enumerate(token):
            replacement = "A" if char != "A" else "B"
            tampered = token[:index] + replacement + token[index + 1 :]
            with pytest.raises(CursorError) as exc_info:
                codec.decode(tampered)
            assert exc_info.value.code in {ValidationCode.INVALID_FORMAT, ValidationCode.INVALID_SIGNATURE}

    def test_last_character_change_is_invalid_signature_or_format(self, codec):
        token = codec.encode(_payload())
        tampered = token[:-1] + ("A" if token[-1] != "A" else "B")

        with pytest.raises((CursorSignatureError, CursorFormatError)):
            codec.decode(tampered)

    def test_wrong_secret(self, codec, clock):
        token = codec.encode(_payload())
        other = CursorCodec(b"some-other-secret", clock=clock)

        with pytest.raises(CursorSignatureError) as exc_info:
            other.decode(token)
        assert exc_info.value.field == "cursor"
        assert exc_info.value.code == ValidationCode.INVALID_SIGNATURE

    def test_swapped_payload_fails_signature(self, codec):
        first = codec.encode(_payload(id="task-001"))
        second = codec.encode(_payload(id="task-999"))
        forged = first.split(".")[0] + "." + second.split(".")[1]

        with pytest.raises(CursorSignatureError):
            codec.decode(forged)


@pytest.mark.unit
class TestMalformedCursors:
    @pytest.mark.parametrize(
        "cursor",
        ["", "abc", "a.b.c", ".c2ln", "cGF5bG9hZA.", "!!!.???", "cGF5bG9hZA==.c2ln"],
    )
    def test_structure(self, codec, cursor):
        with pytest.raises(CursorFormatError) as exc_info:
            codec.decode(cursor)
        assert exc_info.value.code == ValidationCode.INVALID_FORMAT

    def test_payload_not_json(self, codec):
        with pytest.raises(CursorFormatError):
            codec.decode(_signed(codec, b"not json"))

    def test_payload_not_an_object(self, codec):
        with pytest.raises(CursorFormatError):
            codec.decode(_signed(codec, b"[1, 2, 3]"))

    def test_payload_missing_fields(self, codec):
        with pytest.raises(CursorFormatError):
            codec.decode(_signed(codec, b'{"v": 1, "id": "task-001"}'))

    def test_payload_wrong_types(self, codec):
        body = _payload().model_dump(by_alias=True)
        body["iat"] = "yesterday"

        with pytest.raises(CursorFormatError):
            codec.decode(_signed(codec, json.dumps(body).encode()))

    def test_deeply_nested_payload(self, codec):
        cursor = b64url_encode(b"[" * 5000) + "." + b64url_encode(b"x" * 32)

        with pytest.raises(CursorFormatError):
            codec.decode(cursor)

    def test_nesting_beyond_recursion_limit(self, codec, monkeypatch):
        monkeypatch.setattr(cursor_module, "MAX_CURSOR_LENGTH", 1_000_000)
        cursor = b64url_encode(b"[" * 100_000) + "." + b64url_encode(b"x" * 32)

        with pytest.raises(CursorFormatError):
            codec.decode(cursor)

    def test_oversized_cursor(self, codec):
        token = codec.encode(_payload(id="t" * MAX_CURSOR_LENGTH))

        with pytest.raises(CursorFormatError):
            codec.decode(token)

    def test_unknown_version(self, codec):
        body = _payload().model_dump(by_alias=True)
        body["v"] = CURSOR_VERSION + 1

        with pytest.raises(CursorFormatError):
            codec.decode(_signed(codec, json.dumps(body).encode()))

    def test_non_canonical_base64_rejected(self):
        canonical = b64url_encode(b"\xff")

        assert canonical == "_w"
        with pytest.raises(ValueError, match="non-canonical"):
            b64url_decode("_x")


@pytest.mark.unit
class TestExpiry:
    def test_valid_until_ttl(self, codec, clock):
        token = codec.mint(created_at=BASE_TIME, row_id="task-001", project_id=PROJECT_ID, qhash="h")
        clock.advance(86_400)

        assert codec.decode(token).id == "task-001"

    def test_expired_after_ttl(self, codec, clock):
        token = codec.mint(created_at=BASE_TIME, row_id="task-001", project_id=PROJECT_ID, qhash="h")
        clock.advance(86_401)

        with pytest.raises(CursorExpiredError) as exc_info:
            codec.decode(token)
        assert exc_info.value.code == ValidationCode.EXPIRED

    def test_custom_ttl(self, clock):
        codec = CursorCodec(b"secret", ttl_seconds=60, clock=clock)
        token = codec.mint(created_at=BASE_TIME, row_id="task-001", project_id=PROJECT_ID, qhash="h")
        clock.advance(61)

        with pytest.raises(CursorExpiredError):
            codec.decode(token)

    def test_signature_checked_before_expiry(self, codec, clock):
        token = codec.mint(created_at=BASE_TIME, row_id="task-001", project_id=PROJECT_ID, qhash="h")
        clock.advance(10 * 86_400)
        other = CursorCodec(b"some-other-secret", clock=clock)

        with pytest.raises(CursorSignatureError):
            other.decode(token)


@pytest.mark.unit
class TestQueryBinding:
    def test_matching_query(self, codec):
        token = codec.mint(created_at=BASE_TIME, row_id="task-002", project_id=PROJECT_ID, qhash="h1")

        position = codec.verify(token, project_id=PROJECT_ID, qhash="h1")

        assert position.project_id == PROJECT_ID
        assert position.qhash == "h1"

    def test_different_qhash(self, codec):
        token = codec.mint(created_at=BASE_TIME, row_id="task-002", project_id=PROJECT_ID, qhash="h1")

        with pytest.raises(CursorQueryMismatchError) as exc_info:
            codec.verify(token, project_id=PROJECT_ID, qhash="h2")
        assert exc_info.value.code == ValidationCode.QUERY_MISMATCH

    def test_different_project(self, codec):
        token = codec.mint(created_at=BASE_TIME, row_id="task-002", project_id=PROJECT_ID, qhash="h1")

        with pytest.raises(CursorQueryMismatchError):
            codec.verify(token, project_id="proj-other", qhash="h1")
