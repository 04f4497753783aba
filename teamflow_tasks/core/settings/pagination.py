"""Pagination settings for the task list API.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_CURSOR_SECRET=..., PAGINATION_CURSOR_TTL_SECONDS=86400

The cursor secret signs every opaque pagination cursor handed to clients.
It is resolved once at startup; production-like environments refuse to
start without a real secret.
"""

from __future__ import annotations

import logging

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from teamflow_tasks.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PLACEHOLDER_CURSOR_SECRET = "default-secret-change-in-production"  # noqa: S105
DEV_CURSOR_SECRET = "dev-only-secret-change-me"  # noqa: S105


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        cursor_secret: HMAC key used to sign cursors.
        cursor_ttl_seconds: Lifetime of an issued cursor.
    """

    cursor_secret: SecretStr | None = Field(
        default=None,
        description="HMAC-SHA256 key for signing pagination cursors",
    )
    cursor_ttl_seconds: int = Field(
        default=86_400,
        ge=1,
        description="Seconds after issue at which a cursor expires",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    def resolve_cursor_secret(self, *, production_like: bool) -> bytes:
        """Return the signing key, failing fast when it is unusable.

        Args:
            production_like: Whether the process serves real tenants.

        Returns:
            Secret bytes for the cursor codec.

        Raises:
            ConfigurationError: Secret empty or placeholder in a
                production-like environment.
        """
        raw = self.cursor_secret.get_secret_value() if self.cursor_secret else ""

        if production_like:
            if not raw:
                msg = "PAGINATION_CURSOR_SECRET must be set in production"
                raise ConfigurationError(msg)
            if raw == PLACEHOLDER_CURSOR_SECRET:
                msg = "PAGINATION_CURSOR_SECRET must not be the placeholder value in production"
                raise ConfigurationError(msg)
            return raw.encode("utf-8")

        if not raw:
            logger.warning(
                "PAGINATION_CURSOR_SECRET is not set, using development secret",
                extra={"operation": "settings.resolve_cursor_secret"},
            )
            return DEV_CURSOR_SECRET.encode("utf-8")
        return raw.encode("utf-8")
