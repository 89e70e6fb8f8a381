"""Token and email record validation for the producer path."""

from __future__ import annotations

import hmac
import re
from typing import Optional

from loguru import logger

from mailvault.application.secret_cache import SecretCache
from mailvault.application.stats import ValidationStats
from mailvault.domain.errors import SecretStoreError
from mailvault.domain.models import EmailData

_INTEGER = re.compile(r"[+-]?[0-9]+")
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def blank_fields(
    subject: Optional[str],
    sender: Optional[str],
    timestream: Optional[str],
    content: Optional[str],
) -> list[str]:
    """Return the names of the four email fields that are missing or blank."""
    fields = {
        "subject": subject,
        "sender": sender,
        "timestream": timestream,
        "content": content,
    }
    return [name for name, value in fields.items() if value is None or not value.strip()]


def parse_timestream(value: Optional[str]) -> int | None:
    """Parse a base-10 epoch seconds string, or None if it is not a signed 64-bit integer."""
    if value is None or not _INTEGER.fullmatch(value):
        return None
    seconds = int(value)
    if not INT64_MIN <= seconds <= INT64_MAX:
        return None
    return seconds


class EmailValidator:
    """Validates the shared token and the structure of submitted records.

    Both checks return ``(ok, reason)`` so callers can tell an auth failure
    apart from a secret store outage.
    """

    def __init__(self, cache: SecretCache, stats: ValidationStats | None = None) -> None:
        self.cache = cache
        self.stats = stats or ValidationStats()

    def validate_token(self, provided: Optional[str]) -> tuple[bool, str]:
        """
        Compare a presented token against the cached secret.

        Reloads the cache once if it is empty. Never raises.

        Returns:
            (True, "") on an exact match, otherwise (False, reason) where
            reason is "missing_token", "secret_unavailable" or "token_mismatch".
        """
        ok, reason = self._check_token(provided)
        if not ok:
            self.stats.token_failures += 1
        return ok, reason

    def _check_token(self, provided: Optional[str]) -> tuple[bool, str]:
        if not provided:
            logger.warning("Token validation failed: no token provided")
            return False, "missing_token"

        try:
            cached = self.cache.get()
            if cached is None:
                logger.warning("Token not found in cache, reloading from secret store")
                cached = self.cache.reload()
        except SecretStoreError as e:
            logger.error(f"Failed to retrieve token from secret store: {e}")
            return False, "secret_unavailable"
        except Exception as e:
            logger.exception(f"Error validating token: {e}")
            return False, "secret_unavailable"

        if not cached:
            logger.error("Secret store returned an empty token")
            return False, "secret_unavailable"

        if not hmac.compare_digest(cached.encode("utf-8"), provided.encode("utf-8")):
            logger.warning("Token validation failed for provided token")
            return False, "token_mismatch"

        return True, ""

    def validate_email_data(self, data: Optional[EmailData]) -> tuple[bool, str]:
        """
        Check that all four fields are present and the timestamp is a positive integer.

        No range check against wall-clock time is applied.
        """
        if data is None:
            logger.warning("Email data is missing")
            self.stats.data_failures += 1
            return False, "Email data is required"

        blank = blank_fields(
            data.email_subject,
            data.email_sender,
            data.email_timestream,
            data.email_content,
        )
        if blank:
            logger.warning(f"Missing required email fields: {', '.join(blank)}")
            self.stats.data_failures += 1
            return False, f"Missing required email fields: {', '.join(blank)}"

        timestamp = parse_timestream(data.email_timestream)
        if timestamp is None:
            logger.warning(f"Invalid timestamp format: {data.email_timestream}")
            self.stats.data_failures += 1
            return False, "Timestamp must be a Unix epoch integer"
        if timestamp <= 0:
            logger.warning(f"Invalid timestamp: {timestamp}")
            self.stats.data_failures += 1
            return False, "Timestamp must be greater than zero"

        self.stats.successes += 1
        return True, ""
