"""Archive processed email messages to the object store."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Callable

from loguru import logger

from mailvault.application.ports.object_store import ObjectStore
from mailvault.application.stats import ConsumerStats
from mailvault.application.use_cases.validate_email import parse_timestream
from mailvault.domain.errors import ArchiveError
from mailvault.domain.models import ArchivedRecord, QueuedMessage

KEY_PREFIX = "emails"
CONTENT_TYPE = "application/json"

# Epoch-second range of a representable instant (year -1e9 to 1e9).
MIN_EPOCH_SECOND = -31557014167219200
MAX_EPOCH_SECOND = 31556889864403199

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def sanitize_sender(sender: str) -> str:
    """Replace every non-alphanumeric character with ``_`` and lower-case."""
    return _NON_ALNUM.sub("_", sender).lower()


def utc_date_of(seconds: int) -> tuple[int, int, int]:
    """
    Return the proleptic Gregorian (year, month, day) in UTC for epoch seconds.

    Uses plain day arithmetic so years outside ``datetime``'s 1..9999 range
    are still dated.
    """
    days = seconds // 86400 + 719468
    era = days // 146097
    day_of_era = days - era * 146097
    year_of_era = (
        day_of_era - day_of_era // 1460 + day_of_era // 36524 - day_of_era // 146096
    ) // 365
    day_of_year = day_of_era - (365 * year_of_era + year_of_era // 4 - year_of_era // 100)
    shifted_month = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * shifted_month + 2) // 5 + 1
    month = shifted_month + 3 if shifted_month < 10 else shifted_month - 9
    year = year_of_era + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def build_archive_key(timestream: str | None, sender: str | None, now: datetime) -> str:
    """
    Build the partitioned storage key for a message.

    Pattern: emails/{YYYY}/{MM}/{DD}/{timestamp}-{sender}.json, dated in UTC
    from the message timestamp. When the timestamp cannot be parsed the
    date and filename prefix come from ``now`` instead.
    """
    safe_sender = sanitize_sender(sender or "")

    seconds = parse_timestream(timestream)
    if seconds is not None and MIN_EPOCH_SECOND <= seconds <= MAX_EPOCH_SECOND:
        year, month, day = utc_date_of(seconds)
        filename = f"{timestream}-{safe_sender}.json"
    else:
        logger.warning(f"Error parsing timestamp, using current date. Timestamp: {timestream}")
        current = now.astimezone(timezone.utc)
        year, month, day = current.year, current.month, current.day
        filename = f"{int(current.timestamp())}-{safe_sender}.json"

    return f"{KEY_PREFIX}/{year}/{month:02d}/{day:02d}/{filename}"


class EmailArchiver:
    """Writes one enriched, immutable JSON record per message.

    Keys are derived from timestamp and sender only, so a redelivered message
    overwrites its earlier copy instead of creating a second object.
    """

    def __init__(
        self,
        store: ObjectStore,
        stats: ConsumerStats | None = None,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.stats = stats or ConsumerStats()
        self.now = now

    def archive(self, message: QueuedMessage, correlation_id: str) -> str:
        """
        Store the message and return its key.

        Raises:
            ArchiveError: wrapping any failure to build or write the object.
        """
        try:
            current = self.now()
            key = build_archive_key(message.email_timestream, message.email_sender, current)
            processed_at = int(current.timestamp() * 1000)

            record = ArchivedRecord(
                email_subject=message.email_subject,
                email_sender=message.email_sender,
                email_timestream=message.email_timestream,
                email_content=message.email_content,
                correlation_id=correlation_id,
                original_timestamp=message.timestamp,
                processed_at=processed_at,
                s3_key=key,
            )
            body = record.model_dump_json(by_alias=True).encode("utf-8")
            metadata = {
                "correlation-id": correlation_id,
                "email-sender": message.email_sender or "",
                "email-subject": message.email_subject or "",
                "email-timestream": message.email_timestream or "",
                "processed-at": str(processed_at),
            }

            etag = self.store.put_json(key, body, metadata)
        except Exception as e:
            self.stats.uploads_failed += 1
            logger.error(f"Error uploading email to object store. CorrelationId: {correlation_id}: {e}")
            raise ArchiveError(f"Failed to upload email to object store: {e}") from e

        self.stats.uploads_ok += 1
        self.stats.bytes_uploaded += len(body)
        logger.info(f"Uploaded email to object store. Key: {key}, ETag: {etag}, CorrelationId: {correlation_id}")
        return key
