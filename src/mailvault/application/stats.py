"""In-process counters for the producer and consumer paths."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime


@dataclass
class ValidationStats:
    """Track validation outcomes on the producer side."""
    successes: int = 0
    token_failures: int = 0
    data_failures: int = 0


@dataclass
class PublishStats:
    """Track queue sends on the producer side."""
    sent: int = 0
    failed: int = 0


@dataclass
class ConsumerStats:
    """Track poller, processor and archiver activity."""
    polls_completed: int = 0
    last_poll: datetime | None = None
    received: int = 0
    receive_failures: int = 0
    processed_ok: int = 0
    processed_failed: int = 0
    deleted: int = 0
    delete_failures: int = 0
    uploads_ok: int = 0
    uploads_failed: int = 0
    bytes_uploaded: int = 0

    def summary(self) -> str:
        values = asdict(self)
        values.pop("last_poll")
        return ", ".join(f"{k}={v}" for k, v in values.items())
