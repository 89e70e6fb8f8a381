"""Publish validated email records to the queue."""

from __future__ import annotations

import time
from typing import Callable

from loguru import logger

from mailvault.application.ports.queue import MessageQueue
from mailvault.application.stats import PublishStats
from mailvault.domain.errors import TransportError
from mailvault.domain.models import EmailData, QueuedMessage


def _now_ms() -> int:
    return int(time.time() * 1000)


class EmailPublisher:
    """Serializes an email record into a queue envelope and sends it.

    There is no retry here; a failed send surfaces as ``TransportError`` and
    the client is expected to resubmit.
    """

    def __init__(
        self,
        queue: MessageQueue,
        stats: PublishStats | None = None,
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        self.queue = queue
        self.stats = stats or PublishStats()
        self.clock_ms = clock_ms

    def build_message(self, data: EmailData, correlation_id: str) -> QueuedMessage:
        return QueuedMessage(
            email_subject=data.email_subject,
            email_sender=data.email_sender,
            email_timestream=data.email_timestream,
            email_content=data.email_content,
            correlation_id=correlation_id,
            timestamp=self.clock_ms(),
        )

    def publish(self, data: EmailData, correlation_id: str) -> str:
        """
        Send one record to the queue.

        Returns:
            The queue-assigned message id (for logging only).

        Raises:
            TransportError: if serialization or the send fails.
        """
        try:
            message = self.build_message(data, correlation_id)
            body = message.model_dump_json(by_alias=True)
            attributes = {
                "correlationId": correlation_id,
                "sender": data.email_sender or "",
            }
            message_id = self.queue.send(body, attributes)
        except TransportError:
            self.stats.failed += 1
            logger.error(f"Failed to publish message to queue. CorrelationId: {correlation_id}")
            raise
        except Exception as e:
            self.stats.failed += 1
            logger.exception(f"Unexpected error publishing message to queue. CorrelationId: {correlation_id}")
            raise TransportError(f"Unexpected error publishing message to queue: {e}") from e

        self.stats.sent += 1
        logger.info(f"Published message to queue. MessageId: {message_id}, CorrelationId: {correlation_id}")
        return message_id
