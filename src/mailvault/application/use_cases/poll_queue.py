"""Recurring queue poll that drives the processor."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from loguru import logger

from mailvault.application.ports.queue import MessageQueue, QueueMessage
from mailvault.application.stats import ConsumerStats
from mailvault.application.use_cases.process_message import MessageProcessor

UNKNOWN_CORRELATION_ID = "unknown"


@dataclass
class PollSummary:
    """What happened in one poll cycle."""
    received: int = 0
    succeeded: int = 0
    deleted: int = 0
    failed: int = 0


def correlation_id_of(message: QueueMessage) -> str:
    """Read the correlationId attribute, falling back to "unknown"."""
    attr = message.attributes.get("correlationId") if message.attributes else None
    value = attr.get("StringValue") if isinstance(attr, dict) else None
    if not isinstance(value, str) or not value:
        logger.warning(f"Could not extract correlation ID from message: {message.message_id}")
        return UNKNOWN_CORRELATION_ID
    return value


class QueuePoller:
    """
    Drains the queue in fixed-period cycles.

    Each cycle issues one long-poll receive and processes the batch
    sequentially. A message is deleted only when the processor reports
    success; anything else is left for the queue's own redelivery.

    Cycles never overlap. The period is measured from the start of a cycle,
    so a cycle that overruns is followed immediately by the next one.
    ``clock`` and ``wait`` are injectable so tests can drive the loop without
    real timers; ``wait`` must return early once ``stop()`` has been called.
    """

    def __init__(
        self,
        queue: MessageQueue,
        processor: MessageProcessor,
        poll_interval: float = 30.0,
        max_messages: int = 10,
        wait_time_seconds: int = 20,
        stats: ConsumerStats | None = None,
        clock: Callable[[], float] = time.monotonic,
        wait: Optional[Callable[[float], bool]] = None,
    ) -> None:
        self.queue = queue
        self.processor = processor
        self.poll_interval = poll_interval
        self.max_messages = max_messages
        self.wait_time_seconds = wait_time_seconds
        self.stats = stats or ConsumerStats()
        self.clock = clock
        self._stop = threading.Event()
        self.wait = wait or self._stop.wait

    @property
    def running(self) -> bool:
        return not self._stop.is_set()

    def stop(self) -> None:
        """Signal the run loop to exit after the current cycle."""
        self._stop.set()

    def poll_once(self) -> PollSummary:
        """Run a single receive/process/delete cycle. Never raises."""
        summary = PollSummary()
        self.stats.last_poll = datetime.now(timezone.utc)
        logger.debug("Starting queue message polling...")

        try:
            messages = self.queue.receive(self.max_messages, self.wait_time_seconds)
        except Exception as e:
            self.stats.receive_failures += 1
            logger.error(f"Error polling queue messages: {e}")
            self.stats.polls_completed += 1
            return summary

        if not messages:
            logger.debug("No messages found in queue")
            self.stats.polls_completed += 1
            return summary

        summary.received = len(messages)
        self.stats.received += len(messages)
        logger.info(f"Received {len(messages)} messages from queue")

        for message in messages:
            if self._handle(message, summary):
                summary.succeeded += 1
            else:
                summary.failed += 1

        self.stats.polls_completed += 1
        logger.info(
            f"Poll cycle done: received={summary.received}, "
            f"succeeded={summary.succeeded}, deleted={summary.deleted}, failed={summary.failed}. "
            f"Totals: {self.stats.summary()}"
        )
        return summary

    def _handle(self, message: QueueMessage, summary: PollSummary) -> bool:
        correlation_id = correlation_id_of(message)
        logger.info(f"Processing message. MessageId: {message.message_id}, CorrelationId: {correlation_id}")

        try:
            outcome = self.processor.process(message.body, correlation_id)
        except Exception as e:
            logger.error(
                f"Error processing message. MessageId: {message.message_id}, "
                f"CorrelationId: {correlation_id}: {e}"
            )
            return False

        if not outcome.ok:
            logger.warning(
                f"Message processing failed ({outcome.value}), keeping in queue for retry. "
                f"MessageId: {message.message_id}, CorrelationId: {correlation_id}"
            )
            return False

        try:
            self.queue.delete(message.receipt_handle)
        except Exception as e:
            self.stats.delete_failures += 1
            logger.error(f"Error deleting message from queue: {message.message_id}: {e}")
            return True

        summary.deleted += 1
        self.stats.deleted += 1
        logger.info(
            f"Message processed and deleted successfully. MessageId: {message.message_id}, "
            f"CorrelationId: {correlation_id}"
        )
        return True

    def run(self) -> None:
        """Poll until ``stop()`` is called."""
        logger.info(f"Queue poller starting, interval {self.poll_interval}s")
        while self.running:
            started = self.clock()
            self.poll_once()
            if not self.running:
                break
            remaining = self.poll_interval - (self.clock() - started)
            if remaining > 0:
                self.wait(remaining)
        logger.info(f"Queue poller stopped. Stats: {self.stats.summary()}")
