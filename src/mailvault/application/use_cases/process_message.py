"""Parse, re-validate and archive a dequeued message."""

from __future__ import annotations

import pydantic
from loguru import logger

from mailvault.application.stats import ConsumerStats
from mailvault.application.use_cases.archive_email import EmailArchiver
from mailvault.application.use_cases.validate_email import blank_fields
from mailvault.domain.errors import ParseError
from mailvault.domain.models import ProcessOutcome, QueuedMessage


def parse_queued_message(raw_body: str) -> QueuedMessage:
    """Decode a queue body into a QueuedMessage.

    Raises:
        ParseError: if the body is not a JSON object of the expected shape.
    """
    try:
        return QueuedMessage.model_validate_json(raw_body)
    except pydantic.ValidationError as e:
        raise ParseError(f"Undecodable queue message: {e.error_count()} error(s)") from e


class MessageProcessor:
    """
    Turns a raw queue body into an archived record.

    The consumer trusts nothing on the wire, so the four-field check from the
    producer is applied again here. ``process`` never raises: every failure
    becomes a ``ProcessOutcome`` and the poller decides what to do with the
    message.
    """

    def __init__(self, archiver: EmailArchiver, stats: ConsumerStats | None = None) -> None:
        self.archiver = archiver
        self.stats = stats or ConsumerStats()

    def process(self, raw_body: str, correlation_id: str) -> ProcessOutcome:
        logger.info(f"Processing message. CorrelationId: {correlation_id}")
        outcome = self._process(raw_body, correlation_id)
        if outcome.ok:
            self.stats.processed_ok += 1
        else:
            self.stats.processed_failed += 1
        return outcome

    def _process(self, raw_body: str, correlation_id: str) -> ProcessOutcome:
        try:
            message = parse_queued_message(raw_body)
        except ParseError as e:
            logger.error(f"Error parsing message. CorrelationId: {correlation_id}: {e}")
            return ProcessOutcome.PARSE_FAILED

        blank = blank_fields(
            message.email_subject,
            message.email_sender,
            message.email_timestream,
            message.email_content,
        )
        if blank:
            logger.warning(
                f"Invalid email message received, missing {', '.join(blank)}. "
                f"CorrelationId: {correlation_id}"
            )
            return ProcessOutcome.INVALID

        try:
            key = self.archiver.archive(message, correlation_id)
        except Exception as e:
            logger.error(f"Error archiving message. CorrelationId: {correlation_id}: {e}")
            return ProcessOutcome.ARCHIVE_FAILED

        logger.info(f"Message processed successfully. Key: {key}, CorrelationId: {correlation_id}")
        return ProcessOutcome.ARCHIVED
