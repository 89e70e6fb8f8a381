"""Producer and consumer use cases."""

from mailvault.application.use_cases.archive_email import EmailArchiver, build_archive_key, sanitize_sender
from mailvault.application.use_cases.poll_queue import PollSummary, QueuePoller
from mailvault.application.use_cases.process_message import MessageProcessor
from mailvault.application.use_cases.publish_email import EmailPublisher
from mailvault.application.use_cases.validate_email import EmailValidator

__all__ = [
    # Producer
    "EmailValidator",
    "EmailPublisher",
    # Consumer
    "QueuePoller",
    "PollSummary",
    "MessageProcessor",
    "EmailArchiver",
    "build_archive_key",
    "sanitize_sender",
]
