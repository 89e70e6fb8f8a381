"""Domain models and errors."""

from mailvault.domain.errors import (
    ArchiveError,
    AuthError,
    EmailValidationError,
    MailvaultError,
    ParseError,
    SecretStoreError,
    TransportError,
)
from mailvault.domain.models import (
    ArchivedRecord,
    EmailData,
    EmailRequest,
    EmailResponse,
    ProcessOutcome,
    QueuedMessage,
)

__all__ = [
    # Models
    "EmailData",
    "EmailRequest",
    "EmailResponse",
    "QueuedMessage",
    "ArchivedRecord",
    "ProcessOutcome",
    # Errors
    "MailvaultError",
    "AuthError",
    "EmailValidationError",
    "TransportError",
    "ParseError",
    "ArchiveError",
    "SecretStoreError",
]
