"""Domain models for the mailvault producer and consumer."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class EmailData(BaseModel):
    """The email record submitted by a client.

    Fields are optional at the model level so that blank or missing values
    reach the validator and are reported as a data validation failure.
    """

    email_subject: str | None = None
    email_sender: str | None = None
    email_timestream: str | None = None
    email_content: str | None = None


class EmailRequest(BaseModel):
    """Request body for ``POST /api/email``."""

    data: EmailData
    token: str

    @field_validator("token")
    @classmethod
    def token_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Token is required")
        return value


class EmailResponse(BaseModel):
    """Response body returned by every producer endpoint outcome."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    message: str
    correlation_id: str

    @classmethod
    def ok(cls, message: str, correlation_id: str) -> "EmailResponse":
        return cls(success=True, message=message, correlation_id=correlation_id)

    @classmethod
    def error(cls, message: str, correlation_id: str) -> "EmailResponse":
        return cls(success=False, message=message, correlation_id=correlation_id)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QueuedMessage(_CamelModel):
    """Wire envelope placed on the queue by the publisher.

    Every field is optional so a consumer can parse a partial body and decide
    emptiness itself; ``timestamp`` is the enqueue time in epoch milliseconds.
    """

    email_subject: str | None = None
    email_sender: str | None = None
    email_timestream: str | None = None
    email_content: str | None = None
    correlation_id: str | None = None
    timestamp: int | None = None


class ArchivedRecord(_CamelModel):
    """The JSON document written to the object store."""

    email_subject: str | None
    email_sender: str | None
    email_timestream: str | None
    email_content: str | None
    correlation_id: str
    original_timestamp: int | None = None
    processed_at: int = Field(..., description="Epoch milliseconds at archive time")
    s3_key: str


class ProcessOutcome(str, Enum):
    """Result of processing one dequeued message."""

    ARCHIVED = "archived"
    PARSE_FAILED = "parse_failed"
    INVALID = "invalid"
    ARCHIVE_FAILED = "archive_failed"

    @property
    def ok(self) -> bool:
        return self is ProcessOutcome.ARCHIVED
