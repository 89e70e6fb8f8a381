"""Singleton wiring for the producer API."""

from __future__ import annotations

from functools import lru_cache

from mailvault.application.secret_cache import SecretCache
from mailvault.application.stats import PublishStats, ValidationStats
from mailvault.application.use_cases.publish_email import EmailPublisher
from mailvault.application.use_cases.validate_email import EmailValidator
from mailvault.infrastructure.aws.sqs_queue import sqs_queue_from_settings
from mailvault.infrastructure.aws.ssm_secrets import ssm_store_from_settings
from mailvault.infrastructure.settings import get_settings


@lru_cache
def get_secret_cache() -> SecretCache:
    """Get the process-wide token cache."""
    settings = get_settings()
    return SecretCache(ssm_store_from_settings(settings), settings.ssm_parameter_name)


@lru_cache
def get_validator() -> EmailValidator:
    return EmailValidator(get_secret_cache(), ValidationStats())


@lru_cache
def get_publisher() -> EmailPublisher:
    return EmailPublisher(sqs_queue_from_settings(get_settings()), PublishStats())
