"""Application layer - validation, publishing, polling and archiving."""

from mailvault.application.secret_cache import SecretCache
from mailvault.application.stats import ConsumerStats, PublishStats, ValidationStats

__all__ = [
    "SecretCache",
    "ValidationStats",
    "PublishStats",
    "ConsumerStats",
]
