# src/mailvault/infrastructure/__init__.py
"""Infrastructure layer - AWS adapters, HTTP surface and configuration."""

from mailvault.infrastructure.logging_setup import configure_logging
from mailvault.infrastructure.settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
]
