"""HTTP surface for the producer service."""

from mailvault.infrastructure.http.correlation import CorrelationMiddleware
from mailvault.infrastructure.http.email_ingest import register_error_handlers, router

__all__ = [
    "CorrelationMiddleware",
    "register_error_handlers",
    "router",
]
