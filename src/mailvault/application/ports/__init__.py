"""Ports implemented by infrastructure adapters."""

from mailvault.application.ports.object_store import ObjectStore
from mailvault.application.ports.queue import MessageQueue, QueueMessage
from mailvault.application.ports.secret_store import SecretStore

__all__ = [
    "MessageQueue",
    "QueueMessage",
    "ObjectStore",
    "SecretStore",
]
