from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

@dataclass(frozen=True)
class QueueMessage:
    message_id: str
    receipt_handle: str
    body: str
    # Raw MessageAttributes as returned by the queue service
    attributes: Mapping[str, Any] = field(default_factory=dict)

class MessageQueue(Protocol):
    def send(self, body: str, attributes: Mapping[str, str]) -> str: ...
    def receive(self, max_messages: int, wait_time_seconds: int) -> list[QueueMessage]: ...
    def delete(self, receipt_handle: str) -> None: ...
