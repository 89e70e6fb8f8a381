from __future__ import annotations
from typing import Mapping, Protocol

class ObjectStore(Protocol):
    def put_json(self, key: str, body: bytes, metadata: Mapping[str, str]) -> str | None: ...
