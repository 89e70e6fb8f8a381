from __future__ import annotations
from typing import Protocol

class SecretStore(Protocol):
    def fetch(self, name: str) -> str: ...
