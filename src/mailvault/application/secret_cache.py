"""Cache for the shared API token held in the secret store."""

from __future__ import annotations

import threading

from loguru import logger

from mailvault.application.ports.secret_store import SecretStore


class SecretCache:
    """
    Holds the single shared token.

    The value is loaded on demand and replaced wholesale on reload. There is
    no TTL: after a rotation upstream the cached token stays in use until
    ``refresh()`` is called.
    """

    def __init__(self, store: SecretStore, parameter_name: str) -> None:
        self.store = store
        self.parameter_name = parameter_name
        self._token: str | None = None
        self._lock = threading.Lock()

    def get(self) -> str | None:
        """Return the cached token, or None if nothing is loaded."""
        return self._token

    def reload(self) -> str:
        """Fetch the token from the secret store and swap it in.

        Raises:
            SecretStoreError: if the store cannot return the parameter.
        """
        token = self.store.fetch(self.parameter_name)
        with self._lock:
            self._token = token
        logger.info(f"Loaded token from secret store parameter: {self.parameter_name}")
        return token

    def refresh(self) -> str:
        """Operator-driven reload after a credential rotation."""
        logger.info("Refreshing token from secret store")
        return self.reload()
