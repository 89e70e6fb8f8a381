"""SSM Parameter Store adapter for the shared API token."""

from __future__ import annotations

from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from mailvault.domain.errors import SecretStoreError
from mailvault.infrastructure.aws.clients import aws_client
from mailvault.infrastructure.settings import Settings


class SsmSecretStore:
    def __init__(self, client: Any) -> None:
        self.client = client

    def fetch(self, name: str) -> str:
        """Return the decrypted value of parameter ``name``."""
        try:
            resp = self.client.get_parameter(Name=name, WithDecryption=True)
        except (ClientError, BotoCoreError) as e:
            raise SecretStoreError(f"Failed to retrieve API token from SSM parameter {name}: {e}") from e

        value = resp.get("Parameter", {}).get("Value")
        if not value:
            raise SecretStoreError(f"SSM parameter {name} has no value")
        return value


def ssm_store_from_settings(settings: Settings) -> SsmSecretStore:
    return SsmSecretStore(aws_client("ssm", settings))
