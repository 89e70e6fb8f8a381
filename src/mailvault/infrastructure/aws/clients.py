from __future__ import annotations

import boto3
from botocore.config import Config

from mailvault.infrastructure.settings import Settings


def aws_client(service: str, settings: Settings, config: Config | None = None):
    """Build a boto3 client honouring the region and endpoint override."""
    return boto3.client(
        service,
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        config=config,
    )
