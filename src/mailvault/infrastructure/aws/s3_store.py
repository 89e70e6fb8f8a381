from __future__ import annotations

from email.charset import Charset
from typing import Any, Mapping

from botocore.config import Config

from mailvault.infrastructure.aws.clients import aws_client
from mailvault.infrastructure.settings import Settings

_UTF8 = Charset("utf-8")


def encode_metadata_value(value: str) -> str:
    """
    Make a value safe for S3 user metadata.

    S3 only accepts printable ASCII in ``x-amz-meta-*`` headers, so anything
    else is sent as a single RFC 2047 encoded word.
    """
    if value.isascii() and value.isprintable():
        return value
    return _UTF8.header_encode(value)


class S3ArchiveStore:
    """Writes archived email records as JSON objects in one bucket.

    Errors from boto3 propagate unchanged; the archiver wraps them.
    """

    def __init__(self, client: Any, bucket: str) -> None:
        self.client = client
        self.bucket = bucket

    def put_json(self, key: str, body: bytes, metadata: Mapping[str, str]) -> str | None:
        resp = self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType="application/json",
            Metadata={name: encode_metadata_value(value) for name, value in metadata.items()},
        )
        etag = resp.get("ETag")
        return etag.strip('"') if isinstance(etag, str) else None


def s3_store_from_settings(settings: Settings) -> S3ArchiveStore:
    if not settings.s3_bucket_name:
        raise ValueError("S3_BUCKET_NAME is required")
    s3_cfg = Config(s3={"addressing_style": "path"} if settings.s3_force_path_style else {})
    return S3ArchiveStore(aws_client("s3", settings, config=s3_cfg), settings.s3_bucket_name)
