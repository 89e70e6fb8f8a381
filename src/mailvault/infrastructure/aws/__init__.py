"""AWS adapters: SQS queue, S3 archive store, SSM secret store."""

from mailvault.infrastructure.aws.s3_store import S3ArchiveStore, s3_store_from_settings
from mailvault.infrastructure.aws.sqs_queue import SqsQueue, sqs_queue_from_settings
from mailvault.infrastructure.aws.ssm_secrets import SsmSecretStore, ssm_store_from_settings

__all__ = [
    "SqsQueue",
    "sqs_queue_from_settings",
    "S3ArchiveStore",
    "s3_store_from_settings",
    "SsmSecretStore",
    "ssm_store_from_settings",
]
