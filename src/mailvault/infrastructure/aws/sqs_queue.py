"""SQS adapter for the message queue port."""

from __future__ import annotations

from typing import Any, Mapping

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from mailvault.application.ports.queue import QueueMessage
from mailvault.domain.errors import TransportError
from mailvault.infrastructure.aws.clients import aws_client
from mailvault.infrastructure.settings import Settings


class SqsQueue:
    """Sends, receives and deletes messages on one SQS queue."""

    def __init__(self, client: Any, queue_url: str) -> None:
        self.client = client
        self.queue_url = queue_url

    def send(self, body: str, attributes: Mapping[str, str]) -> str:
        message_attributes = {
            name: {"DataType": "String", "StringValue": value}
            for name, value in attributes.items()
        }
        try:
            resp = self.client.send_message(
                QueueUrl=self.queue_url,
                MessageBody=body,
                MessageAttributes=message_attributes,
            )
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"Failed to publish message to SQS: {e}") from e
        return resp["MessageId"]

    def receive(self, max_messages: int, wait_time_seconds: int) -> list[QueueMessage]:
        try:
            resp = self.client.receive_message(
                QueueUrl=self.queue_url,
                MaxNumberOfMessages=max_messages,
                WaitTimeSeconds=wait_time_seconds,
                MessageAttributeNames=["All"],
            )
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"Failed to receive messages from SQS: {e}") from e

        return [
            QueueMessage(
                message_id=m.get("MessageId", ""),
                receipt_handle=m.get("ReceiptHandle", ""),
                body=m.get("Body", ""),
                attributes=m.get("MessageAttributes") or {},
            )
            for m in resp.get("Messages", [])
        ]

    def delete(self, receipt_handle: str) -> None:
        try:
            self.client.delete_message(QueueUrl=self.queue_url, ReceiptHandle=receipt_handle)
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"Failed to delete message from SQS: {e}") from e
        logger.debug("Message deleted from queue")


def sqs_queue_from_settings(settings: Settings) -> SqsQueue:
    if not settings.sqs_queue_url:
        raise ValueError("SQS_QUEUE_URL is required")
    return SqsQueue(aws_client("sqs", settings), settings.sqs_queue_url)
