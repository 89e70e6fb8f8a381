"""
Unit tests for the SQS, S3 and SSM adapters.
boto3 clients are mocked or stubbed; no AWS calls are made.
"""

from email.header import decode_header, make_header

import boto3
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from botocore.stub import ANY, Stubber
from unittest.mock import MagicMock, patch

from mailvault.application.use_cases.archive_email import EmailArchiver
from mailvault.application.use_cases.process_message import MessageProcessor
from mailvault.domain.errors import SecretStoreError, TransportError
from mailvault.domain.models import ProcessOutcome, QueuedMessage
from mailvault.infrastructure.aws.s3_store import (
    S3ArchiveStore,
    encode_metadata_value,
    s3_store_from_settings,
)
from mailvault.infrastructure.aws.sqs_queue import SqsQueue, sqs_queue_from_settings
from mailvault.infrastructure.aws.ssm_secrets import SsmSecretStore
from mailvault.infrastructure.settings import Settings

QUEUE_URL = "https://sqs.us-west-1.amazonaws.com/123456789/test-queue"


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestSqsQueue:
    def test_send_wraps_attributes_as_strings(self):
        client = MagicMock()
        client.send_message.return_value = {"MessageId": "msg-1"}
        queue = SqsQueue(client, QUEUE_URL)

        assert queue.send("{}", {"correlationId": "c1", "sender": "john"}) == "msg-1"
        client.send_message.assert_called_once_with(
            QueueUrl=QUEUE_URL,
            MessageBody="{}",
            MessageAttributes={
                "correlationId": {"DataType": "String", "StringValue": "c1"},
                "sender": {"DataType": "String", "StringValue": "john"},
            },
        )

    def test_send_failure_raises_transport_error(self):
        client = MagicMock()
        client.send_message.side_effect = _client_error("AWS.SimpleQueueService.NonExistentQueue", "SendMessage")
        queue = SqsQueue(client, QUEUE_URL)

        with pytest.raises(TransportError):
            queue.send("{}", {})

    def test_receive_uses_long_poll_and_all_attributes(self):
        client = MagicMock()
        client.receive_message.return_value = {
            "Messages": [
                {
                    "MessageId": "message-123",
                    "ReceiptHandle": "receipt-handle-123",
                    "Body": '{"emailSubject":"Test"}',
                    "MessageAttributes": {
                        "correlationId": {"DataType": "String", "StringValue": "test-correlation-id"}
                    },
                }
            ]
        }
        queue = SqsQueue(client, QUEUE_URL)

        messages = queue.receive(10, 20)

        client.receive_message.assert_called_once_with(
            QueueUrl=QUEUE_URL,
            MaxNumberOfMessages=10,
            WaitTimeSeconds=20,
            MessageAttributeNames=["All"],
        )
        assert len(messages) == 1
        assert messages[0].receipt_handle == "receipt-handle-123"
        assert messages[0].attributes["correlationId"]["StringValue"] == "test-correlation-id"

    def test_receive_empty_response(self):
        client = MagicMock()
        client.receive_message.return_value = {}
        assert SqsQueue(client, QUEUE_URL).receive(10, 20) == []

    def test_receive_connection_failure_raises_transport_error(self):
        client = MagicMock()
        client.receive_message.side_effect = EndpointConnectionError(endpoint_url=QUEUE_URL)

        with pytest.raises(TransportError):
            SqsQueue(client, QUEUE_URL).receive(10, 20)

    def test_delete_by_receipt_handle(self):
        client = MagicMock()
        SqsQueue(client, QUEUE_URL).delete("receipt-1")
        client.delete_message.assert_called_once_with(QueueUrl=QUEUE_URL, ReceiptHandle="receipt-1")

    def test_delete_failure_raises_transport_error(self):
        client = MagicMock()
        client.delete_message.side_effect = _client_error("ReceiptHandleIsInvalid", "DeleteMessage")

        with pytest.raises(TransportError):
            SqsQueue(client, QUEUE_URL).delete("receipt-1")

    def test_factory_requires_queue_url(self):
        with pytest.raises(ValueError):
            sqs_queue_from_settings(Settings(sqs_queue_url=""))


class TestS3ArchiveStore:
    def test_put_json_sets_content_type_and_metadata(self):
        client = MagicMock()
        client.put_object.return_value = {"ETag": '"abc123"'}
        store = S3ArchiveStore(client, "email-archive")

        etag = store.put_json("emails/2023/09/01/k.json", b"{}", {"correlation-id": "c1"})

        assert etag == "abc123"
        client.put_object.assert_called_once_with(
            Bucket="email-archive",
            Key="emails/2023/09/01/k.json",
            Body=b"{}",
            ContentType="application/json",
            Metadata={"correlation-id": "c1"},
        )

    def test_put_json_propagates_client_error(self):
        client = MagicMock()
        client.put_object.side_effect = _client_error("NoSuchBucket", "PutObject")

        with pytest.raises(ClientError):
            S3ArchiveStore(client, "missing").put_json("k", b"{}", {})

    def test_factory_builds_client_for_bucket(self):
        settings = Settings(s3_bucket_name="email-archive", s3_force_path_style=True)
        with patch("mailvault.infrastructure.aws.clients.boto3") as mock_boto3:
            store = s3_store_from_settings(settings)

        assert store.bucket == "email-archive"
        assert mock_boto3.client.call_args[0][0] == "s3"

    def test_ascii_metadata_is_sent_unchanged(self):
        assert encode_metadata_value("John doe <john@example.com>") == "John doe <john@example.com>"
        assert encode_metadata_value("") == ""

    @pytest.mark.parametrize("value", ["Café meeting", "Réunion équipe 日本", "line\nbreak"])
    def test_non_ascii_metadata_is_rfc2047_encoded(self, value):
        encoded = encode_metadata_value(value)

        assert encoded.isascii() and encoded.isprintable()
        assert str(make_header(decode_header(encoded))) == value


class TestS3ArchiveStoreWithBotocore:
    """Runs writes through a real S3 client so botocore's own checks apply."""

    @pytest.fixture
    def s3_client(self):
        return boto3.client(
            "s3",
            region_name="us-east-1",
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
        )

    def test_non_ascii_subject_is_archived(self, s3_client):
        store = S3ArchiveStore(s3_client, "email-archive")
        archiver = EmailArchiver(store)
        body = QueuedMessage(
            email_subject="Café meeting",
            email_sender="José <jose@example.com>",
            email_timestream="1693561101",
            email_content="À bientôt",
            correlation_id="corr-1",
            timestamp=1693561101500,
        ).model_dump_json(by_alias=True)

        with Stubber(s3_client) as stubber:
            stubber.add_response(
                "put_object",
                {"ETag": '"abc123"'},
                {
                    "Bucket": "email-archive",
                    "Key": "emails/2023/09/01/1693561101-jos___jose_example_com_.json",
                    "Body": ANY,
                    "ContentType": "application/json",
                    "Metadata": ANY,
                },
            )

            outcome = MessageProcessor(archiver).process(body, "corr-1")

            stubber.assert_no_pending_responses()

        assert outcome is ProcessOutcome.ARCHIVED
        assert archiver.stats.uploads_ok == 1


class TestSsmSecretStore:
    def test_fetch_requests_decryption(self):
        client = MagicMock()
        client.get_parameter.return_value = {"Parameter": {"Value": "token-1"}}

        assert SsmSecretStore(client).fetch("/mailvault/api-token") == "token-1"
        client.get_parameter.assert_called_once_with(Name="/mailvault/api-token", WithDecryption=True)

    def test_fetch_failure_raises_secret_store_error(self):
        client = MagicMock()
        client.get_parameter.side_effect = _client_error("ParameterNotFound", "GetParameter")

        with pytest.raises(SecretStoreError):
            SsmSecretStore(client).fetch("/missing")

    def test_empty_value_raises_secret_store_error(self):
        client = MagicMock()
        client.get_parameter.return_value = {"Parameter": {"Value": ""}}

        with pytest.raises(SecretStoreError):
            SsmSecretStore(client).fetch("/empty")
