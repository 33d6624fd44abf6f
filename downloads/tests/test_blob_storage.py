import io
from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError, EndpointConnectionError
from django.test import SimpleTestCase, override_settings

from downloads.blob_storage import BlobStorage
from downloads.exceptions import BlobFetchError, BlobNotFound


def client_error(code, status):
    return ClientError(
        {
            "Error": {"Code": code, "Message": code},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        "GetObject",
    )


class OpenStreamTests(SimpleTestCase):

    def setUp(self):
        self.client = MagicMock()
        self.storage = BlobStorage(self.client, "bucket")

    def test_returns_body_and_length(self):
        body = io.BytesIO(b"hello")
        self.client.get_object.return_value = {"Body": body, "ContentLength": 5}

        stream, length = self.storage.open_stream("a/b.txt")

        self.assertIs(stream, body)
        self.assertEqual(length, 5)
        self.client.get_object.assert_called_once_with(Bucket="bucket", Key="a/b.txt")

    def test_missing_key(self):
        for code, status in (("NoSuchKey", 404), ("404", 404), ("Whatever", 404)):
            with self.subTest(code=code):
                self.client.get_object.side_effect = client_error(code, status)
                with self.assertRaises(BlobNotFound) as ctx:
                    self.storage.open_stream("gone.txt")
                self.assertEqual(str(ctx.exception), "File not found. gone.txt")

    def test_other_client_error(self):
        self.client.get_object.side_effect = client_error("AccessDenied", 403)

        with self.assertRaises(BlobFetchError) as ctx:
            self.storage.open_stream("secret.txt")

        self.assertNotIsInstance(ctx.exception, BlobNotFound)
        self.assertIn("secret.txt", str(ctx.exception))

    def test_transport_error(self):
        self.client.get_object.side_effect = EndpointConnectionError(endpoint_url="https://s3")

        with self.assertRaises(BlobFetchError):
            self.storage.open_stream("a.txt")

    def test_key_that_cannot_be_encoded(self):
        self.client.get_object.side_effect = UnicodeEncodeError("utf-8", "a\ud800", 1, 2, "surrogates not allowed")

        with self.assertRaises(BlobFetchError) as ctx:
            self.storage.open_stream("a\ud800")

        self.assertNotIsInstance(ctx.exception, BlobNotFound)


class FromSettingsTests(SimpleTestCase):

    @override_settings(
        AWS_ACCESS_KEY_ID="AKIA",
        AWS_SECRET_ACCESS_KEY="secret",
        AWS_REGION="eu-west-1",
        AWS_BUCKET="files",
        AWS_ENDPOINT_URL="",
        ZIPPER_FETCH_TIMEOUT=None,
    )
    @patch("downloads.blob_storage.boto3.client")
    def test_builds_client(self, mock_client):
        storage = BlobStorage.from_settings()

        self.assertEqual(storage.bucket, "files")
        self.assertIs(storage.client, mock_client.return_value)
        mock_client.assert_called_once_with(
            "s3",
            endpoint_url=None,
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            region_name="eu-west-1",
            config=None,
        )

    @override_settings(
        AWS_ENDPOINT_URL="https://account.r2.cloudflarestorage.com",
        ZIPPER_FETCH_TIMEOUT=30.0,
    )
    @patch("downloads.blob_storage.boto3.client")
    def test_endpoint_and_timeout(self, mock_client):
        BlobStorage.from_settings()

        kwargs = mock_client.call_args.kwargs
        self.assertEqual(kwargs["endpoint_url"], "https://account.r2.cloudflarestorage.com")
        self.assertEqual(kwargs["config"].read_timeout, 30.0)
        self.assertEqual(kwargs["config"].connect_timeout, 30.0)
