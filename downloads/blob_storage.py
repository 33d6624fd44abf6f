# downloads/blob_storage.py

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from .exceptions import BlobFetchError, BlobNotFound

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class BlobStorage:
    """
    Read side of the S3 (or S3 compatible, e.g. R2) bucket.

    One instance per process; boto3 clients are thread safe.
    """

    def __init__(self, client, bucket: str):
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_settings(cls):
        timeout = settings.ZIPPER_FETCH_TIMEOUT
        config = None
        if timeout:
            config = Config(connect_timeout=timeout, read_timeout=timeout)

        client = boto3.client(
            "s3",
            endpoint_url=settings.AWS_ENDPOINT_URL or None,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
            region_name=settings.AWS_REGION,
            config=config,
        )
        logger.info(
            "Blob storage ready: bucket=%s region=%s endpoint=%s",
            settings.AWS_BUCKET,
            settings.AWS_REGION,
            settings.AWS_ENDPOINT_URL or "aws",
        )
        return cls(client, settings.AWS_BUCKET)

    def open_stream(self, key: str):
        """
        Returns:
          - stream (StreamingBody, read lazily)
          - content length in bytes (int or None)

        Raises BlobNotFound for a missing key, BlobFetchError otherwise.
        """
        try:
            obj = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            error = e.response.get("Error", {})
            status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if str(error.get("Code")) in NOT_FOUND_CODES or status == 404:
                raise BlobNotFound(key) from e
            raise BlobFetchError(key, str(e)) from e
        except BotoCoreError as e:
            raise BlobFetchError(key, str(e)) from e
        except UnicodeEncodeError as e:
            # keys go out percent-encoded UTF-8
            raise BlobFetchError(key, "key is not valid UTF-8") from e

        return obj["Body"], obj.get("ContentLength")
