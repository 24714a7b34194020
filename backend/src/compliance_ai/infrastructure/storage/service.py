"""S3-compatible object storage for uploaded files."""

import os
import uuid
from functools import partial
from typing import Any, Callable, Optional
from urllib.parse import quote, unquote, urlparse

import boto3
from anyio import to_thread
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ...modules.common.exceptions import StorageUnavailableError
from ..config.settings import Settings, get_settings
from ..logging import get_logger

logger = get_logger(__name__)


class ObjectStorageService:
    """Stores uploads under generated names and hands out presigned download URLs.

    boto3 is blocking, so every call runs in an anyio worker thread and
    counts against the limiter set at startup. Any boto error is
    raised as ``StorageUnavailableError``; nothing here retries.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[Any] = None):
        settings = settings or get_settings()
        self.bucket = settings.S3_BUCKET_NAME
        self.url_expiration = settings.S3_URL_EXPIRATION
        self.region = settings.S3_REGION
        self.s3_client = client or boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL or None,
            region_name=settings.S3_REGION,
            aws_access_key_id=settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
        )

    @staticmethod
    async def _in_thread(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await to_thread.run_sync(partial(func, *args, **kwargs))

    @staticmethod
    def generate_stored_name(original_name: str) -> str:
        """Random object key keeping only the lower-cased extension of the original name."""
        extension = os.path.splitext(original_name)[1].lower()
        return f"{uuid.uuid4().hex}{extension}"

    async def store(self, content: bytes, original_name: str, content_type: str) -> str:
        """Upload ``content`` and return its stored name.

        Args:
            content: Raw file bytes
            original_name: Name given by the uploader, kept as object metadata only
            content_type: MIME type of the upload

        Returns:
            Generated object key
        """
        stored_name = self.generate_stored_name(original_name)
        try:
            await self._in_thread(
                self.s3_client.put_object,
                Bucket=self.bucket,
                Key=stored_name,
                Body=content,
                ContentType=content_type,
                Metadata={"original-name": quote(original_name)},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to store {original_name!r} in bucket {self.bucket}: {e}")
            raise StorageUnavailableError(f"Could not store file in object storage: {e}") from e

        logger.info(f"Stored upload as {stored_name}", extra={"size": len(content), "content_type": content_type})
        return stored_name

    async def locate(self, stored_name: str) -> str:
        """Presigned GET URL for a stored object."""
        try:
            return await self._in_thread(
                self.s3_client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket, "Key": stored_name},
                ExpiresIn=self.url_expiration,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageUnavailableError(f"Could not generate a download URL for {stored_name}: {e}") from e

    async def fetch_bytes(self, url: str) -> bytes:
        """Read back the object a URL from ``locate`` points to."""
        stored_name = self.stored_name_from_url(url)
        try:
            response = await self._in_thread(self.s3_client.get_object, Bucket=self.bucket, Key=stored_name)
            return await self._in_thread(response["Body"].read)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to read {stored_name} from bucket {self.bucket}: {e}")
            raise StorageUnavailableError(f"Could not read file from object storage: {e}") from e

    @staticmethod
    def stored_name_from_url(url: str) -> str:
        path = urlparse(url).path
        stored_name = unquote(path.rstrip("/").rsplit("/", 1)[-1])
        if not stored_name:
            raise StorageUnavailableError(f"URL does not point to a stored object: {url}")
        return stored_name

    async def ensure_bucket(self) -> None:
        """Create the bucket when it does not exist yet."""
        try:
            await self._in_thread(self.s3_client.head_bucket, Bucket=self.bucket)
            return
        except ClientError as e:
            error_code = str(e.response.get("Error", {}).get("Code", ""))
            if error_code not in ("404", "NoSuchBucket", "NotFound"):
                raise StorageUnavailableError(f"Cannot access bucket {self.bucket}: {e}") from e
        except BotoCoreError as e:
            raise StorageUnavailableError(f"Cannot reach object storage: {e}") from e

        try:
            create_kwargs: dict[str, Any] = {"Bucket": self.bucket}
            if self.region != "us-east-1":
                create_kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
            await self._in_thread(self.s3_client.create_bucket, **create_kwargs)
        except (BotoCoreError, ClientError) as e:
            raise StorageUnavailableError(f"Could not create bucket {self.bucket}: {e}") from e
        logger.info(f"Created bucket {self.bucket}")
