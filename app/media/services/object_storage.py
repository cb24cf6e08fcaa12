"""
S3 object storage uploads.

Objects are written with a single ``put_object`` call and addressed by their
public virtual-hosted URL.
"""

import asyncio
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from common.utils.exceptions import DependencyException

logger = logging.getLogger(__name__)


class ObjectStorageService:
    """
    Uploads binary objects to an S3 bucket.
    """

    def __init__(
        self,
        bucket: Optional[str],
        region: Optional[str],
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize ObjectStorageService.

        Args:
            bucket: Target bucket name
            region: Bucket region (also used to build public URLs)
            access_key_id: AWS access key (falls back to the boto3 chain)
            secret_access_key: AWS secret key
            client: Pre-built S3 client (tests)
        """
        self._bucket = bucket
        self._region = region
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self._bucket and self._region)

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self._region,
                aws_access_key_id=self._access_key_id,
                aws_secret_access_key=self._secret_access_key,
            )
        return self._client

    def public_url(self, key: str) -> str:
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    async def upload(self, key: str, data: bytes, content_type: Optional[str]) -> str:
        """
        Upload an object and return its URL.

        Raises:
            DependencyException: Storage not configured or the upload failed
        """
        if not self.is_configured:
            logger.error(f"Missing AWS config: bucket={self._bucket} region={self._region}")
            raise DependencyException(
                message="Server misconfiguration (AWS)",
                code="STORAGE_NOT_CONFIGURED"
            )

        logger.info(f"Uploading to S3. Bucket: {self._bucket}, Key: {key}")

        client = self._get_client()
        try:
            await asyncio.to_thread(
                client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 upload failed for {key}: {e}")
            raise DependencyException(message="S3 upload failed", code="UPLOAD_FAILED")

        return self.public_url(key)
