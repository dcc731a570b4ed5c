"""Avatar storage on S3 (or an S3-compatible endpoint such as MinIO)."""

import logging
import os
import uuid
from typing import BinaryIO, Optional
from urllib.parse import urlparse

import boto3
from botocore.client import Config
from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


class S3Storage:
    """Uploads objects under ``avatars/`` and deletes them by public URL."""

    def __init__(
        self,
        bucket_name: str,
        *,
        region: str = "us-east-1",
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client=None,
    ):
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self._client = client or boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            endpoint_url=self.endpoint_url,
            # Custom endpoints (MinIO, localstack) need path-style addressing
            config=Config(s3={"addressing_style": "path"}) if endpoint_url else None,
        )

    def object_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket_name}/{key}"
        return f"https://{self.bucket_name}.s3.amazonaws.com/{key}"

    def key_from_url(self, url: str) -> str:
        path = urlparse(url).path.lstrip("/")
        if self.endpoint_url and path.startswith(f"{self.bucket_name}/"):
            path = path[len(self.bucket_name) + 1:]
        return path

    async def upload_file(self, file: BinaryIO, filename: str, content_type: str) -> str:
        """Upload under a random key keeping the file extension. Returns the object URL."""
        ext = os.path.splitext(filename)[1]
        key = f"avatars/{uuid.uuid4()}{ext}"
        await run_in_threadpool(
            self._client.put_object,
            Bucket=self.bucket_name,
            Key=key,
            Body=file,
            ContentType=content_type,
        )
        logger.info("Uploaded s3://%s/%s", self.bucket_name, key)
        return self.object_url(key)

    async def delete_file(self, url: str) -> None:
        key = self.key_from_url(url)
        await run_in_threadpool(
            self._client.delete_object, Bucket=self.bucket_name, Key=key
        )
        logger.info("Deleted s3://%s/%s", self.bucket_name, key)
