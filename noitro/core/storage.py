import os
import uuid
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from noitro.core.config import Settings
from noitro.core.exceptions import InternalError, UnavailableError

logger = logging.getLogger(__name__)

class ObjectStorage:
    """Handles image storage in an S3-compatible bucket"""

    def __init__(self, settings: Settings, client=None):
        """Initialize the S3 client with settings from config"""
        self.client = client
        self.bucket = settings.S3_BUCKET_NAME
        self.endpoint = settings.S3_ENDPOINT
        self.public_url = settings.S3_PUBLIC_URL.rstrip("/")

        if self.client is None and settings.storage_configured:
            try:
                logger.info(f"Creating S3 client for bucket '{self.bucket}' at {self.endpoint}")
                self.client = boto3.client(
                    "s3",
                    endpoint_url=settings.S3_ENDPOINT,
                    aws_access_key_id=settings.S3_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
                )
            except (BotoCoreError, ValueError) as e:
                logger.error(f"Failed to create S3 client: {e}")
                logger.warning("Cloud image storage will not be available due to initialization failure")
        elif self.client is None:
            missing = [
                name for name in ("S3_ENDPOINT", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY")
                if not getattr(settings, name)
            ]
            logger.warning(f"Cloud image storage not configured - missing: {', '.join(missing)}")

    @property
    def available(self) -> bool:
        return self.client is not None

    def url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{key}"
        return f"{self.endpoint.rstrip('/')}/{self.bucket}/{key}"

    def upload_bytes(self, content: bytes, filename: str, content_type: Optional[str], prefix: str = "blog_uploads") -> dict:
        """Upload raw bytes and return ``{"url", "key"}``"""
        if not self.client:
            raise UnavailableError("Dịch vụ lưu trữ ảnh chưa được cấu hình")

        file_extension = os.path.splitext(filename or "")[1].lower()
        key = f"{prefix}/{uuid.uuid4().hex}{file_extension}"
        logger.info(f"Uploading '{filename}' to bucket '{self.bucket}' with key '{key}'")
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload to object storage: {e}")
            raise InternalError("Lỗi khi upload hình ảnh")

        return {"url": self.url_for(key), "key": key}

    def delete_file(self, key: str) -> bool:
        """Delete an object by key"""
        if not self.client:
            logger.error("Attempted to delete file but S3 client is not initialized")
            return False
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
            logger.info(f"Deleted '{key}' from bucket '{self.bucket}'")
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete from object storage: {e}")
            return False
