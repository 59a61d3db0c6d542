# boutique/services/storage.py
"""S3-compatible storage (AWS S3 or MinIO) for design reference photos."""

import hashlib
import logging
import mimetypes
import uuid
from functools import lru_cache
from typing import Optional
from urllib.parse import quote, urlencode

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from boutique.config import (
    STORAGE_ACCESS_KEY,
    STORAGE_BUCKET,
    STORAGE_ENDPOINT_URL,
    STORAGE_PUBLIC_URL,
    STORAGE_REGION,
    STORAGE_SECRET_KEY,
)
from boutique.errors import StorageError

logger = logging.getLogger(__name__)


def build_image_path(order_id: int, item_id: int, filename: str, content: bytes) -> str:
    """
    orders/{order_id}/{item_id}/{uuid}.{ext}

    The uuid is derived from the item and the file bytes, so re-sending the
    same photo for the same item maps to the same object.
    """
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
    digest = hashlib.sha256(content).hexdigest()
    name = uuid.uuid5(uuid.NAMESPACE_URL, f"orders/{order_id}/{item_id}/{digest}")
    return f"orders/{order_id}/{item_id}/{name}.{ext}"


def guess_content_type(filename: str) -> str:
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"


class S3Storage:
    """Uploads objects and builds their public URLs."""

    def __init__(
        self,
        bucket: str = STORAGE_BUCKET,
        endpoint_url: Optional[str] = STORAGE_ENDPOINT_URL,
        access_key: Optional[str] = STORAGE_ACCESS_KEY,
        secret_key: Optional[str] = STORAGE_SECRET_KEY,
        region: str = STORAGE_REGION,
        public_url: Optional[str] = STORAGE_PUBLIC_URL,
    ):
        self.bucket = bucket
        self.endpoint_url = endpoint_url
        self.region = region
        self.public_url = public_url
        self.client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=Config(signature_version="s3v4"),
        )

        logger.info(f"Storage configured - Bucket: {bucket}, Endpoint: {endpoint_url or 'aws'}")

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type or guess_content_type(path),
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Upload of {path} failed: {e}") from e

        return path

    def _base_url(self) -> str:
        if self.public_url:
            return self.public_url.rstrip("/")
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com"

    def get_public_url(
        self,
        path: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        quality: Optional[int] = None,
    ) -> str:
        """
        Public URL of an object. Transform options are passed through as query
        parameters for an image proxy in front of the bucket to act on.
        """
        url = f"{self._base_url()}/{quote(path)}"

        transform = {
            key: value
            for key, value in (("width", width), ("height", height), ("quality", quality))
            if value is not None
        }
        if transform:
            url = f"{url}?{urlencode(transform)}"

        return url


@lru_cache(maxsize=1)
def get_storage() -> S3Storage:
    return S3Storage()
