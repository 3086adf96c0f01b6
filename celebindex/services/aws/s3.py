"""
S3 object store for uploaded images using aioboto3.
"""
from typing import Any, Dict

from celebindex.core.exceptions import StorageError
from celebindex.core.logging import get_logger
from celebindex.core.utils.urls import public_url
from celebindex.domain.interfaces.storage.object_store import ObjectStore
from celebindex.services.aws.errors import AWS_ERRORS, log_aws_error

logger = get_logger(__name__)

CONTENT_TYPES: Dict[str, str] = {
    "jpg": "image/jpeg",
    "png": "image/png",
}


class S3ObjectStore(ObjectStore):
    """Object store backed by an S3 bucket.

    The aioboto3 client is opened once by the service container and
    injected here.
    """

    def __init__(self, client: Any, bucket_name: str, region_name: str) -> None:
        """
        Args:
            client: Open aioboto3 S3 client
            bucket_name: Bucket images are written to
            region_name: Region of the bucket, used for public URLs
        """
        self._client = client
        self.bucket_name = bucket_name
        self.region_name = region_name

    async def put(self, data: bytes, key: str) -> str:
        """
        Upload image bytes to S3 with a public-read ACL.

        Args:
            data: Raw image bytes
            key: S3 object key

        Returns:
            The public object URL
        """
        extension = key.rsplit(".", 1)[-1].lower()
        params = {
            "Bucket": self.bucket_name,
            "Key": key,
            "Body": data,
            "ACL": "public-read",
        }
        content_type = CONTENT_TYPES.get(extension)
        if content_type:
            params["ContentType"] = content_type

        try:
            await self._client.put_object(**params)
        except AWS_ERRORS as e:
            log_aws_error(logger, "Failed to upload image to S3", e,
                          key=key, bucket=self.bucket_name)
            raise StorageError(
                f"Failed to upload file '{key}' to S3: {e}",
                details={"key": key, "bucket": self.bucket_name},
            ) from e

        logger.info("Uploaded image to S3", key=key, bucket=self.bucket_name)
        return public_url(self.bucket_name, self.region_name, key)
