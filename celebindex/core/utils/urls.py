"""
Object key and public URL helpers shared by the upload and analysis paths.
"""
from urllib.parse import quote

from celebindex.core.logging import get_logger

logger = get_logger(__name__)

PUBLIC_URL_TEMPLATE = "http://{bucket}.s3-{region}.amazonaws.com/{key}"


def object_key(uid: str, extension: str) -> str:
    """Build the storage key for an uploaded image.

    Args:
        uid: Freshly generated unique identifier
        extension: Validated file extension, without the dot

    Returns:
        str: Key of the form ``<uid>.<extension>``
    """
    key = f"{uid}.{extension}"
    logger.debug("Generated image name with extension", key=key)
    return key


def public_url(bucket: str, region: str, key: str) -> str:
    """Derive the public-read URL of an object without calling S3.

    Existing identity records store URLs in exactly this format, so it
    must not change. The key is percent-encoded, keeping "/" separators.
    """
    url = PUBLIC_URL_TEMPLATE.format(bucket=bucket, region=region, key=quote(key, safe="/"))
    logger.debug("Generated public url", url=url)
    return url
