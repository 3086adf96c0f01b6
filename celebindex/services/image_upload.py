"""Image upload service for storing uploaded photographs."""
import base64
import binascii
import uuid

from celebindex.core.config import PipelineConfig
from celebindex.core.exceptions import ImageDecodeError, MetadataStoreError
from celebindex.core.logging import get_logger
from celebindex.core.utils.urls import object_key, public_url
from celebindex.domain.entities.identity import UploadRecord
from celebindex.domain.interfaces.storage.object_store import ObjectStore
from celebindex.domain.interfaces.storage.upload_records import UploadRecordStore
from celebindex.services.models import UploadResult

logger = get_logger(__name__)


class ImageUploadService:
    """Service for accepting uploaded images.

    Stores the decoded image under a fresh ``<uuid>.<ext>`` key and writes
    the upload metadata. The object store emits the object-created
    notification that starts recognition.

    Example:
        ```python
        service = ImageUploadService(config, object_store, upload_records)
        result = await service.upload(
            image_base64=payload, file_name="a.jpg", extension="jpg"
        )
        print(result.url)
        ```
    """

    def __init__(
        self,
        config: PipelineConfig,
        object_store: ObjectStore,
        upload_records: UploadRecordStore,
    ) -> None:
        """Initialize the upload service.

        Args:
            config: Bucket and region used for public URLs
            object_store: Store receiving the image bytes
            upload_records: Store receiving upload metadata
        """
        self._config = config
        self._object_store = object_store
        self._upload_records = upload_records

    async def upload(
        self,
        image_base64: str,
        file_name: str,
        extension: str,
    ) -> UploadResult:
        """Store an uploaded image and record its metadata.

        A failed metadata write is logged and reported through
        ``UploadResult.metadata_saved``; the upload still succeeds.

        Args:
            image_base64: Standard base64 encoding of the image
            file_name: File name supplied by the uploader
            extension: Validated image extension

        Returns:
            UploadResult with the public URL of the stored image

        Raises:
            ImageDecodeError: If the payload is not valid base64
            StorageError: If the object store write fails
        """
        # Line breaks from wrapped encoders are skipped; any other
        # non-alphabet character is a decode error.
        payload = image_base64.replace("\r", "").replace("\n", "")
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error("Error decoding image base 64", error=str(e),
                         file_name=file_name)
            raise ImageDecodeError(f"Error decoding image base 64: {e}") from e

        upload_id = str(uuid.uuid4())
        key = object_key(upload_id, extension)

        # StorageError propagates without touching the metadata store.
        await self._object_store.put(data, key)
        url = public_url(self._config.bucket, self._config.region, key)
        logger.info("Uploaded image", key=key, url=url, size=len(data))

        record = UploadRecord(
            id=upload_id,
            file_name=file_name,
            url=url,
            extension=extension,
        )
        metadata_saved = True
        try:
            await self._upload_records.save(record)
        except MetadataStoreError as e:
            metadata_saved = False
            logger.error(
                "Upload record not persisted, returning url anyway",
                upload_id=upload_id,
                key=key,
                error=str(e),
                error_code=e.details.get("error_code"),
            )

        return UploadResult(id=upload_id, key=key, url=url, metadata_saved=metadata_saved)
