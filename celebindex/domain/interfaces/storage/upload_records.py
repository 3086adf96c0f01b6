"""Upload record store interface."""
from abc import ABC, abstractmethod

from ...entities.identity import UploadRecord


class UploadRecordStore(ABC):
    """Interface for persisting upload metadata, one record per upload."""

    @abstractmethod
    async def save(self, record: UploadRecord) -> None:
        """
        Write an upload record keyed by its id.

        Raises:
            MetadataStoreError: If the write fails
        """
        pass
