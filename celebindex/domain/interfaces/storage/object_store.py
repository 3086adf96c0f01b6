"""Object store interface for uploaded images."""
from abc import ABC, abstractmethod


class ObjectStore(ABC):
    """Interface for durable blob storage keyed by object key."""

    @abstractmethod
    async def put(self, data: bytes, key: str) -> str:
        """
        Store bytes under ``key`` with public-read access.

        Writing an object is expected to emit an object-created
        notification; that is the store's responsibility.

        Args:
            data: Raw image bytes
            key: Object key, never reused

        Returns:
            The public URL of the stored object

        Raises:
            StorageError: If the write fails
        """
        pass
