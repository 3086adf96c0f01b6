"""Identity index interface."""
from abc import ABC, abstractmethod

from ...entities.identity import IdentityRecord


class IdentityIndex(ABC):
    """Interface for the per-identity image index."""

    @abstractmethod
    async def merge(
        self,
        identity_id: str,
        display_name: str,
        image_url: str,
    ) -> IdentityRecord:
        """
        Atomically create or extend the record for ``identity_id``.

        A missing record is created with ``display_name`` and a single
        URL. An existing record gets ``image_url`` appended to the end of
        its URL list, and its display name is only set if absent.

        Implementations must perform this as one atomic operation in the
        store: concurrent merges on the same identity must all land.
        Appending a URL that is already present adds a second entry.

        Args:
            identity_id: Identifier assigned by the recognition service
            display_name: Candidate display name
            image_url: Public URL of the image to append

        Returns:
            The record as it is after the update

        Raises:
            IdentityIndexError: If the update fails
        """
        pass
