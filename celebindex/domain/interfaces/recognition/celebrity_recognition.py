"""Celebrity recognition service interface."""
from abc import ABC, abstractmethod

from ...value_objects.recognition import ObjectReference, RecognitionOutcome


class CelebrityRecognitionService(ABC):
    """Interface for recognizing known identities in a stored image."""

    @abstractmethod
    async def recognize(self, ref: ObjectReference) -> RecognitionOutcome:
        """
        Recognize identities in the image at ``ref``.

        Args:
            ref: Bucket and key of the stored image

        Returns:
            RecognitionOutcome with recognized identities in service order
            and the number of unrecognized faces

        Raises:
            RecognitionError: If the service call fails
        """
        pass
