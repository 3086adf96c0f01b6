"""
Amazon Rekognition implementation of celebrity recognition.

The recognition algorithm itself is opaque to this service; this module
only translates between ``RecognizeCelebrities`` and domain objects.

Example:
    ```python
    async with session.client("rekognition") as client:
        service = RekognitionCelebrityService(client)
        outcome = await service.recognize(ObjectReference(bucket="b", key="k.jpg"))
    ```
"""
from typing import Any, Dict, Optional

from celebindex.core.exceptions import RecognitionError
from celebindex.core.logging import get_logger
from celebindex.domain.entities.identity import BoundingBox, RecognizedIdentity
from celebindex.domain.interfaces.recognition.celebrity_recognition import CelebrityRecognitionService
from celebindex.domain.value_objects.recognition import ObjectReference, RecognitionOutcome
from celebindex.services.aws.errors import AWS_ERRORS, log_aws_error

logger = get_logger(__name__)


def _bounding_box(face: Optional[Dict[str, Any]]) -> Optional[BoundingBox]:
    if not face or "BoundingBox" not in face:
        return None
    box = face["BoundingBox"]
    return BoundingBox(
        left=box.get("Left", 0.0),
        top=box.get("Top", 0.0),
        width=box.get("Width", 0.0),
        height=box.get("Height", 0.0),
    )


class RekognitionCelebrityService(CelebrityRecognitionService):
    """Celebrity recognition backed by Amazon Rekognition."""

    def __init__(self, client: Any) -> None:
        """
        Args:
            client: Open aioboto3 Rekognition client
        """
        self._client = client

    async def recognize(self, ref: ObjectReference) -> RecognitionOutcome:
        try:
            response = await self._client.recognize_celebrities(
                Image={"S3Object": {"Bucket": ref.bucket, "Name": ref.key}}
            )
        except AWS_ERRORS as e:
            code = log_aws_error(logger, "Celebrity recognition failed", e,
                                 bucket=ref.bucket, key=ref.key)
            raise RecognitionError(
                f"Failed to recognize celebrities in '{ref.bucket}/{ref.key}': {e}",
                details={"bucket": ref.bucket, "key": ref.key, "error_code": code},
            ) from e

        identities = [
            RecognizedIdentity(
                identity_id=celeb["Id"],
                display_name=celeb["Name"],
                match_confidence=celeb.get("MatchConfidence"),
                bounding_box=_bounding_box(celeb.get("Face")),
                urls=celeb.get("Urls", []),
            )
            for celeb in response.get("CelebrityFaces", [])
        ]
        return RecognitionOutcome(
            identities=identities,
            unrecognized_faces=len(response.get("UnrecognizedFaces", [])),
        )
