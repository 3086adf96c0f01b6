"""Image analysis service for indexing recognized identities."""
import json
from typing import List, Sequence

from pydantic import ValidationError

from celebindex.core.config import PipelineConfig
from celebindex.core.exceptions import AnalysisBatchError, MalformedNotificationError
from celebindex.core.logging import get_logger
from celebindex.core.utils.urls import public_url
from celebindex.domain.interfaces.recognition.celebrity_recognition import CelebrityRecognitionService
from celebindex.domain.interfaces.storage.identity_index import IdentityIndex
from celebindex.domain.value_objects.recognition import AnalysisSummary, ObjectReference
from celebindex.services.models import QueueMessage, S3Event

logger = get_logger(__name__)


def parse_notification(body: str, default_region: str) -> List[ObjectReference]:
    """Unwrap one queue message body into the objects it references.

    Args:
        body: Raw queue message body holding an S3 event notification
        default_region: Region used when a record carries none

    Returns:
        Object references in record order; empty for test events

    Raises:
        MalformedNotificationError: If the body is not a valid S3 event
    """
    try:
        event = S3Event.model_validate(json.loads(body))
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise MalformedNotificationError(
            f"Error unmarshalling queue message to S3 event: {e}"
        ) from e
    return [record.to_reference(default_region) for record in event.records]


class ImageAnalysisService:
    """Service consuming object-created notifications.

    Each referenced image is sent to the recognition service, and every
    recognized identity gets the image's public URL merged into its index
    record. Processing is sequential and fail-fast: the first error aborts
    the batch and the queue redelivers all of it, so a retried batch may
    append some URLs twice.

    Example:
        ```python
        service = ImageAnalysisService(config, recognition_service, identity_index)
        summary = await service.handle_batch(messages)
        ```
    """

    def __init__(
        self,
        config: PipelineConfig,
        recognition_service: CelebrityRecognitionService,
        identity_index: IdentityIndex,
    ) -> None:
        """Initialize the analysis service.

        Args:
            config: Provides the fallback region for public URLs
            recognition_service: Service recognizing identities in stored images
            identity_index: Index receiving merge updates
        """
        self._config = config
        self._recognition_service = recognition_service
        self._identity_index = identity_index

    async def handle_batch(self, messages: Sequence[QueueMessage]) -> AnalysisSummary:
        """Process a batch of queue messages.

        Args:
            messages: Messages received together from the queue

        Returns:
            AnalysisSummary counting the work done

        Raises:
            AnalysisBatchError: If any message, recognition call or merge
                update fails. Nothing in the batch should be acknowledged.
        """
        summary = AnalysisSummary(messages=len(messages))
        logger.info("Processing analysis batch", messages=len(messages))

        for message in messages:
            try:
                await self._handle_message(message, summary)
            except Exception as e:
                logger.error(
                    "Analysis batch failed",
                    message_id=message.message_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise AnalysisBatchError(
                    f"Failed to process message '{message.message_id}': {e}",
                    cause=e,
                    details={"message_id": message.message_id},
                ) from e

        logger.info(
            "Analysis batch complete",
            messages=summary.messages,
            objects=summary.objects,
            identities_merged=summary.identities_merged,
            unrecognized_faces=summary.unrecognized_faces,
        )
        return summary

    async def _handle_message(self, message: QueueMessage, summary: AnalysisSummary) -> None:
        logger.debug("Received queue message", message_id=message.message_id, body=message.body)
        refs = parse_notification(message.body, self._config.region)
        for ref in refs:
            await self.analyze_object(ref, summary)

    async def analyze_object(self, ref: ObjectReference, summary: AnalysisSummary) -> None:
        """Recognize identities in one object and merge them into the index.

        Identities are merged in the order the recognition service
        returned them.
        """
        outcome = await self._recognition_service.recognize(ref)
        url = public_url(ref.bucket, ref.region or self._config.region, ref.key)

        for identity in outcome.identities:
            logger.info(
                "Identity found",
                identity_id=identity.identity_id,
                display_name=identity.display_name,
                match_confidence=identity.match_confidence,
                key=ref.key,
            )
            await self._identity_index.merge(
                identity_id=identity.identity_id,
                display_name=identity.display_name,
                image_url=url,
            )
            summary.identities_merged += 1
            logger.info(
                "Identity updated",
                identity_id=identity.identity_id,
                key=ref.key,
            )

        summary.objects += 1
        summary.unrecognized_faces += outcome.unrecognized_faces
        logger.info(
            "Unrecognized faces in image",
            key=ref.key,
            unrecognized_faces=outcome.unrecognized_faces,
        )
