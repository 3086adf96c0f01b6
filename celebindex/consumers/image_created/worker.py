"""
Worker loop consuming object-created notifications and indexing identities.
"""
import asyncio
import logging
import time
from typing import Optional

from celebindex.core.config import settings
from celebindex.core.exceptions import AnalysisBatchError
from celebindex.services.aws.sqs import SQSService
from celebindex.services.image_analysis import ImageAnalysisService

logger = logging.getLogger(__name__)

# Global flag for signaling shutdown
shutdown_flag = False


def set_shutdown_flag():
    """Set the shutdown flag to signal the worker loop to stop."""
    global shutdown_flag
    shutdown_flag = True
    logger.info("Shutdown flag set, worker will terminate after current batch")


def reset_shutdown_flag():
    global shutdown_flag
    shutdown_flag = False


class BatchProcessor:
    """Runs analysis batches and acknowledges them on success."""

    def __init__(self, sqs_service: SQSService, analysis_service: ImageAnalysisService):
        self.sqs_service = sqs_service
        self.analysis_service = analysis_service

        # Stats tracking
        self.batches_succeeded = 0
        self.batches_failed = 0
        self.messages_processed = 0
        self.identities_merged = 0
        self.unrecognized_faces = 0
        self.start_time = time.time()
        self.last_stats_time = self.start_time

    async def process_batch(self, messages) -> bool:
        """Process one received batch.

        The batch is deleted from the queue only if every message in it
        succeeded. On failure nothing is deleted and the queue redelivers
        the whole batch once the visibility timeout expires.

        Returns:
            True if the batch succeeded, False otherwise
        """
        try:
            summary = await self.analysis_service.handle_batch(messages)
        except AnalysisBatchError as e:
            self.batches_failed += 1
            logger.error(
                f"Batch of {len(messages)} messages failed, leaving it for redelivery: {e}")
            return False

        self.batches_succeeded += 1
        self.messages_processed += summary.messages
        self.identities_merged += summary.identities_merged
        self.unrecognized_faces += summary.unrecognized_faces

        deleted = await self.sqs_service.delete_messages(messages)
        if not deleted:
            logger.warning(
                "Failed to delete processed batch. It might be processed again.")
        return True

    def log_stats(self, force: bool = False):
        """Log processing statistics every 30 seconds."""
        current_time = time.time()
        if force or current_time - self.last_stats_time > 30:
            elapsed = current_time - self.start_time
            logger.info(
                f"Stats: {self.batches_succeeded} batches succeeded, {self.batches_failed} failed, "
                f"{self.messages_processed} messages, {self.identities_merged} identity updates, "
                f"{self.unrecognized_faces} unrecognized faces ({elapsed:.2f} seconds)"
            )
            self.last_stats_time = current_time


async def process_messages(
    sqs_service: SQSService,
    analysis_service: ImageAnalysisService,
    batch_size: Optional[int] = None,
    max_batches: Optional[int] = None,
) -> BatchProcessor:
    """Poll the queue and process batches until shutdown is requested.

    Args:
        sqs_service: Queue client
        analysis_service: Handler applied to each batch
        batch_size: Messages per receive call (defaults to settings)
        max_batches: Stop after this many non-empty batches

    Returns:
        The processor, for its counters
    """
    batch_size = batch_size or settings.SQS_BATCH_SIZE
    logger.info(
        f"Starting message processing in {settings.ENVIRONMENT} environment "
        f"(batch size {batch_size})")

    processor = BatchProcessor(sqs_service, analysis_service)
    batches = 0

    while not shutdown_flag:
        if max_batches is not None and batches >= max_batches:
            break
        try:
            messages = await sqs_service.receive_messages(
                max_messages=batch_size,
                wait_time=settings.SQS_WAIT_TIME_SECONDS,
                visibility_timeout=settings.SQS_VISIBILITY_TIMEOUT,
            )
        except Exception as e:
            logger.error(f"Error receiving messages: {str(e)}")
            await asyncio.sleep(5)
            continue

        if not messages:
            await asyncio.sleep(1)
            continue

        batches += 1
        logger.info(f"Received {len(messages)} messages from SQS")
        await processor.process_batch(messages)
        processor.log_stats()

    processor.log_stats(force=True)
    return processor
