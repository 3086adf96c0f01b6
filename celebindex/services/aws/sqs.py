"""
SQS service for the recognition-trigger queue.
"""
import asyncio
import logging
from typing import List, Optional

import boto3

from celebindex.core.config import settings
from celebindex.services.models import QueueMessage

logger = logging.getLogger(__name__)


class SQSService:
    """Service for consuming object-created notifications from SQS."""

    def __init__(
        self,
        region_name: Optional[str] = None,
        queue_name: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None
    ):
        """
        Initialize the SQS service with AWS credentials.

        Args:
            region_name: AWS region name (defaults to settings)
            queue_name: SQS queue name (defaults to settings)
            access_key_id: AWS access key ID (defaults to settings)
            secret_access_key: AWS secret access key (defaults to settings)
        """
        self.region_name = region_name or settings.REGION
        self.queue_name = queue_name or settings.SQS_QUEUE_NAME
        self.access_key_id = access_key_id or settings.AWS_ACCESS_KEY_ID or None
        self.secret_access_key = secret_access_key or settings.AWS_SECRET_ACCESS_KEY or None
        self.sqs = None
        self.queue = None
        self.queue_url = None
        self.initialized = False

    async def initialize(self) -> None:
        """Initialize the SQS resource and look up the queue."""
        if self.initialized:
            return

        try:
            logger.info(
                f"Initializing SQS service for queue: {self.queue_name}")

            self.sqs = boto3.resource(
                'sqs',
                region_name=self.region_name,
                aws_access_key_id=self.access_key_id,
                aws_secret_access_key=self.secret_access_key
            )

            self.queue = await asyncio.to_thread(
                self.sqs.get_queue_by_name, QueueName=self.queue_name)
            self.queue_url = self.queue.url

            logger.info(
                f"Successfully initialized SQS service for queue: {self.queue_name}")
            self.initialized = True
        except Exception as e:
            logger.error(f"Failed to initialize SQS service: {str(e)}")
            raise

    async def cleanup(self) -> None:
        """Clean up resources."""
        logger.info("Cleaning up SQS service resources")
        self.initialized = False

    async def receive_messages(
        self,
        max_messages: int = 10,
        wait_time: int = 20,
        visibility_timeout: Optional[int] = None,
    ) -> List[QueueMessage]:
        """
        Receive a batch of messages from the queue.

        Bodies are returned undecoded; a malformed body is a batch failure
        for the consumer, not something to drop here.

        Args:
            max_messages: Maximum number of messages to receive (1-10)
            wait_time: Long polling wait time in seconds
            visibility_timeout: Seconds the batch stays hidden from other consumers

        Returns:
            List of received messages with their receipt handles
        """
        if not self.initialized:
            await self.initialize()

        params = {
            'MaxNumberOfMessages': max_messages,
            'WaitTimeSeconds': wait_time,
            'AttributeNames': ['All'],
        }
        if visibility_timeout is not None:
            params['VisibilityTimeout'] = visibility_timeout

        try:
            messages = await asyncio.to_thread(
                lambda: list(self.queue.receive_messages(**params)))
        except Exception as e:
            logger.error(f"Failed to receive messages from SQS: {str(e)}")
            raise

        return [
            QueueMessage(
                message_id=msg.message_id,
                receipt_handle=msg.receipt_handle,
                body=msg.body,
            )
            for msg in messages
        ]

    async def delete_messages(self, messages: List[QueueMessage]) -> bool:
        """
        Delete a processed batch from the queue.

        Args:
            messages: Messages to acknowledge

        Returns:
            True if every message was deleted, False otherwise
        """
        if not messages:
            return True
        if not self.initialized:
            await self.initialize()

        entries = [
            {'Id': str(index), 'ReceiptHandle': message.receipt_handle}
            for index, message in enumerate(messages)
        ]
        try:
            response = await asyncio.to_thread(
                self.queue.delete_messages, Entries=entries)
        except Exception as e:
            logger.error(f"Failed to delete messages from SQS: {str(e)}")
            return False

        failed = response.get('Failed', [])
        if failed:
            logger.warning(
                f"Failed to delete {len(failed)} of {len(entries)} messages; they will be redelivered")
            return False
        return True
