"""Service container for dependency injection."""
import asyncio
from contextlib import AsyncExitStack
from typing import Any, Dict, Optional

import aioboto3

from celebindex.core.config import PipelineConfig, Settings, settings as default_settings
from celebindex.core.logging import get_logger

# Import interfaces
from celebindex.domain.interfaces.recognition.celebrity_recognition import CelebrityRecognitionService
from celebindex.domain.interfaces.storage.identity_index import IdentityIndex
from celebindex.domain.interfaces.storage.object_store import ObjectStore
from celebindex.domain.interfaces.storage.upload_records import UploadRecordStore

# Import concrete implementations used for instantiation
from celebindex.services.aws.dynamodb import DynamoDBIdentityIndex, DynamoDBUploadRecordStore
from celebindex.services.aws.s3 import S3ObjectStore
from celebindex.services.aws.sqs import SQSService
from celebindex.services.image_analysis import ImageAnalysisService
from celebindex.services.image_upload import ImageUploadService
from celebindex.services.recognition.rekognition import RekognitionCelebrityService

logger = get_logger(__name__)


class ServiceContainer:
    """Container for application services.

    Opens the AWS clients once per process and injects them into the
    stores and handlers, so no handler call creates its own session.

    Example:
        ```python
        container = ServiceContainer()
        await container.initialize()

        upload = container.image_upload_service
        analysis = container.image_analysis_service
        ```
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize empty container."""
        self.settings = settings or default_settings
        self.config: Optional[PipelineConfig] = None
        self._exit_stack: Optional[AsyncExitStack] = None
        self._init_lock = asyncio.Lock()

        # Core services - Use interface type hints
        self.object_store: Optional[ObjectStore] = None
        self.upload_records: Optional[UploadRecordStore] = None
        self.identity_index: Optional[IdentityIndex] = None
        self.recognition_service: Optional[CelebrityRecognitionService] = None
        self.sqs_service: Optional[SQSService] = None

        # Domain services (depend on interfaces)
        self.image_upload_service: Optional[ImageUploadService] = None
        self.image_analysis_service: Optional[ImageAnalysisService] = None

    @property
    def initialized(self) -> bool:
        return self._exit_stack is not None

    def _client_args(self) -> Dict[str, Any]:
        client_args: Dict[str, Any] = {"region_name": self.config.region}
        if self.settings.AWS_ACCESS_KEY_ID and self.settings.AWS_SECRET_ACCESS_KEY:
            logger.debug("Using explicit AWS credentials from config for aioboto3")
            client_args["aws_access_key_id"] = self.settings.AWS_ACCESS_KEY_ID
            client_args["aws_secret_access_key"] = self.settings.AWS_SECRET_ACCESS_KEY
        else:
            logger.debug("Allowing aioboto3 to discover AWS credentials automatically")
        return client_args

    async def initialize(self) -> None:
        """Initialize all services in the correct order.

        Raises:
            ConfigurationError: If bucket, region or table is not configured
        """
        async with self._init_lock:
            if self.initialized:
                return
            await self._open()

    async def _open(self) -> None:
        self.config = self.settings.pipeline_config()
        client_args = self._client_args()
        session = aioboto3.Session()

        stack = AsyncExitStack()
        try:
            s3 = await stack.enter_async_context(session.client("s3", **client_args))
            dynamodb = await stack.enter_async_context(session.client("dynamodb", **client_args))
            rekognition = await stack.enter_async_context(session.client("rekognition", **client_args))
        except Exception:
            await stack.aclose()
            raise
        self._exit_stack = stack

        self.object_store = S3ObjectStore(s3, self.config.bucket, self.config.region)
        self.upload_records = DynamoDBUploadRecordStore(dynamodb, self.config.uploads_table)
        self.identity_index = DynamoDBIdentityIndex(dynamodb, self.config.table)
        self.recognition_service = RekognitionCelebrityService(rekognition)
        self.sqs_service = SQSService(region_name=self.config.region)

        self.image_upload_service = ImageUploadService(
            config=self.config,
            object_store=self.object_store,
            upload_records=self.upload_records,
        )
        self.image_analysis_service = ImageAnalysisService(
            config=self.config,
            recognition_service=self.recognition_service,
            identity_index=self.identity_index,
        )
        logger.info(
            "Service container initialized",
            bucket=self.config.bucket,
            region=self.config.region,
            table=self.config.table,
            uploads_table=self.config.uploads_table,
        )

    async def cleanup(self) -> None:
        """Cleanup all services in reverse order of initialization."""
        self.image_upload_service = None
        self.image_analysis_service = None

        if self.sqs_service:
            await self.sqs_service.cleanup()
            self.sqs_service = None

        self.recognition_service = None
        self.identity_index = None
        self.upload_records = None
        self.object_store = None

        if self._exit_stack is not None:
            await self._exit_stack.aclose()
            self._exit_stack = None


# Global container instance
container = ServiceContainer()
