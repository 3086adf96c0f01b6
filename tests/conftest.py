"""Shared fixtures and in-memory collaborators for the test suite."""
import asyncio
import base64
import json
from typing import Dict, List, Optional, Tuple

import pytest

from celebindex.core.config import PipelineConfig
from celebindex.core.exceptions import (
    IdentityIndexError,
    MetadataStoreError,
    RecognitionError,
    StorageError,
)
from celebindex.core.utils.urls import public_url
from celebindex.domain.entities.identity import IdentityRecord, RecognizedIdentity, UploadRecord
from celebindex.domain.interfaces.recognition.celebrity_recognition import CelebrityRecognitionService
from celebindex.domain.interfaces.storage.identity_index import IdentityIndex
from celebindex.domain.interfaces.storage.object_store import ObjectStore
from celebindex.domain.interfaces.storage.upload_records import UploadRecordStore
from celebindex.domain.value_objects.recognition import ObjectReference, RecognitionOutcome
from celebindex.services.image_analysis import ImageAnalysisService
from celebindex.services.image_upload import ImageUploadService
from celebindex.services.models import QueueMessage

# Start and end markers of a JPEG with a minimal body; content is never decoded.
JPEG_BYTES = (
    b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
    b"\xff\xdb\x00C\x00" + bytes(range(64)) + b"\xff\xd9"
)


def s3_event_body(bucket: str, key: str, region: Optional[str] = "us-east-1") -> str:
    """Build an SQS body carrying an S3 ObjectCreated notification."""
    record = {
        "eventVersion": "2.1",
        "eventSource": "aws:s3",
        "eventName": "ObjectCreated:Put",
        "s3": {
            "s3SchemaVersion": "1.0",
            "bucket": {"name": bucket, "arn": f"arn:aws:s3:::{bucket}"},
            "object": {"key": key, "size": 1024},
        },
    }
    if region is not None:
        record["awsRegion"] = region
    return json.dumps({"Records": [record]})


class FakeObjectStore(ObjectStore):
    """Object store that keeps blobs in memory and queues notifications."""

    def __init__(self, bucket: str, region: str, fail: bool = False):
        self.bucket = bucket
        self.region = region
        self.fail = fail
        self.objects: Dict[str, bytes] = {}
        self.notifications: List[str] = []

    async def put(self, data: bytes, key: str) -> str:
        if self.fail:
            raise StorageError(f"Failed to upload file '{key}'")
        self.objects[key] = data
        self.notifications.append(s3_event_body(self.bucket, key, self.region))
        return public_url(self.bucket, self.region, key)


class FakeUploadRecordStore(UploadRecordStore):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.records: Dict[str, UploadRecord] = {}

    async def save(self, record: UploadRecord) -> None:
        if self.fail:
            raise MetadataStoreError("table unavailable", details={"error_code": "ResourceNotFoundException"})
        self.records[record.id] = record


class FakeIdentityIndex(IdentityIndex):
    """Identity index applying merges as a compare-and-swap loop.

    Each merge reads a versioned snapshot, yields to other tasks, then
    writes only if the version is unchanged, retrying otherwise.
    """

    def __init__(self):
        self._items: Dict[str, Tuple[int, IdentityRecord]] = {}
        self.fail_on: Optional[str] = None
        self.calls: List[Tuple[str, str, str]] = []

    def get(self, identity_id: str) -> Optional[IdentityRecord]:
        item = self._items.get(identity_id)
        return item[1] if item else None

    def _compare_and_swap(self, identity_id: str, expected: int, record: IdentityRecord) -> bool:
        current = self._items.get(identity_id)
        current_version = current[0] if current else 0
        if current_version != expected:
            return False
        self._items[identity_id] = (expected + 1, record)
        return True

    async def merge(self, identity_id: str, display_name: str, image_url: str) -> IdentityRecord:
        self.calls.append((identity_id, display_name, image_url))
        if self.fail_on == identity_id:
            raise IdentityIndexError(f"Failed to merge identity '{identity_id}'")
        while True:
            current = self._items.get(identity_id)
            version, existing = current if current else (0, None)
            await asyncio.sleep(0)
            if existing is None:
                updated = IdentityRecord(
                    identity_id=identity_id,
                    display_name=display_name,
                    image_urls=[image_url],
                )
            else:
                updated = IdentityRecord(
                    identity_id=identity_id,
                    display_name=existing.display_name or display_name,
                    image_urls=[*existing.image_urls, image_url],
                )
            if self._compare_and_swap(identity_id, version, updated):
                return updated


class FakeRecognitionService(CelebrityRecognitionService):
    """Returns canned outcomes per object key."""

    def __init__(self):
        self.outcomes: Dict[str, RecognitionOutcome] = {}
        self.fail_keys: set = set()
        self.calls: List[ObjectReference] = []

    def add(self, key: str, identities: List[Tuple[str, str]], unrecognized: int = 0) -> None:
        self.outcomes[key] = RecognitionOutcome(
            identities=[
                RecognizedIdentity(identity_id=identity_id, display_name=name, match_confidence=99.0)
                for identity_id, name in identities
            ],
            unrecognized_faces=unrecognized,
        )

    async def recognize(self, ref: ObjectReference) -> RecognitionOutcome:
        self.calls.append(ref)
        if ref.key in self.fail_keys:
            raise RecognitionError(f"Failed to recognize celebrities in '{ref.bucket}/{ref.key}'")
        return self.outcomes.get(ref.key, RecognitionOutcome())


def queue_message(body: str, message_id: str = "msg-1") -> QueueMessage:
    return QueueMessage(message_id=message_id, receipt_handle=f"rh-{message_id}", body=body)


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig(
        bucket="testbucket",
        region="us-east-1",
        table="celebs",
        uploads_table="uploads",
    )


@pytest.fixture
def jpeg_base64() -> str:
    return base64.b64encode(JPEG_BYTES).decode("ascii")


@pytest.fixture
def object_store(config) -> FakeObjectStore:
    return FakeObjectStore(config.bucket, config.region)


@pytest.fixture
def upload_records() -> FakeUploadRecordStore:
    return FakeUploadRecordStore()


@pytest.fixture
def identity_index() -> FakeIdentityIndex:
    return FakeIdentityIndex()


@pytest.fixture
def recognition_service() -> FakeRecognitionService:
    return FakeRecognitionService()


@pytest.fixture
def upload_service(config, object_store, upload_records) -> ImageUploadService:
    return ImageUploadService(config, object_store, upload_records)


@pytest.fixture
def analysis_service(config, recognition_service, identity_index) -> ImageAnalysisService:
    return ImageAnalysisService(config, recognition_service, identity_index)


@pytest.fixture
def s3_event():
    return s3_event_body


@pytest.fixture
def make_message():
    return queue_message
