"""Service interfaces package."""
from .recognition.celebrity_recognition import CelebrityRecognitionService
from .storage.identity_index import IdentityIndex
from .storage.object_store import ObjectStore
from .storage.upload_records import UploadRecordStore

__all__ = ["CelebrityRecognitionService", "IdentityIndex", "ObjectStore", "UploadRecordStore"]
