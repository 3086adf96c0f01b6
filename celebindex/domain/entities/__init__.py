"""Domain entities package."""
from .identity import BoundingBox, IdentityRecord, RecognizedIdentity, UploadRecord

__all__ = ["BoundingBox", "IdentityRecord", "RecognizedIdentity", "UploadRecord"]
