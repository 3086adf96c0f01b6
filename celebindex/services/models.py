"""Service-specific models.

This module contains models used by services that are independent of the API layer.
"""
from typing import List, Optional
from urllib.parse import unquote_plus

from pydantic import BaseModel, ConfigDict, Field

from celebindex.domain.value_objects.recognition import ObjectReference


class QueueMessage(BaseModel):
    """A raw message received from the recognition-trigger queue."""
    message_id: str = Field(..., description="SQS message identifier")
    receipt_handle: str = Field("", description="Handle used to delete the message")
    body: str = Field(..., description="Raw message body")


class UploadResult(BaseModel):
    """Result of a successful upload."""
    id: str = Field(..., description="Generated upload identifier")
    key: str = Field(..., description="S3 object key")
    url: str = Field(..., description="Public URL of the stored image")
    metadata_saved: bool = Field(True, description="Whether the upload record was persisted")


# S3 event notification envelope. Unknown fields are ignored.

class _S3Bucket(BaseModel):
    model_config = ConfigDict(extra="ignore")
    name: str


class _S3Object(BaseModel):
    model_config = ConfigDict(extra="ignore")
    key: str
    size: Optional[int] = None


class _S3Entity(BaseModel):
    model_config = ConfigDict(extra="ignore")
    bucket: _S3Bucket
    object: _S3Object


class S3EventRecord(BaseModel):
    """One object record inside an S3 event notification."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    event_name: Optional[str] = Field(None, alias="eventName")
    aws_region: Optional[str] = Field(None, alias="awsRegion")
    s3: _S3Entity

    def to_reference(self, default_region: str) -> ObjectReference:
        """Resolve the record to an object reference.

        Keys arrive URL-encoded in S3 notifications.
        """
        return ObjectReference(
            bucket=self.s3.bucket.name,
            key=unquote_plus(self.s3.object.key),
            region=self.aws_region or default_region,
        )


class S3Event(BaseModel):
    """S3 event notification as delivered in a queue message body.

    ``s3:TestEvent`` notifications carry no records.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    records: List[S3EventRecord] = Field(default_factory=list, alias="Records")
