"""Recognition value objects."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from celebindex.domain.entities.identity import RecognizedIdentity


class ObjectReference(BaseModel):
    """Location of a stored image, as carried by an object-created event."""
    model_config = ConfigDict(frozen=True)

    bucket: str = Field(..., description="S3 bucket name")
    key: str = Field(..., description="S3 object key")
    region: Optional[str] = Field(None, description="Region the event originated from")


class RecognitionOutcome(BaseModel):
    """Result of one recognition call. Never persisted."""
    identities: List[RecognizedIdentity] = Field(default_factory=list, description="Recognized identities, in service order")
    unrecognized_faces: int = Field(0, ge=0, description="Faces detected but not matched to an identity")


class AnalysisSummary(BaseModel):
    """Counters for a successfully processed analysis batch."""
    messages: int = Field(0, description="Queue messages in the batch")
    objects: int = Field(0, description="Object records analyzed")
    identities_merged: int = Field(0, description="Merge updates applied to the identity index")
    unrecognized_faces: int = Field(0, description="Faces detected without a known identity")
