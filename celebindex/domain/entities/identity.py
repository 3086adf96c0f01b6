"""Core identity and upload domain entities."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BoundingBox(BaseModel):
    """Face bounding box, as ratios of the image dimensions."""
    left: float = Field(0.0, description="Left coordinate of the bounding box")
    top: float = Field(0.0, description="Top coordinate of the bounding box")
    width: float = Field(0.0, description="Width of the bounding box")
    height: float = Field(0.0, description="Height of the bounding box")


class RecognizedIdentity(BaseModel):
    """A face the recognition service matched to a known identity."""
    identity_id: str = Field(..., description="Stable identifier assigned by the recognition service")
    display_name: str = Field(..., description="Name of the recognized person")
    match_confidence: Optional[float] = Field(None, description="Match confidence (0-100)")
    bounding_box: Optional[BoundingBox] = Field(None, description="Location of the face in the image")
    urls: List[str] = Field(default_factory=list, description="Reference links for the identity")


class UploadRecord(BaseModel):
    """Metadata written once for every stored upload."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Generated unique identifier of the upload")
    file_name: str = Field(..., min_length=1, description="File name supplied by the uploader")
    url: str = Field(..., description="Public URL of the stored image")
    extension: str = Field(..., description="Validated image extension")


class IdentityRecord(BaseModel):
    """Per-identity index entry.

    ``image_urls`` is append-only and may hold duplicates, one entry per
    recognition of the identity.
    """
    identity_id: str = Field(..., description="Stable identifier assigned by the recognition service")
    display_name: Optional[str] = Field(None, description="First name recorded for the identity")
    image_urls: List[str] = Field(default_factory=list, description="URLs of images showing the identity")
