"""API models for image uploads."""
import json
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from celebindex.core.exceptions import InvalidUploadRequestError
from celebindex.core.logging import get_logger

logger = get_logger(__name__)

UNMARSHAL_ERROR_MESSAGE = "error unmarshalling request"
VALIDATION_ERROR_MESSAGE = "validation request body failure\n"


class ImageUploadRequest(BaseModel):
    """Request body for the upload endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    image_base64: str = Field(
        ...,
        alias="imageBase64",
        min_length=1,
        description="Standard base64 encoding of the image bytes",
    )
    file_name: str = Field(
        ...,
        alias="fileName",
        min_length=1,
        description="Original file name supplied by the uploader",
    )
    extension: Literal["jpg", "png"] = Field(
        ...,
        description="Image extension, case-sensitive",
    )


class UploadResponse(BaseModel):
    """Response body for a successful upload."""
    url: str = Field(..., description="Public URL of the stored image")


def parse_upload_request(body: bytes) -> ImageUploadRequest:
    """Decode and validate a raw upload request body.

    Args:
        body: Raw request body

    Returns:
        ImageUploadRequest: The validated request

    Raises:
        InvalidUploadRequestError: If the body is not JSON or fails validation.
            The error message is the text returned to the client.
    """
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error("Error unmarshalling request", error=str(e))
        raise InvalidUploadRequestError(UNMARSHAL_ERROR_MESSAGE) from e

    if not isinstance(payload, dict):
        logger.error("Error unmarshalling request", error="body is not a JSON object")
        raise InvalidUploadRequestError(UNMARSHAL_ERROR_MESSAGE)

    try:
        return ImageUploadRequest.model_validate(payload)
    except ValidationError as e:
        for error in e.errors():
            logger.error(
                "Validation request failure",
                field=".".join(str(part) for part in error["loc"]),
                error=error["msg"],
            )
        raise InvalidUploadRequestError(
            VALIDATION_ERROR_MESSAGE,
            details={"errors": e.errors(include_url=False)},
        ) from e
