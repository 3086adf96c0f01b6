"""Image upload API endpoints."""
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from celebindex.api.models.upload import UploadResponse, parse_upload_request
from celebindex.core.exceptions import (
    ImageDecodeError,
    InvalidUploadRequestError,
    StorageError,
)
from celebindex.core.logging import get_logger
from celebindex.infrastructure.dependencies import get_image_upload_service
from celebindex.services.image_upload import ImageUploadService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        400: {"description": "Invalid request or storage failure"},
        500: {"description": "Internal server error"}
    }
)


@router.post(
    "/celeb",
    response_model=UploadResponse,
    summary="Upload an image",
    description=(
        "Stores a base64-encoded jpg or png image with public-read access and "
        "returns its public URL. Celebrity recognition runs asynchronously."
    ),
    responses={
        200: {
            "description": "Image stored",
            "content": {
                "application/json": {
                    "example": {
                        "url": "http://testbucket.s3-us-east-1.amazonaws.com/"
                               "550e8400-e29b-41d4-a716-446655440000.jpg"
                    }
                }
            },
        },
        400: {
            "description": "Malformed body, failed validation or storage failure",
            "content": {"text/plain": {"example": "validation request body failure\n"}},
        },
        500: {
            "description": "Image payload is not valid base64",
            "content": {"text/plain": {"example": "error decoding image base 64\n"}},
        },
    },
)
async def upload_image(
    request: Request,
    service: ImageUploadService = Depends(get_image_upload_service),
) -> Response:
    """Upload an image to the object store.

    The body is parsed by hand so validation failures are answered with a
    plain-text 400 rather than FastAPI's 422.
    """
    try:
        upload = parse_upload_request(await request.body())
        result = await service.upload(
            image_base64=upload.image_base64,
            file_name=upload.file_name,
            extension=upload.extension,
        )
    except InvalidUploadRequestError as e:
        return PlainTextResponse(e.message, status_code=status.HTTP_400_BAD_REQUEST)
    except ImageDecodeError:
        return PlainTextResponse(
            "error decoding image base 64\n",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except StorageError as e:
        logger.error("Issue uploading to s3", error=str(e))
        return PlainTextResponse(
            "unable to upload to s3\n",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except Exception as e:
        logger.error("Unexpected error during image upload",
                     error=str(e), exc_info=True)
        return PlainTextResponse(
            "an unexpected error occurred while processing the request\n",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(
        UploadResponse(url=result.url).model_dump(),
        status_code=status.HTTP_200_OK,
    )
