"""FastAPI dependency providers."""
from typing import AsyncGenerator

from fastapi import Depends

from celebindex.core.container import ServiceContainer, container
from celebindex.core.exceptions import ServiceNotInitializedError
from celebindex.services.image_upload import ImageUploadService


async def get_container() -> ServiceContainer:
    """Dependency provider for the global ServiceContainer instance."""
    if not container.initialized:
        try:
            await container.initialize()
        except Exception as e:
            raise ServiceNotInitializedError(f"Service container could not be initialized: {e}") from e
    return container


async def get_image_upload_service(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[ImageUploadService, None]:
    """Provide the image upload service.

    Raises:
        ServiceNotInitializedError: If the service is missing from the container
    """
    if not container.image_upload_service:
        raise ServiceNotInitializedError("ImageUploadService not found in initialized container")
    yield container.image_upload_service
