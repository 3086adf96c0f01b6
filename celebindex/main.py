"""Upload API for the celebrity indexing pipeline."""
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from celebindex.api import router as api_v1_router
from celebindex.core.config import settings
from celebindex.core.container import container
from celebindex.core.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the AWS clients before serving and close them on shutdown.

    A missing bucket, region or table aborts startup.
    """
    logger.info("Starting upload API", version=settings.VERSION, environment=settings.ENVIRONMENT)
    await container.initialize()
    try:
        yield
    finally:
        await container.cleanup()
        logger.info("Upload API stopped")


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["POST", "GET"],
        allow_headers=["*"],
    )
    application.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @application.get("/health")
    async def health_check() -> dict:
        return {"status": "healthy"}

    return application


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("celebindex.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
