"""API v1 router initialization."""
from fastapi import APIRouter

from .images import router as images_router

# Create v1 router
router = APIRouter()

# Include image upload endpoints
router.include_router(
    images_router,
    tags=["images"]
)
