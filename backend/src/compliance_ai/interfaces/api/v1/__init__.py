from fastapi import APIRouter

from .action_suggestion import router as action_suggestion_router
from .document import router as document_router
from .key_point import router as key_point_router
from .parameter import router as parameter_router

router = APIRouter(prefix="/v1")
router.include_router(document_router)
router.include_router(key_point_router)
router.include_router(action_suggestion_router)
router.include_router(parameter_router)


@router.get(
    "/health",
    summary="API Health Check",
    description="Simple health check endpoint for monitoring and container orchestration.",
    responses={
        200: {"description": "API is healthy and responding"},
    },
)
async def health_check():
    """Health check endpoint for Docker health checks."""
    return {"status": "healthy", "message": "Compliance AI API is running"}
