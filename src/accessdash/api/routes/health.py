"""Health check endpoint."""

from fastapi import APIRouter

from accessdash import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Return service health status."""
    return {"status": "healthy", "service": "accessdash", "version": __version__}
