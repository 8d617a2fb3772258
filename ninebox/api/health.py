"""Health and metrics endpoints."""

from fastapi import APIRouter

from ninebox import __version__

router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/metrics")
async def metrics():
    """Basic metrics endpoint for observability."""
    return {"service": "ninebox", "version": __version__}
