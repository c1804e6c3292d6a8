"""
System endpoints.

Health checks and graph status.
"""

from fastapi import APIRouter

from ..deps import ServicesDep

router = APIRouter()


@router.get("/status")
async def get_status(services: ServicesDep):
    """
    Health check endpoint.

    Returns system status and graph size for Docker healthcheck.
    """
    return {
        "status": "healthy",
        "service": "friendship-api",
        "graph": services.context.store.stats()
    }
