"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from . import users, system

router = APIRouter()

# Include all route modules
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(system.router, prefix="/system", tags=["System"])
