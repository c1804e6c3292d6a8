"""
Services layer for the Friendship API.

This module provides the core business logic as reusable services
that can be consumed by the CLI and the HTTP API.
"""

from typing import Optional

from .base import BaseService, ServiceContext
from .user_service import UserService

__all__ = [
    "BaseService",
    "ServiceContext",
    "UserService",
    "create_services",
]


def create_services(context: Optional[ServiceContext] = None):
    """
    Factory function to create all services with proper dependencies.

    Args:
        context: Optional ServiceContext (creates one if not provided)

    Returns:
        Tuple of (context, users)
    """
    if context is None:
        context = ServiceContext.create()

    return context, UserService(context)
