"""
API dependencies.

Provides dependency injection for services.
"""

import logging
from typing import Optional, Annotated
from dataclasses import dataclass

from fastapi import Depends

from friendship.config import load_config, Config
from friendship.services import ServiceContext, UserService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Container for all services."""
    config: Config
    context: ServiceContext
    users: UserService


# Global services instance (singleton)
_services: Optional[Services] = None


def build_services(context: ServiceContext) -> Services:
    """Wire every service around an existing context."""
    return Services(
        config=context.config,
        context=context,
        users=UserService(context)
    )


def get_services() -> Services:
    """
    Get or create the services singleton.

    This opens the graph store on first call.
    """
    global _services

    if _services is None:
        logger.info("Initializing services...")

        config = load_config()
        context = ServiceContext.create(config=config)
        _services = build_services(context)

        logger.info("Services initialized successfully")

    return _services


def close_services():
    """Close and cleanup services."""
    global _services
    if _services:
        _services.context.close()
        _services = None
        logger.info("Services closed")


# Dependency for getting services
def services_dep() -> Services:
    """FastAPI dependency for services."""
    return get_services()


ServicesDep = Annotated[Services, Depends(services_dep)]
