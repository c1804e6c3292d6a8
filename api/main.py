"""
FastAPI application entry point.

Configures the API with all routes, middleware, and error handling.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from friendship import __version__
from friendship.config import load_config
from friendship.errors import FriendshipError

from .v1.router import router as v1_router
from .deps import get_services, close_services

logger = logging.getLogger(__name__)

# Configure logging
logging.basicConfig(
    level=load_config().log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

VALIDATION_STATUS_CODE = 422
VALIDATION_ERROR_TYPE = "UNPROCESSABLE_ENTITY_EXCEPTION"
VALIDATION_ERROR_MESSAGE = "Request validation error"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info("Starting Friendship API...")

    # Open the graph store on startup
    get_services()
    logger.info("Services initialized")

    yield

    # Cleanup on shutdown
    logger.info("Shutting down...")
    close_services()


app = FastAPI(
    title="Friendship API",
    description="API for managing users and their friendships, with 1st/2nd/3rd degree friend lookups",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FriendshipError)
async def friendship_exception_handler(request: Request, exc: FriendshipError):
    if exc.status_code >= 500:
        logger.error(f"{exc.type} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        location = error.get("loc") or ()
        errors.append({
            "field": str(location[-1]) if location else "",
            "rule": str(error.get("type", "")).upper(),
            "message": error.get("msg", "")
        })

    return JSONResponse(
        status_code=VALIDATION_STATUS_CODE,
        content={
            "statusCode": VALIDATION_STATUS_CODE,
            "type": VALIDATION_ERROR_TYPE,
            "message": VALIDATION_ERROR_MESSAGE,
            "data": {"errors": errors}
        }
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# Health check
@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "friendship-api"}


# Include API v1 routes
app.include_router(v1_router, prefix="/api/v1")


# Root endpoint
@app.get("/", tags=["System"])
async def root():
    """API root endpoint."""
    return {
        "name": "Friendship API",
        "version": __version__,
        "docs": "/docs"
    }
