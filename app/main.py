# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Bootcamp Directory API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 5000
# =============================================================================

import logging
from contextlib import asynccontextmanager

from bson.errors import InvalidId
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import (
    BootcampApiException,
    bootcamp_api_exception_handler,
    duplicate_key_exception_handler,
    http_exception_handler,
    invalid_id_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.routers import bootcamps, courses, health, reviews, users
from lib.database import Database

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Ensure database indexes
    - Shutdown: Close the database client
    """
    # Startup
    logger.info(f"Starting Bootcamp API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    Database.ensure_indexes()

    yield

    # Shutdown
    logger.info("Shutting down Bootcamp API")
    Database.close()


# Create FastAPI application
app = FastAPI(
    title="Bootcamp Directory API",
    description="""
## Bootcamp Directory API

Create, read, update and delete bootcamps, courses, reviews and users.

### Key Features

- **Advanced results**: filter (`average_cost[lte]=10000`), select, sort and paginate every list
- **Radius search**: bootcamps within N miles of a zipcode
- **Roles**: users join and review bootcamps, publishers publish one bootcamp and its courses, admins do anything
- **Averages**: each bootcamp's average cost and rating follow its courses and reviews

### Quick Start

```bash
# 1. Register a publisher
curl -X POST http://localhost:5000/api/v1/auth/register \\
  -H "Content-Type: application/json" \\
  -d '{"name": "John Doe", "email": "john@gmail.com", "password": "123456", "role": "publisher"}'

# 2. Create a bootcamp
curl -X POST http://localhost:5000/api/v1/bootcamps \\
  -H "Authorization: Bearer <token>" \\
  -H "Content-Type: application/json" \\
  -d '{"name": "Devworks Bootcamp", "description": "...", "address": "233 Bay State Rd Boston MA 02215", "careers": ["Web Development"]}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Register, login, and manage your own account",
        },
        {
            "name": "Bootcamps",
            "description": "Bootcamps, radius search, photos and membership",
        },
        {
            "name": "Courses",
            "description": "Courses offered by bootcamps",
        },
        {
            "name": "Reviews",
            "description": "Reviews written by bootcamp members",
        },
        {
            "name": "Users",
            "description": "User administration (admin only)",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


if settings.is_development:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Dev request logger: METHOD url for every request."""
        logger.info(f"{request.method} {request.url}")
        return await call_next(request)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(BootcampApiException, bootcamp_api_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(DuplicateKeyError, duplicate_key_exception_handler)
app.add_exception_handler(InvalidId, invalid_id_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Bootcamp endpoints (including nested courses and reviews)
app.include_router(
    bootcamps.router,
    prefix="/api/v1/bootcamps",
    tags=["Bootcamps"]
)

# Course endpoints
app.include_router(
    courses.router,
    prefix="/api/v1/courses",
    tags=["Courses"]
)

# Review endpoints
app.include_router(
    reviews.router,
    prefix="/api/v1/reviews",
    tags=["Reviews"]
)

# User administration endpoints
app.include_router(
    users.router,
    prefix="/api/v1/users",
    tags=["Users"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Bootcamp Directory API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
