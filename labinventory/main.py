"""FastAPI application entry point."""

import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from labinventory.api.errors import request_validation_exception_handler
from labinventory.api.v1 import health, inventory
from labinventory.config import settings
from labinventory.db import async_session_maker, dispose_engine
from labinventory.logging import bind_request_context, setup_logging
from labinventory.models.base import new_ulid
from labinventory.services.users.user_service import UserService

# Configure logging before anything else
setup_logging()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Lab Inventory API", debug=settings.debug)

    # Seed the SYSTEM actor so request paths only ever read it
    async with async_session_maker() as session:
        actor_id = await UserService(session).get_system_actor_id()
        await session.commit()
    logger.info("System actor ready", user_id=actor_id)

    yield

    logger.info("Shutting down Lab Inventory API")
    await dispose_engine()
    logger.info("Database connections disposed")


app = FastAPI(
    title="Lab Inventory API",
    description="Equipment and consumable tracking for a research lab",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(RequestValidationError, request_validation_exception_handler)  # type: ignore[arg-type]

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(inventory.router, prefix="/api/v1")


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Bind a request id to the log context and log each request once it completes."""
    request_id = request.headers.get("x-request-id") or new_ulid()
    bind_request_context(request_id=request_id, method=request.method, path=request.url.path)

    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - started) * 1000, 1)

    response.headers["X-Request-ID"] = request_id
    log = logger.warning if response.status_code >= 500 else logger.info
    log("Request completed", status_code=response.status_code, duration_ms=duration_ms)
    return response
