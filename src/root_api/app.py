"""
FastAPI application for the root API.
Greeting, health/uptime and deployment smoke-test endpoints.
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from root_api.config import ServiceConfig

ROOT_MESSAGE = "Hello from root API"

# Each entry registers a GET route answering {"message", "timestamp"}.
SMOKE_TEST_ROUTES: tuple[tuple[str, str], ...] = (
    ("/test-ci", "Bhai!...mai bhi deploy hogya. badhai ho bhai"),
    ("/test-docker-ecr-app-runner", "Sab sahi hai"),
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ServiceContext:
    """Values fixed at process start and shared read-only by all handlers."""

    config: ServiceConfig
    monotonic: Callable[[], float] = field(default=time.monotonic, repr=False)
    clock: Callable[[], datetime] = field(default=_utc_now, repr=False)
    started_at: float | None = None

    def __post_init__(self):
        if self.started_at is None:
            object.__setattr__(self, "started_at", self.monotonic())

    def uptime_seconds(self) -> int:
        """Whole seconds elapsed since start, never negative."""
        return max(0, math.floor(self.monotonic() - self.started_at))

    def timestamp(self) -> str:
        """Current time as an ISO-8601 UTC string with millisecond precision."""
        now = self.clock().astimezone(timezone.utc)
        return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_application(
    context: ServiceContext,
    smoke_test_routes: tuple[tuple[str, str], ...] = SMOKE_TEST_ROUTES,
) -> FastAPI:
    """Create the FastAPI application bound to a service context.

    Args:
        context: Start time and settings captured once at startup
        smoke_test_routes: Ordered (path, message) pairs for smoke-test endpoints

    Returns:
        FastAPI application exposing the exact-path GET routes
    """
    app = FastAPI(title="Root API", version="1.0.0", redirect_slashes=False)

    @app.exception_handler(StarletteHTTPException)
    async def not_found_for_unsupported_methods(request: Request, exc: StarletteHTTPException):
        """Answer unsupported methods on a known path with the plain 404."""
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return JSONResponse({"detail": "Not Found"}, status_code=status.HTTP_404_NOT_FOUND)
        return await http_exception_handler(request, exc)

    @app.get("/")
    async def root():
        """Static greeting."""
        return {"message": ROOT_MESSAGE}

    @app.get("/health")
    async def health_check():
        """Health check endpoint reporting whole-second uptime."""
        return {"status": "ok", "uptime": context.uptime_seconds()}

    for path, message in smoke_test_routes:
        app.add_api_route(
            path,
            _smoke_test_endpoint(context, message),
            methods=["GET"],
            name=path.strip("/"),
        )

    return app


def _smoke_test_endpoint(context: ServiceContext, message: str):
    async def smoke_test():
        return {"message": message, "timestamp": context.timestamp()}

    smoke_test.__doc__ = "Deployment smoke test: fixed message plus current time."
    return smoke_test
