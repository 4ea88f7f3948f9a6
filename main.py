"""FastAPI application entrypoint for the corporate travel booking service.

``create_app`` wires settings, repositories and services once; the
module-level ``app`` is what the ASGI server loads.
"""
from typing import Optional
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from travel_booking.api.responses import INVALID_REQUEST, error_response
from travel_booking.api.routes import router
from travel_booking.core.config import Settings, get_settings
from travel_booking.core.logging import get_logger, setup_logging
from travel_booking.infrastructure.factory import create_repositories
from travel_booking.infrastructure.redis import ping_redis
from travel_booking.services.booking import BookingService
from travel_booking.services.employee import EmployeeService

logger = get_logger(__name__)

# Application metadata
APP_VERSION = "1.0.0"
APP_NAME = "Corporate Travel Booking Service"


def create_app(settings: Optional[Settings] = None, redis_client=None) -> FastAPI:
    """Build the application for the given settings.

    Args:
        settings: Resolved settings (defaults to the environment)
        redis_client: Optional Redis client to use instead of building one

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    setup_logging(level=settings.log_level, json_format=settings.use_json_logs)

    try:
        settings.validate_required_settings()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        # Partial setups are allowed outside production
        if settings.environment == "production":
            raise

    app = FastAPI(
        title=APP_NAME,
        debug=settings.debug,
        description="Employee registration and corporate travel bookings",
        version=APP_VERSION,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )

    repositories = create_repositories(settings, redis_client=redis_client)
    app.state.settings = settings
    app.state.repositories = repositories
    app.state.employee_service = EmployeeService(repositories.employees)
    app.state.booking_service = BookingService(repositories.bookings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with timing, status code and a request ID."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round(duration_ms, 2),
                    "error_type": type(e).__name__,
                },
                exc_info=True
            )
            return JSONResponse(
                status_code=500,
                content={"status": "SYSTEM_ERROR", "message": "An unexpected error occurred", "requestId": request_id}
            )

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            }
        )
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def invalid_request_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies are a 400, not FastAPI's default 422."""
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"Invalid request format: {location} {first.get('msg', '')}".strip()
        else:
            message = "Invalid request format"
        logger.warning(f"Invalid request on {request.url.path}: {message}")
        return error_response(400, INVALID_REQUEST, message)

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "Application starting up",
            extra={"operation": "startup", "outcome": repositories.backend}
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Application shutting down")

    app.include_router(router)

    @app.get("/")
    def root():
        """Root endpoint with basic service info."""
        return {
            "service": APP_NAME,
            "version": APP_VERSION,
            "status": "running",
            "environment": settings.environment,
        }

    @app.get("/health")
    def health_check():
        """Liveness probe. Does not touch the store."""
        return {
            "status": "healthy",
            "version": APP_VERSION,
            "checks": {"api": "ok", "repository": repositories.backend},
        }

    @app.get("/ready")
    def readiness_check():
        """Readiness probe: verifies the configured store is reachable."""
        checks = {"repository": repositories.backend}
        if repositories.redis_client is not None:
            checks["redis"] = "ok" if ping_redis(repositories.redis_client) else "unreachable"

        all_ok = checks.get("redis", "ok") == "ok"
        return JSONResponse(
            status_code=200 if all_ok else 503,
            content={"status": "ready" if all_ok else "degraded", "checks": checks},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
