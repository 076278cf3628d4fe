"""
Adelia Ad Server.

Builds interactive creatives, hosts their documents and assets under
``/media``, serves the universal tag and collects tracking beacons.
"""

import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from adelia.ad_server.dependencies import close_collaborators
from adelia.ad_server.middleware.metrics import MetricsMiddleware, metrics_endpoint
from adelia.ad_server.routers import creatives, health, serve, track
from adelia.common.config import Settings, get_settings
from adelia.common.exceptions import AdeliaError, StorageError
from adelia.common.logger import clear_log_context, get_logger, log_context
from adelia.common.utils import generate_request_id
from adelia.creative.registry import get_registry
from adelia.schemas.response import ErrorResponse

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        "Starting Adelia server",
        version=settings.app_version,
        env=settings.env,
        kinds=len(get_registry().kinds()),
        upload_backend=settings.upload.backend,
        tracking=settings.tracking.enabled,
    )

    yield

    await close_collaborators()
    logger.info("Adelia server stopped")


def _error_body(
    error: str,
    message: str,
    details: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> dict[str, Any]:
    return ErrorResponse(
        error=error,
        message=message,
        details=details,
        request_id=request_id,
    ).model_dump()


def _field_path(loc: tuple[Any, ...]) -> str:
    """``("body", "settings", "puzzle", "accent_color")`` -> ``settings.puzzle.accent_color``."""
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "query", "path"):
        parts = parts[1:]
    return ".".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AdeliaError)
    async def adelia_error_handler(request: Request, exc: AdeliaError) -> JSONResponse:
        logger.warning(
            "Request rejected",
            error=exc.__class__.__name__,
            message=exc.message,
            details=exc.details,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                exc.__class__.__name__,
                exc.message,
                exc.details,
                getattr(request.state, "request_id", None),
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = _field_path(tuple(first.get("loc", ())))
        logger.info("Invalid request", field=field, errors=len(errors))
        return JSONResponse(
            status_code=422,
            content=_error_body(
                "ValidationError",
                first.get("msg", "Invalid request"),
                {
                    "field": field,
                    "errors": [
                        {"field": _field_path(tuple(e.get("loc", ()))), "message": e.get("msg", "")}
                        for e in errors
                    ],
                },
                getattr(request.state, "request_id", None),
            ),
        )

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unexpected error",
            error=str(exc),
            error_type=exc.__class__.__name__,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "InternalServerError",
                "An unexpected error occurred",
                request_id=getattr(request.state, "request_id", None),
            ),
        )


def register_middleware(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials="*" not in settings.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.monitoring.enabled:
        app.add_middleware(MetricsMiddleware)
        app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["monitoring"])

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next: Any) -> Any:
        """Bind a request id for the request's log lines and echo it back."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        request.state.request_id = request_id
        log_context(request_id=request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
        finally:
            clear_log_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response


def mount_media(app: FastAPI, settings: Settings) -> None:
    """Serve what the local uploader writes."""
    media_root = Path(settings.storage.root_dir)
    try:
        media_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Cannot create storage root {media_root}: {e}") from e
    app.mount("/media", StaticFiles(directory=media_root), name="media")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Interactive ad creative engine",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    register_middleware(app, settings)
    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(creatives.router, prefix="/api/v1/creatives", tags=["creatives"])
    app.include_router(track.router, prefix="/api", tags=["track"])
    app.include_router(serve.router, tags=["serve"])
    mount_media(app, settings)

    return app


app = create_app()


def main() -> None:
    """Run the server using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "adelia.ad_server.main:app",
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers,
        reload=settings.server.reload,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
