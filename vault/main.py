"""Entry point for the MediaVault server."""

import logging
import time
import uuid
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from common.logging_config import setup_logging
from vault import config
from vault.exceptions import (
    VaultException,
    InvalidNamespaceError,
    EmptyBatchError,
    FileTooLargeError,
    NamespaceNotFoundError,
)
from vault.routes.file_routes import router as file_router
from vault.routes.realtime_routes import router as realtime_router
from vault.routes.upload_routes import router as upload_router
from vault.schemas.common import HealthResponse
from vault.schemas.files import PREVIEWS_URL_PREFIX, UPLOADS_URL_PREFIX
from vault.service_locator import VaultServices, build_services

logger = setup_logging('vault')


def _error_response(
    request: Request,
    exc: Exception,
    status_code: int,
    code: str,
    level: int = logging.WARNING,
) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.log(
        level,
        f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=level >= logging.ERROR
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": code}
    )


def create_app(services: Optional[VaultServices] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        services: Pre-built components; built from vault.config when omitted

    Returns:
        Configured application
    """
    if services is None:
        services = build_services()

    app = FastAPI(
        title="MediaVault",
        description="Per-user media upload service with scanning, previews and live updates",
        version="1.0.0"
    )
    app.state.services = services

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Middleware to log all HTTP requests and responses.
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        logger.info(
            f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
        )

        response = await call_next(request)

        duration = time.time() - start_time

        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
        )

        response.headers["X-Request-ID"] = request_id

        return response

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            f"MediaVault starting up [uploads={services.storage.upload_root}] "
            f"[previews={services.storage.preview_root}]"
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("MediaVault shutting down...")

    @app.exception_handler(InvalidNamespaceError)
    async def invalid_namespace_handler(request: Request, exc: InvalidNamespaceError):
        return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "INVALID_NAMESPACE")

    @app.exception_handler(EmptyBatchError)
    async def empty_batch_handler(request: Request, exc: EmptyBatchError):
        return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "EMPTY_BATCH")

    @app.exception_handler(FileTooLargeError)
    async def file_too_large_handler(request: Request, exc: FileTooLargeError):
        return _error_response(request, exc, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "FILE_TOO_LARGE")

    @app.exception_handler(NamespaceNotFoundError)
    async def namespace_not_found_handler(request: Request, exc: NamespaceNotFoundError):
        return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "NAMESPACE_NOT_FOUND")

    @app.exception_handler(VaultException)
    async def vault_exception_handler(request: Request, exc: VaultException):
        return _error_response(
            request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", level=logging.ERROR
        )

    app.include_router(upload_router)
    app.include_router(file_router)
    app.include_router(realtime_router)

    app.mount(
        UPLOADS_URL_PREFIX,
        StaticFiles(directory=services.storage.upload_root),
        name="uploads"
    )
    app.mount(
        PREVIEWS_URL_PREFIX,
        StaticFiles(directory=services.storage.preview_root),
        name="thumbs"
    )

    @app.get("/")
    async def root():
        """
        Root endpoint for health check.
        """
        return {"message": "MediaVault API", "status": "running"}

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """
        Health check endpoint for container healthchecks.
        Returns 200 if service is alive.
        """
        return HealthResponse(status="healthy", service="vault")

    return app


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "vault.main:create_app",
        factory=True,
        host=config.VAULT_HOST,
        port=config.VAULT_PORT,
    )


if __name__ == "__main__":
    main()
