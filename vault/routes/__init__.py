"""API routes package."""

from vault.routes.upload_routes import router as upload_router
from vault.routes.file_routes import router as file_router
from vault.routes.realtime_routes import router as realtime_router

__all__ = ["upload_router", "file_router", "realtime_router"]
