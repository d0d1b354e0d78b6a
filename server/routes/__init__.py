"""API routes package."""

from server.routes.file_routes import router as file_router
from server.routes.public_routes import router as public_router

__all__ = ["file_router", "public_router"]
