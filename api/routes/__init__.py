"""API route modules."""

from .health_routes import router as health_router
from .journals_routes import router as journals_router
from .theses_routes import router as theses_router

__all__ = [
    "health_router",
    "journals_router",
    "theses_router",
]
