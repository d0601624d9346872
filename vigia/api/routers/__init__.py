"""
Vigia - API Routers
===================

Route handlers for the API.
"""

from .health import router as health_router
from .members import router as members_router
from .facts import router as facts_router
from .history import router as history_router

__all__ = [
    "health_router",
    "members_router",
    "facts_router",
    "history_router",
]
