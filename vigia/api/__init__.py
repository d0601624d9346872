"""
Vigia - API Package
===================

FastAPI boundary over the moderation service.

Usage:
    from vigia.api import create_app

    app = create_app()
    # Run with: uvicorn vigia.api.app:app --host 0.0.0.0 --port 3000
"""

from .app import create_app
from .config import APIConfig, AuthMode, get_api_config

__all__ = ["create_app", "APIConfig", "AuthMode", "get_api_config"]
