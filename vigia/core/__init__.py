"""
Vigia - Core Package
====================

Configuration, logging and the SQLite record store.

DESIGN:
    Core modules are singletons or global instances so state is
    consistent across the process:
    - get_config() returns the same Config instance
    - get_db() returns the same DatabaseManager instance
    - logger is a global TreeLogger instance

    The database package is imported from vigia.core.database directly
    to keep this package importable by the utils it depends on.
"""

from .config import Config, ConfigValidationError, get_config
from .logger import logger, TreeLogger


__all__ = [
    "Config",
    "ConfigValidationError",
    "get_config",
    "logger",
    "TreeLogger",
]
