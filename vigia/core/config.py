"""
Vigia - Configuration Module
============================

Storage and filesystem configuration loaded from environment variables.

DESIGN:
    A frozen dataclass built once at startup and handed to whatever needs
    it. The record store and the policy/aggregation engines take no
    configuration; only the process wiring (database path, exports and
    frontend directories) lives here. HTTP settings live in
    vigia.api.config.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


def _parse_int(value: Optional[str], name: str, default: int) -> int:
    """Parse an optional integer environment variable."""
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigValidationError(f"Invalid integer for {name}: {value}")


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Filesystem layout for a Vigia process.

    Attributes:
        data_dir: Directory holding the SQLite database.
        exports_dir: Directory monthly reports are written to.
        frontend_dir: Optional static frontend build served at "/".
    """

    data_dir: Path = Path("data")
    exports_dir: Path = Path("exports")
    frontend_dir: Path = Path("frontend_build")
    db_filename: str = "mod.db"

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_filename


def load_config() -> Config:
    """Load configuration from environment."""
    return Config(
        data_dir=Path(os.getenv("VIGIA_DATA_DIR", "data")),
        exports_dir=Path(os.getenv("VIGIA_EXPORTS_DIR", "exports")),
        frontend_dir=Path(os.getenv("VIGIA_FRONTEND_DIR", "frontend_build")),
    )


_config: Optional[Config] = None


def get_config() -> Config:
    """Get the configuration singleton."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


__all__ = [
    "Config",
    "ConfigValidationError",
    "get_config",
    "load_config",
]
