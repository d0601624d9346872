"""
Vigia - API Configuration
=========================

Configuration for the FastAPI boundary: server, CORS, rate limiting
and the authentication policy for mutating endpoints.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import os

from vigia.core.config import ConfigValidationError, _parse_int


class AuthMode(str, Enum):
    """
    Authentication policy for mutating endpoints.

    DISABLED: every request is accepted. This is the default, matching a
        deployment behind a trusted network boundary.
    API_KEY: mutating requests must carry X-API-Key equal to api_key.
    """

    DISABLED = "disabled"
    API_KEY = "api_key"


API_KEY_HEADER = "X-API-Key"


@dataclass(frozen=True)
class APIConfig:
    """API configuration settings."""

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    # CORS
    cors_origins: Tuple[str, ...] = ("*",)
    cors_allow_methods: Tuple[str, ...] = ("*",)
    cors_allow_headers: Tuple[str, ...] = ("*",)

    # Rate Limiting
    rate_limit_requests: int = 200
    rate_limit_window: int = 60  # seconds

    # Auth
    auth_mode: AuthMode = AuthMode.DISABLED
    api_key: str = ""

    def __post_init__(self) -> None:
        if self.auth_mode is AuthMode.API_KEY and not self.api_key:
            raise ConfigValidationError("auth mode 'api_key' requires SITE_API_KEY")
        if self.rate_limit_requests < 1 or self.rate_limit_window < 1:
            raise ConfigValidationError("rate limit values must be positive")


def _parse_origins(value: Optional[str]) -> Tuple[str, ...]:
    """Comma separated list; empty or missing means any origin."""
    if not value:
        return ("*",)
    origins = tuple(o.strip() for o in value.split(",") if o.strip())
    return origins or ("*",)


def _parse_auth_mode(value: Optional[str]) -> AuthMode:
    if not value:
        return AuthMode.DISABLED
    try:
        return AuthMode(value.strip().lower())
    except ValueError:
        raise ConfigValidationError(
            f"Invalid VIGIA_AUTH_MODE: {value} (expected 'disabled' or 'api_key')"
        )


def load_api_config() -> APIConfig:
    """Load API configuration from environment."""
    return APIConfig(
        host=os.getenv("VIGIA_API_HOST", "0.0.0.0"),
        port=_parse_int(os.getenv("PORT"), "PORT", 3000),
        debug=os.getenv("VIGIA_API_DEBUG", "false").lower() == "true",
        cors_origins=_parse_origins(os.getenv("ALLOWED_ORIGINS")),
        rate_limit_requests=_parse_int(os.getenv("VIGIA_RATE_LIMIT_REQUESTS"), "VIGIA_RATE_LIMIT_REQUESTS", 200),
        rate_limit_window=_parse_int(os.getenv("VIGIA_RATE_LIMIT_WINDOW"), "VIGIA_RATE_LIMIT_WINDOW", 60),
        auth_mode=_parse_auth_mode(os.getenv("VIGIA_AUTH_MODE")),
        api_key=os.getenv("SITE_API_KEY", ""),
    )


# Singleton instance
_config: Optional[APIConfig] = None


def get_api_config() -> APIConfig:
    """Get the API configuration singleton."""
    global _config
    if _config is None:
        _config = load_api_config()
    return _config


__all__ = ["API_KEY_HEADER", "APIConfig", "AuthMode", "get_api_config", "load_api_config"]
