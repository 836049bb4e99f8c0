"""
Environment validation utilities.

Ensures the service fails fast on misconfiguration while
remaining bypassable for tests via SKIP_ENV_VALIDATION.
"""

import os
from typing import Optional, Iterable
from urllib.parse import urlparse

from trajectory.core.config import settings


class EnvValidationError(RuntimeError):
    """Raised when environment validation fails."""


def _is_valid_redis_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("redis", "rediss", "unix") and bool(parsed.netloc or parsed.path)


def _require(vars_required: Iterable[str], source: object) -> None:
    for var in vars_required:
        if not getattr(source, var, None):
            raise EnvValidationError(f"{var} is required in production")


def validate_env(env: Optional[str] = None, settings_obj=None) -> bool:
    """Validate environment configuration.

    Args:
        env: Override environment name (defaults to settings.ENV)
        settings_obj: Override settings object (defaults to trajectory.core.config.settings)

    Returns:
        True if validation passes.

    Raises:
        EnvValidationError when a rule is violated.
    """
    if os.getenv("SKIP_ENV_VALIDATION") == "1":
        return True

    cfg = settings_obj or settings
    mode = (env or getattr(cfg, "ENV", "development") or "development").lower()
    redis_url = getattr(cfg, "REDIS_URL", None)

    if redis_url and not _is_valid_redis_url(redis_url):
        raise EnvValidationError("REDIS_URL must be a valid URL (e.g. redis://localhost:6379/0)")

    timeout = getattr(cfg, "ENRICHMENT_TIMEOUT_SECONDS", None)
    if timeout is not None and timeout <= 0:
        raise EnvValidationError("ENRICHMENT_TIMEOUT_SECONDS must be positive")

    if mode == "production":
        # Registry must survive restarts in production
        _require(["GROQ_API_KEY", "REDIS_URL"], cfg)

    return True
