import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional

class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False

    # Enrichment (Groq)
    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL: str = "llama-3.1-8b-instant"
    ENRICHMENT_TIMEOUT_SECONDS: float = 60.0
    ENRICHMENT_TEMPERATURE: float = 0.4

    # Registry persistence
    REDIS_URL: Optional[str] = None  # unset = in-memory store
    REGISTRY_STORE_KEY: str = "trajectory_matrix"

    # App URLs
    FRONTEND_ORIGIN: str = "http://localhost:3000"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate required configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    Secrets are not logged, only missing keys.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("trajectory")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    required_keys = [
        "GROQ_API_KEY",
    ]

    missing = [key for key in required_keys if not getattr(cfg, key, None)]
    if missing:
        message = f"Missing required configuration: {', '.join(missing)}"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    return True
