import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

# Load env from the working directory's .env
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv()

from trajectory.api import habits, health, momentum
from trajectory.core.config import Settings, settings, validate_config
from trajectory.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    unhandled_exception_handler,
)
from trajectory.core.logging import configure_logging
from trajectory.core.middleware.request_id import RequestIdMiddleware
from trajectory.core.validation import validate_env
from trajectory.features.enrichment.client import EnrichmentAdapter
from trajectory.features.habits.registry import HabitRegistry
from trajectory.features.habits.store import get_registry_store
from trajectory.features.momentum.history import DEFAULT_HISTORY
from trajectory.features.momentum.service import MomentumSession

configure_logging(settings.ENV)
validate_env()
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


def build_session(cfg: Optional[Settings] = None) -> MomentumSession:
    """Select the store, restore the registry, and wire the enrichment adapter."""
    cfg = cfg or settings
    store = get_registry_store(cfg.REDIS_URL)
    registry = HabitRegistry.load(store, key=cfg.REGISTRY_STORE_KEY)
    adapter = EnrichmentAdapter(
        api_key=cfg.GROQ_API_KEY,
        model=cfg.GROQ_MODEL,
        timeout=cfg.ENRICHMENT_TIMEOUT_SECONDS,
        temperature=cfg.ENRICHMENT_TEMPERATURE,
    )
    return MomentumSession(registry, adapter, history=DEFAULT_HISTORY)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("trajectory")
    logger.info("Starting Trajectory service...")
    try:
        yield
    finally:
        # Do not leave an enrichment task running past shutdown
        app.state.session.cancel_analysis()
        logging.getLogger("trajectory").info("Stopping Trajectory service...")


def create_app(session: Optional[MomentumSession] = None) -> FastAPI:
    app = FastAPI(title="Trajectory - Momentum Service", lifespan=lifespan)
    app.state.session = session or build_session()

    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # CORS for the local UI
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(habits.router, tags=["habits"])
    app.include_router(momentum.router, tags=["momentum"])
    app.include_router(health.router, tags=["health"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("trajectory.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
