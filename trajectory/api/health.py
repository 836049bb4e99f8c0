"""Liveness endpoint. Reports the registry backend without exposing config."""

import logging

from fastapi import APIRouter, Request

from trajectory.core.logging import get_request_id

logger = logging.getLogger("trajectory")

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz(request: Request):
    """Lightweight liveness check (no deps)."""
    session = getattr(request.app.state, "session", None)
    store = type(session.registry.store).__name__ if session else None
    logger.info("health.check", extra={"request_id": get_request_id(), "store": store})
    return {"status": "ok", "store": store}
