"""Opik client bootstrap."""
from __future__ import annotations

import logging
from typing import Optional

import opik

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[opik.Opik] = None


def init_opik() -> Optional[opik.Opik]:
    """Configure Opik once when tracing is enabled; return the shared client."""
    global _client
    if not settings.opik_enabled:
        logger.info("Opik tracing disabled (OPIK_ENABLED=false)")
        return None
    if _client is not None:
        return _client
    try:
        opik.configure(api_key=settings.opik_api_key, force=True)
        _client = opik.Opik(project_name=settings.opik_project)
    except Exception:  # pragma: no cover - network/credential failures
        logger.exception("Failed to initialise Opik; tracing disabled")
        _client = None
        return None
    logger.info("Opik tracing enabled (project=%s)", settings.opik_project)
    return _client


def get_opik_client() -> Optional[opik.Opik]:
    return _client


def shutdown_opik() -> None:
    global _client
    if _client is None:
        return
    try:
        _client.flush()
    finally:
        _client = None
