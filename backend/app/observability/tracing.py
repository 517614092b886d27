"""Lightweight tracing wrapper around Opik traces."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from app.observability.client import get_opik_client

logger = logging.getLogger(__name__)


@contextmanager
def trace(
    name: str,
    *,
    metadata: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> Iterator[None]:
    """Record a span named ``name``; a no-op when Opik is not configured."""
    client = get_opik_client()
    payload = {key: value for key, value in (metadata or {}).items() if value is not None}
    start = perf_counter()
    opik_trace = None
    if client is not None:
        try:
            opik_trace = client.trace(name=name, input=payload, metadata={"request_id": request_id or ""})
        except Exception:  # pragma: no cover - tracing must never break a request
            logger.warning("Could not open trace %s", name, exc_info=True)

    error: Optional[BaseException] = None
    try:
        yield
    except BaseException as exc:
        error = exc
        raise
    finally:
        duration_ms = (perf_counter() - start) * 1000
        logger.debug("trace %s finished in %.2fms (error=%s)", name, duration_ms, type(error).__name__ if error else None)
        if opik_trace is not None:
            output = {"duration_ms": round(duration_ms, 2), "error": type(error).__name__ if error else None}
            try:
                opik_trace.end(output=output)
            except Exception:  # pragma: no cover
                logger.warning("Could not close trace %s", name, exc_info=True)
