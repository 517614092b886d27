"""Shared helpers for SQLAlchemy-backed repositories."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import exc as sa_exc

from app.core.errors import (
    InternalError,
    RequestCancelledError,
    RequestTimedOutError,
    ServiceError,
)

# SQLSTATE raised by Postgres for both statement_timeout and pg_cancel_backend.
_QUERY_CANCELED = "57014"


def translate_storage_error(exc: Exception, *, operation: str, logger: logging.Logger, **context: Any) -> ServiceError:
    """Log a storage failure with context and map it onto the error taxonomy.

    Callers raise the returned error; the raw driver message never leaves this
    function except through the log.
    """
    fields = " ".join(f"{key}={value}" for key, value in context.items())
    if isinstance(exc, sa_exc.TimeoutError):
        logger.error("Connection pool timeout during %s %s", operation, fields, exc_info=exc)
        return RequestTimedOutError()

    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == _QUERY_CANCELED:
        if "statement timeout" in str(orig):
            logger.error("Statement timeout during %s %s", operation, fields, exc_info=exc)
            return RequestTimedOutError()
        logger.warning("Query cancelled during %s %s", operation, fields, exc_info=exc)
        return RequestCancelledError()

    logger.error("Storage failure during %s %s", operation, fields, exc_info=exc)
    return InternalError()
