"""Engine and session factory."""
from __future__ import annotations

import logging
from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> Dict[str, Any]:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}

    options: Dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
    }
    if url.get_backend_name() == "postgresql" and settings.db_statement_timeout_ms > 0:
        options["connect_args"] = {"options": f"-c statement_timeout={settings.db_statement_timeout_ms}"}
    return options


engine = create_engine(settings.database_url, future=True, **_engine_options(settings.database_url))
logger.info(
    "Database engine configured (backend=%s, pool_size=%s, max_overflow=%s)",
    engine.url.get_backend_name(),
    settings.db_pool_size,
    settings.db_max_overflow,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
