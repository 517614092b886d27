from __future__ import annotations

import logging

from sqlalchemy import exc as sa_exc

from app.core.errors import InternalError, RequestCancelledError, RequestTimedOutError
from app.repositories.base import translate_storage_error

logger = logging.getLogger("tests.storage")


class FakePgError(Exception):
    def __init__(self, message: str, pgcode: str) -> None:
        super().__init__(message)
        self.pgcode = pgcode


def _wrap(orig: Exception) -> sa_exc.OperationalError:
    return sa_exc.OperationalError("SELECT 1", {}, orig)


def test_pool_timeout_maps_to_timed_out():
    err = translate_storage_error(sa_exc.TimeoutError("QueuePool limit reached"), operation="list", logger=logger)
    assert isinstance(err, RequestTimedOutError)
    assert err.code == 504


def test_statement_timeout_maps_to_timed_out():
    orig = FakePgError("canceling statement due to statement timeout", "57014")
    err = translate_storage_error(_wrap(orig), operation="list", logger=logger)
    assert isinstance(err, RequestTimedOutError)


def test_user_cancel_maps_to_cancelled():
    orig = FakePgError("canceling statement due to user request", "57014")
    err = translate_storage_error(_wrap(orig), operation="list", logger=logger)
    assert isinstance(err, RequestCancelledError)
    assert err.code == 503


def test_other_failures_are_internal_and_hide_driver_text(caplog):
    orig = FakePgError('relation "schedules" does not exist', "42P01")
    caplog.set_level(logging.ERROR, logger="tests.storage")

    err = translate_storage_error(_wrap(orig), operation="get_schedule", logger=logger, schedule_id="abc")

    assert isinstance(err, InternalError)
    assert "does not exist" not in str(err)
    assert "get_schedule" in caplog.text
    assert "schedule_id=abc" in caplog.text
