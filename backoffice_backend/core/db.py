# core/db.py

"""
DATABASE SUPERVISION

Two concerns live here:

1) Connection lifecycle (connect -> ready -> (error -> reconnect loop) -> close)
   wait_for_database() probes the connection with exponential backoff and a
   bounded number of attempts. Used by `manage.py wait_for_db` and /api/health/.
   Django owns the connection object; nothing here keeps global state.

2) Bounded transaction retries
   run_atomic() executes a callable inside transaction.atomic() and retries it
   when a retryable error escapes (stock contention, transient DB errors).
   Each attempt is a fresh atomic block, so a failed attempt leaves no writes.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, TypeVar

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, OperationalError, connections, transaction

from core.exceptions import ConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseUnavailableError(Exception):
    """Raised when the database cannot be reached within the attempt budget."""


def _backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    # attempt is 1-based: base, 2*base, 4*base, ...
    return min(max_delay, base_delay * (2 ** (attempt - 1)))


def probe_database(alias: str = DEFAULT_DB_ALIAS) -> None:
    """Run a trivial query; raises OperationalError if the DB is down."""
    conn = connections[alias]
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def wait_for_database(
    *,
    alias: str = DEFAULT_DB_ALIAS,
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float = 30.0,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Block until the database answers, retrying with exponential backoff.

    Returns the number of attempts used. Raises DatabaseUnavailableError once
    max_attempts is exhausted.
    """
    attempts = int(max_attempts or getattr(settings, "DB_CONNECT_MAX_ATTEMPTS", 5))
    delay = float(
        base_delay if base_delay is not None else getattr(settings, "DB_CONNECT_BACKOFF_SECONDS", 0.5)
    )

    conn = connections[alias]
    last_error: Exception | None = None

    for attempt in range(1, attempts + 1):
        try:
            probe_database(alias)
            if attempt > 1:
                logger.info("Database connection restored", extra={"attempt": attempt})
            return attempt
        except OperationalError as exc:
            last_error = exc
            logger.warning(
                "Database not reachable",
                extra={"attempt": attempt, "max_attempts": attempts, "error": str(exc)},
            )
            # Drop the broken handle so the next probe reconnects from scratch.
            conn.close()
            if attempt < attempts:
                sleep(_backoff_delay(attempt, delay, max_delay))

    raise DatabaseUnavailableError(
        f"Database '{alias}' unreachable after {attempts} attempts: {last_error}"
    )


def run_atomic(
    fn: Callable[[], T],
    *,
    retry_on: Iterable[type[BaseException]] = (OperationalError,),
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    operation: str = "transaction",
) -> T:
    """
    Run fn() in its own atomic block, retrying on the given error types.

    Exhausting the attempt budget raises ConflictError (HTTP 409) chained to
    the last retryable error. Non-retryable errors propagate untouched after
    the atomic block has rolled back.
    """
    retryable = tuple(retry_on)
    attempts = int(max_attempts or getattr(settings, "ORDER_TX_MAX_ATTEMPTS", 3))
    delay = float(
        base_delay if base_delay is not None else getattr(settings, "ORDER_TX_BACKOFF_SECONDS", 0.05)
    )

    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                return fn()
        except retryable as exc:
            if attempt >= attempts:
                logger.warning(
                    "Transaction retries exhausted",
                    extra={"operation": operation, "attempts": attempts, "error": str(exc)},
                )
                raise ConflictError(
                    "The request conflicted with a concurrent update. Please retry."
                ) from exc

            logger.warning(
                "Retrying transaction after conflict",
                extra={"operation": operation, "attempt": attempt, "error": str(exc)},
            )
            sleep(_backoff_delay(attempt, delay, max_delay))

    # attempts < 1 is a configuration error
    raise ValueError("max_attempts must be at least 1")
