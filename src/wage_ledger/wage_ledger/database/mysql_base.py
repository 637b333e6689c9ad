from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import Error as MySQLError
from mysql.connector import errorcode

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

DEADLOCK_ATTEMPTS = 3


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, serializable: bool = False):
    """Yield ``(conn, cursor)`` inside one transaction.

    Commits when the block exits normally and rolls back on any exception, so a
    repository method either applies all of its statements or none.
    """
    conn = conn_factory.connect()
    try:
        if serializable:
            conn.start_transaction(isolation_level="SERIALIZABLE")
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def retry_on_deadlock(func):
    """Re-run a whole transactional method when MySQL picks it as a deadlock victim.

    The transaction was already rolled back by ``db_cursor``, so running the
    method again starts from a clean state.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        for attempt in range(1, DEADLOCK_ATTEMPTS + 1):
            try:
                return func(*args, **kwargs)
            except MySQLError as e:
                if e.errno != errorcode.ER_LOCK_DEADLOCK or attempt == DEADLOCK_ATTEMPTS:
                    raise
                logger.warning("Deadlock in %s, retrying (attempt %d)", func.__name__, attempt)

    return wrapper
