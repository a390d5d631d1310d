from __future__ import annotations

from contextlib import contextmanager, suppress
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateRecordError, StoreError
from .connection import DatabaseConnection


def _rollback_quietly(conn) -> None:
    # A timed-out query usually leaves the connection dead; the original error must win.
    with suppress(mysql.connector.Error):
        conn.rollback()


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, timeout: Optional[float] = None):
    """Connection + cursor for one unit of work.

    Commits on success, rolls back on any error. Driver errors (including
    timeouts) are re-raised as StoreError so callers never see mysql types.
    """

    try:
        conn = conn_factory.connect(timeout=timeout)
    except mysql.connector.Error as exc:
        raise StoreError(f"Could not connect to attendance store: {exc.msg}") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            # Applies to SELECT statements only (MySQL 5.7.8+).
            cur.execute(
                "SET SESSION MAX_EXECUTION_TIME=%s",
                (int(conn_factory.resolve_timeout(timeout) * 1000),),
            )
            yield conn, cur
            conn.commit()
        finally:
            with suppress(mysql.connector.Error):
                cur.close()
    except mysql.connector.IntegrityError as exc:
        _rollback_quietly(conn)
        if exc.errno == errorcode.ER_DUP_ENTRY:
            raise DuplicateRecordError() from exc
        raise StoreError(f"Attendance store rejected the write: {exc.msg}") from exc
    except mysql.connector.Error as exc:
        _rollback_quietly(conn)
        raise StoreError(f"Attendance store error: {exc.msg}") from exc
    except Exception:
        _rollback_quietly(conn)
        raise
    finally:
        with suppress(mysql.connector.Error):
            conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values) -> str:
    """Placeholder list for `col IN (...)`; callers must pass non-empty values."""
    return ", ".join(["%s"] * len(values))
