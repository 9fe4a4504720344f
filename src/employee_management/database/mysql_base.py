from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError, RemoteServiceError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` inside one transaction.

    Commits when the block exits cleanly and rolls back otherwise. Duplicate
    key violations surface as ``ConflictError``; other driver failures as
    ``RemoteServiceError``. Domain errors raised inside the block pass
    through untouched.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("database connection failed: %s", e)
        raise RemoteServiceError("The record store is unavailable, please try again.") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise ConflictError(f"Duplicate value violates a unique constraint: {e.msg}") from e
        raise RemoteServiceError(str(e.msg)) from e
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("database operation failed: %s", e)
        raise RemoteServiceError("The record store failed, please try again.") from e
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


def execute_unique(cur, sql: str, params=None) -> None:
    """Run one statement inside an open transaction, raising ConflictError on a duplicate key.

    InnoDB rolls back only the failed statement, so the caller may try again
    with other values before the transaction commits.
    """
    try:
        cur.execute(sql, params)
    except mysql.connector.IntegrityError as e:
        if e.errno != errorcode.ER_DUP_ENTRY:
            raise
        raise ConflictError(f"Duplicate value violates a unique constraint: {e.msg}") from e
