from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError, StoreError
from ..logging.utils import get_app_logger
from .connection import DatabaseConnection

logger = get_app_logger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``; commit on success, roll back on failure.

    Driver errors never leak past this point: a duplicate-key violation becomes
    ``ConflictError`` and everything else from mysql-connector becomes ``StoreError``.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error(f"db_connect_error | errno={getattr(e, 'errno', None)} error={e}")
        raise StoreError("Database is unavailable, please try again") from e

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
            raise ConflictError("Record already exists") from e
        logger.error(f"db_integrity_error | errno={e.errno} error={e}")
        raise StoreError("Database rejected the change") from e
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error(f"db_error | errno={getattr(e, 'errno', None)} error={e}")
        raise StoreError("Database error, please try again") from e
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
