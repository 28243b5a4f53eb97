from __future__ import annotations

import logging
from contextlib import closing, contextmanager
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) for one unit of work.

    The transaction is committed when the block exits normally. Any error
    rolls it back and propagates; the connection is always closed.
    """
    conn = conn_factory.connect()
    with closing(conn), closing(conn.cursor(dictionary=dictionary)) as cur:
        try:
            yield conn, cur
            conn.commit()
        except Exception:
            logger.warning("rolling back schedule transaction", exc_info=True)
            conn.rollback()
            raise


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])
