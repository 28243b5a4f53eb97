from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import coerce_date
from ..core.enums import ItemKind, ItemStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import HistoryEntry, ScheduleItem, Vacation
from .repository import ScheduleRepository, VacationRepository

logger = logging.getLogger(__name__)

_SCHEDULE_COLUMNS = """
    s.item_id, s.name, s.status, s.level, s.start_date, s.end_date, s.deadline,
    s.history_json, s.updated_at, s.user_id, u.full_name AS user_name
"""


def _load_history(raw: Any) -> tuple[HistoryEntry, ...]:
    if not raw:
        return ()
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    data = json.loads(raw) if isinstance(raw, str) else raw
    return tuple(HistoryEntry.from_dict(d) for d in data)


def _dump_history(history: Sequence[HistoryEntry]) -> str:
    return json.dumps([h.to_dict() for h in history], ensure_ascii=False)


def _row_to_item(r: dict) -> ScheduleItem:
    return ScheduleItem(
        item_id=str(r["item_id"]),
        name=r["name"],
        status=ItemStatus(r["status"]),
        user_id=str(r["user_id"]),
        user_name=r.get("user_name") or "",
        start_date=coerce_date(r.get("start_date")),
        end_date=coerce_date(r.get("end_date")),
        deadline=coerce_date(r.get("deadline")),
        level=r.get("level") or "",
        kind=ItemKind.TASK,
        history=_load_history(r.get("history_json")),
        updated_at=r.get("updated_at"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, *, user_id: str) -> Sequence[ScheduleItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SCHEDULE_COLUMNS}
                FROM schedules s
                LEFT JOIN users u ON u.user_id = s.user_id
                WHERE s.user_id=%s
                """,
                (str(user_id),),
            )
            return [_row_to_item(r) for r in fetchall(cur)]

    def get_by_id(self, *, item_id: str) -> Optional[ScheduleItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SCHEDULE_COLUMNS}
                FROM schedules s
                LEFT JOIN users u ON u.user_id = s.user_id
                WHERE s.item_id=%s
                """,
                (str(item_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return _row_to_item(r)

    def update_dates(
        self,
        *,
        item_id: str,
        start_date: date,
        end_date: date,
        history: Sequence[HistoryEntry],
        updated_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedules
                SET start_date=%s, end_date=%s, deadline=%s, history_json=%s, updated_at=%s
                WHERE item_id=%s
                """,
                (start_date, end_date, end_date, _dump_history(history), updated_at, str(item_id)),
            )
            updated = cur.rowcount > 0

        logger.debug("update_dates item=%s %s..%s updated=%s", item_id, start_date, end_date, updated)
        return updated


class MySQLVacationRepository(VacationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, *, user_id: str) -> Sequence[Vacation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT vacation_id, user_id, vacation_date, days, reason
                FROM vacations
                WHERE user_id=%s
                ORDER BY vacation_date DESC
                """,
                (str(user_id),),
            )
            return [
                Vacation(
                    vacation_id=str(r["vacation_id"]),
                    user_id=str(r["user_id"]),
                    date=coerce_date(r["vacation_date"]),
                    days=float(r.get("days") or 1),
                    reason=r.get("reason") or "",
                )
                for r in fetchall(cur)
            ]
