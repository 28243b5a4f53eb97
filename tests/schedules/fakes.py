from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from src.workboard.workboard.core.enums import ItemStatus
from src.workboard.workboard.schedules.model import HistoryEntry, ScheduleItem, Vacation


def make_item(item_id: str, start: Optional[date], end: Optional[date], **kwargs) -> ScheduleItem:
    defaults = dict(
        name=f"Task {item_id}",
        status=ItemStatus.IN_PROGRESS,
        user_id="u1",
        user_name="Alice",
        level="L2",
    )
    defaults.update(kwargs)
    return ScheduleItem(item_id=item_id, start_date=start, end_date=end, **defaults)


class InMemorySchedules:
    def __init__(self, items=()):
        self.items: dict[str, ScheduleItem] = {i.item_id: i for i in items}
        self.update_calls: list[dict] = []
        self.fail_updates = False
        self.fail_reads = False
        self.list_calls = 0

    def list_for_user(self, *, user_id: str):
        self.list_calls += 1
        if self.fail_reads:
            raise ConnectionError("store unreachable")
        return [i for i in self.items.values() if i.user_id == user_id]

    def get_by_id(self, *, item_id: str):
        return self.items.get(item_id)

    def update_dates(self, *, item_id: str, start_date: date, end_date: date, history, updated_at: datetime) -> bool:
        self.update_calls.append(
            {
                "item_id": item_id,
                "start_date": start_date,
                "end_date": end_date,
                "history": list(history),
                "updated_at": updated_at,
            }
        )
        if self.fail_updates:
            raise PermissionError("write denied")

        current = self.items.get(item_id)
        if current is None:
            return False
        self.items[item_id] = replace(
            current,
            start_date=start_date,
            end_date=end_date,
            deadline=end_date,
            history=tuple(history),
            updated_at=updated_at,
        )
        return True


class InMemoryVacations:
    def __init__(self, vacations: list[Vacation] | None = None):
        self.vacations = list(vacations or [])

    def list_for_user(self, *, user_id: str):
        return [v for v in self.vacations if v.user_id == user_id]


def entry(field: str = "dates", by: str = "Bob") -> HistoryEntry:
    return HistoryEntry(
        field=field,
        old_value="a",
        new_value="b",
        changed_by=by,
        changed_at=datetime(2026, 1, 1, 9, 0),
    )
