from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..core.constants import VACATION_ID_PREFIX, VACATION_LEVEL, VACATION_NAME
from ..core.enums import ItemKind, ItemStatus
from .model import ScheduleItem, Vacation


def effective_range(item: ScheduleItem) -> Optional[tuple[date, date]]:
    """Resolve the date range an item occupies on the calendar.

    Explicit start/end win; each missing side falls back to the legacy
    ``deadline``. Returns None when the item has no usable date at all.
    """

    start = item.start_date or item.deadline
    end = item.end_date or item.deadline
    if start is None and end is None:
        return None

    # Half-specified records collapse onto the known side.
    start = start or end
    end = end or start
    if end < start:
        start, end = end, start
    return start, end


def normalize(items: Iterable[ScheduleItem]) -> list[tuple[ScheduleItem, date, date]]:
    out: list[tuple[ScheduleItem, date, date]] = []
    for item in items:
        rng = effective_range(item)
        if rng is None:
            continue
        out.append((item, rng[0], rng[1]))
    return out


def vacation_to_item(vacation: Vacation, *, user_name: str) -> ScheduleItem:
    """Fold a vacation day into the schedule as a read-only pseudo item."""

    return ScheduleItem(
        item_id=f"{VACATION_ID_PREFIX}{vacation.vacation_id}",
        name=VACATION_NAME,
        status=ItemStatus.DONE,
        user_id=vacation.user_id,
        user_name=user_name,
        start_date=vacation.date,
        end_date=vacation.date,
        deadline=vacation.date,
        level=VACATION_LEVEL,
        kind=ItemKind.VACATION,
    )
