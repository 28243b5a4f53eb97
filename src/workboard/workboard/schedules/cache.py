from __future__ import annotations

from typing import Iterable, Optional

from .model import ScheduleItem, WeekWindow


class ScheduleCache:
    """In-memory copy of one user's items for the week on screen.

    Single owner, no locking: writes are last-write-wins overwrites of the
    local copy; the store stays authoritative and ``invalidate`` forces the
    next read to go back to it.
    """

    def __init__(self) -> None:
        self._user_id: Optional[str] = None
        self._window: Optional[WeekWindow] = None
        self._items: dict[str, ScheduleItem] = {}

    def load(self, *, user_id: str, window: WeekWindow, items: Iterable[ScheduleItem]) -> None:
        self._user_id = user_id
        self._window = window
        self._items = {item.item_id: item for item in items}

    def invalidate(self) -> None:
        self._user_id = None
        self._window = None
        self._items = {}

    def is_stale_for(self, *, user_id: str, window: WeekWindow) -> bool:
        return self._user_id != user_id or self._window != window

    @property
    def window(self) -> Optional[WeekWindow]:
        return self._window

    def get(self, item_id: str) -> Optional[ScheduleItem]:
        return self._items.get(item_id)

    def replace(self, item: ScheduleItem) -> bool:
        if item.item_id not in self._items:
            return False
        self._items[item.item_id] = item
        return True

    def items(self) -> list[ScheduleItem]:
        return list(self._items.values())
