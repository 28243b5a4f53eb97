from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import HistoryEntry, ScheduleItem, Vacation


class ScheduleRepository(Protocol):
    def list_for_user(self, *, user_id: str) -> Sequence[ScheduleItem]:
        raise NotImplementedError

    def get_by_id(self, *, item_id: str) -> Optional[ScheduleItem]:
        """Read the current stored record (used right before an update)."""

        raise NotImplementedError

    def update_dates(
        self,
        *,
        item_id: str,
        start_date: date,
        end_date: date,
        history: Sequence[HistoryEntry],
        updated_at: datetime,
    ) -> bool:
        """Partial update of one item's date range and history.

        The legacy ``deadline`` follows ``end_date``. Returns False when no
        row was updated.
        """

        raise NotImplementedError


class VacationRepository(Protocol):
    def list_for_user(self, *, user_id: str) -> Sequence[Vacation]:
        raise NotImplementedError
