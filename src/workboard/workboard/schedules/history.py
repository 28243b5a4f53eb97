from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Iterator, Optional

from ..common.datetime_utils import format_display_date
from ..core.constants import MOVE_HISTORY_FIELD
from .model import HistoryEntry


@dataclass(frozen=True)
class AuditLog:
    """Append-only change log of one item (oldest entry first)."""

    entries: tuple[HistoryEntry, ...] = ()

    @classmethod
    def of(cls, entries: Optional[Iterable[HistoryEntry]]) -> "AuditLog":
        return cls(tuple(entries or ()))

    def append(self, new_entries: Iterable[HistoryEntry]) -> "AuditLog":
        return AuditLog(self.entries + tuple(new_entries))

    def newest_first(self) -> list[HistoryEntry]:
        return list(reversed(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self.entries)


def format_range(start: date, end: date) -> str:
    return f"{format_display_date(start)}~{format_display_date(end)}"


def diff_date_range(
    *,
    old_start: date,
    old_end: date,
    new_start: date,
    new_end: date,
    changed_by: str,
    changed_at: datetime,
) -> list[HistoryEntry]:
    if (old_start, old_end) == (new_start, new_end):
        return []

    return [
        HistoryEntry(
            field=MOVE_HISTORY_FIELD,
            old_value=format_range(old_start, old_end),
            new_value=format_range(new_start, new_end),
            changed_by=changed_by,
            changed_at=changed_at,
        )
    ]
