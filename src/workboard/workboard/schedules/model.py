from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import start_of_week
from ..core.constants import DAYS_PER_WEEK
from ..core.enums import ItemKind, ItemStatus


@dataclass(frozen=True)
class HistoryEntry:
    field: str
    old_value: str
    new_value: str
    changed_by: str
    changed_at: datetime

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "changed_by": self.changed_by,
            "changed_at": self.changed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        changed_at = data.get("changed_at")
        if isinstance(changed_at, str) and changed_at:
            changed_at = datetime.fromisoformat(changed_at)
        elif not isinstance(changed_at, datetime):
            # Entries written before timestamps were recorded.
            changed_at = datetime.fromtimestamp(0)
        return cls(
            field=str(data.get("field", "")),
            old_value=str(data.get("old_value", "")),
            new_value=str(data.get("new_value", "")),
            changed_by=str(data.get("changed_by", "")),
            changed_at=changed_at,
        )


@dataclass(frozen=True)
class ScheduleItem:
    item_id: str
    name: str
    status: ItemStatus
    user_id: str
    user_name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    # Legacy single-date field kept for older records.
    deadline: Optional[date] = None
    level: str = ""
    kind: ItemKind = ItemKind.TASK
    history: tuple[HistoryEntry, ...] = ()
    updated_at: Optional[datetime] = None

    @property
    def draggable(self) -> bool:
        return self.kind == ItemKind.TASK


@dataclass(frozen=True)
class Vacation:
    vacation_id: str
    user_id: str
    date: date
    days: float = 1
    reason: str = ""


@dataclass(frozen=True)
class WeekWindow:
    """Inclusive Monday..Sunday range shown on the weekly grid."""

    start: date
    end: date

    @classmethod
    def containing(cls, day: date) -> "WeekWindow":
        monday = start_of_week(day)
        return cls(start=monday, end=monday + timedelta(days=DAYS_PER_WEEK - 1))

    def shift(self, weeks: int) -> "WeekWindow":
        return WeekWindow.containing(self.start + timedelta(weeks=weeks))

    def days(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class BarGeometry:
    left_pct: float
    width_pct: float
    inset_px: int
    top_px: int
    height_px: int

    def css(self) -> dict:
        return {
            "left": f"calc({self.left_pct:.4f}% + {self.inset_px}px)",
            "width": f"calc({self.width_pct:.4f}% - {2 * self.inset_px}px)",
            "top": f"{self.top_px}px",
            "height": f"{self.height_px}px",
        }


@dataclass(frozen=True)
class Interval:
    """Week-clamped, layout-only view of one ScheduleItem."""

    item: ScheduleItem
    start: date
    end: date
    clamped_start: date
    clamped_end: date
    day_offset: int
    day_span: int
    row_index: int = -1


@dataclass(frozen=True)
class PlacedBar:
    interval: Interval
    geometry: BarGeometry


@dataclass(frozen=True)
class WeekLayout:
    window: WeekWindow
    bars: list[PlacedBar] = field(default_factory=list)
    total_rows: int = 0
    min_height_px: int = 0
