from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import days_between, format_display_date, now_local, week_of_month
from ..common.validators import require_non_empty
from ..core.enums import ItemKind, ItemStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    ScheduleFetchError,
    ScheduleUpdateError,
    StaleRecordError,
    ValidationError,
)
from .cache import ScheduleCache
from .history import AuditLog, diff_date_range
from .layout import build_week_layout
from .model import HistoryEntry, PlacedBar, ScheduleItem, WeekLayout, WeekWindow
from .normalizer import effective_range, vacation_to_item
from .repository import ScheduleRepository, VacationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MovePlan:
    item_id: str
    old_start: date
    old_end: date
    new_start: date
    new_end: date
    new_entries: tuple[HistoryEntry, ...]
    history: AuditLog

    @property
    def changed(self) -> bool:
        return (self.old_start, self.old_end) != (self.new_start, self.new_end)


@dataclass(frozen=True)
class WeekView:
    user_id: str
    window: WeekWindow
    layout: WeekLayout
    label: str
    range_label: str
    today: date
    previous_start: date
    next_start: date


def plan_move(record: ScheduleItem, target_day: date, *, changed_by: str, changed_at: datetime) -> MovePlan:
    """Shift ``record`` so it starts on ``target_day``, keeping its length."""

    rng = effective_range(record)
    if rng is None:
        raise ValidationError("Item has no dates and cannot be moved")

    old_start, old_end = rng
    new_start = target_day
    new_end = target_day + timedelta(days=days_between(old_start, old_end))

    entries = tuple(
        diff_date_range(
            old_start=old_start,
            old_end=old_end,
            new_start=new_start,
            new_end=new_end,
            changed_by=changed_by,
            changed_at=changed_at,
        )
    )
    return MovePlan(
        item_id=record.item_id,
        old_start=old_start,
        old_end=old_end,
        new_start=new_start,
        new_end=new_end,
        new_entries=entries,
        history=AuditLog.of(record.history).append(entries),
    )


def apply_plan(record: ScheduleItem, plan: MovePlan, *, updated_at: Optional[datetime] = None) -> ScheduleItem:
    return replace(
        record,
        start_date=plan.new_start,
        end_date=plan.new_end,
        deadline=plan.new_end,
        history=plan.history.entries,
        updated_at=updated_at or record.updated_at,
    )


class WeeklyScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        vacations: VacationRepository,
        *,
        cache: ScheduleCache | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._schedules = schedules
        self._vacations = vacations
        self._cache = cache or ScheduleCache()
        self._clock = clock

    @property
    def cache(self) -> ScheduleCache:
        return self._cache

    @staticmethod
    def ensure_can_view(*, current_role: Role, current_user_id: str, user_id: str) -> None:
        if current_role != Role.ADMIN and str(current_user_id) != str(user_id):
            raise AuthorizationError("You can only view your own schedule")

    def load_week(self, *, user_id: str, user_name: str, day: date, refresh: bool = False) -> WeekView:
        window = WeekWindow.containing(day)
        if not refresh and not self._cache.is_stale_for(user_id=user_id, window=window):
            return self._view(user_id=user_id, window=window, day=day)

        try:
            items = list(self._schedules.list_for_user(user_id=user_id))
            vacations = list(self._vacations.list_for_user(user_id=user_id))
        except DomainError:
            raise
        except Exception as e:
            logger.exception("failed to fetch schedules for user=%s week=%s", user_id, window.start)
            raise ScheduleFetchError("Could not load schedules") from e

        items.extend(vacation_to_item(v, user_name=user_name) for v in vacations)
        visible = [item for item in items if self._overlaps(item, window)]

        self._cache.load(user_id=user_id, window=window, items=visible)
        logger.debug("loaded %d/%d items for user=%s week=%s", len(visible), len(items), user_id, window.start)
        return self._view(user_id=user_id, window=window, day=day)

    def current_layout(self) -> WeekLayout:
        window = self._cache.window
        if window is None:
            raise ValidationError("No week loaded")
        return build_week_layout(self._cache.items(), window)

    def reschedule(
        self,
        *,
        item_id: str,
        target_day: date,
        actor_name: str,
        actor_user_id: str,
        actor_role: Role = Role.USER,
    ) -> ScheduleItem:
        actor_name = require_non_empty(actor_name, "Actor name")

        try:
            current = self._schedules.get_by_id(item_id=item_id)
        except Exception as e:
            logger.exception("read-for-update failed for item=%s", item_id)
            raise ScheduleUpdateError("Could not read the schedule") from e
        if current is None:
            raise StaleRecordError("Schedule no longer exists")

        if actor_role != Role.ADMIN and str(current.user_id) != str(actor_user_id):
            raise AuthorizationError("You can only move your own schedules")

        now = self._clock()
        plan = plan_move(current, target_day, changed_by=actor_name, changed_at=now)
        if not plan.changed:
            logger.debug("move of item=%s to %s is a no-op", item_id, target_day)
            return current

        try:
            ok = self._schedules.update_dates(
                item_id=item_id,
                start_date=plan.new_start,
                end_date=plan.new_end,
                history=plan.history.entries,
                updated_at=now,
            )
        except Exception as e:
            logger.exception("update failed for item=%s", item_id)
            raise ScheduleUpdateError("Moving the schedule failed") from e
        if not ok:
            raise ScheduleUpdateError("Moving the schedule failed")

        updated = apply_plan(current, plan, updated_at=now)
        self._cache.replace(updated)
        logger.info(
            "item=%s moved %s~%s -> %s~%s by %s",
            item_id,
            plan.old_start,
            plan.old_end,
            plan.new_start,
            plan.new_end,
            actor_name,
        )
        return updated

    def history_for(self, *, item_id: str, current_role: Role, current_user_id: str) -> list[HistoryEntry]:
        record = self._schedules.get_by_id(item_id=item_id)
        if record is None:
            raise StaleRecordError("Schedule no longer exists")
        if current_role != Role.ADMIN and str(record.user_id) != str(current_user_id):
            raise AuthorizationError("You can only view the history of your own schedules")
        return AuditLog.of(record.history).newest_first()

    @staticmethod
    def _overlaps(item: ScheduleItem, window: WeekWindow) -> bool:
        rng = effective_range(item)
        if rng is None:
            return False
        return rng[0] <= window.end and rng[1] >= window.start

    def _view(self, *, user_id: str, window: WeekWindow, day: date) -> WeekView:
        today = self._clock().date()
        return WeekView(
            user_id=user_id,
            window=window,
            layout=build_week_layout(self._cache.items(), window),
            label=f"{day.year}-{day.month:02d} week {week_of_month(day)}",
            range_label=f"{format_display_date(window.start)} ~ {format_display_date(window.end)}",
            today=today,
            previous_start=window.shift(-1).start,
            next_start=window.shift(1).start,
        )


_STATUS_CSS = {
    ItemStatus.WAITING: "bar-waiting",
    ItemStatus.IN_PROGRESS: "bar-in-progress",
    ItemStatus.DONE: "bar-done",
    ItemStatus.POSTPONED: "bar-postponed",
}


def bar_to_ui(bar: PlacedBar) -> dict:
    iv = bar.interval
    item = iv.item
    return {
        "item_id": item.item_id,
        "name": item.name,
        "user_name": item.user_name,
        "level": item.level,
        "status": item.status.value,
        "css_class": "bar-vacation" if item.kind == ItemKind.VACATION else _STATUS_CSS.get(item.status, "bar-waiting"),
        "draggable": item.draggable,
        "title": f"{item.name} ({iv.start.strftime('%m/%d')} ~ {iv.clamped_end.strftime('%m/%d')})",
        "start": iv.start.isoformat(),
        "end": iv.end.isoformat(),
        "day_offset": iv.day_offset,
        "day_span": iv.day_span,
        "row_index": iv.row_index,
        "style": bar.geometry.css(),
    }


def week_view_to_ui(view: WeekView) -> dict:
    return {
        "user_id": view.user_id,
        "week_start": view.window.start.isoformat(),
        "week_end": view.window.end.isoformat(),
        "label": view.label,
        "range_label": view.range_label,
        "previous_start": view.previous_start.isoformat(),
        "next_start": view.next_start.isoformat(),
        "days": [
            {"date": d.isoformat(), "weekday": d.strftime("%a"), "day": d.day, "is_today": d == view.today}
            for d in view.window.days()
        ],
        "total_rows": view.layout.total_rows,
        "min_height_px": view.layout.min_height_px,
        "bars": [bar_to_ui(b) for b in view.layout.bars],
    }


def history_to_ui(entries: list[HistoryEntry]) -> list[dict]:
    return [
        {
            "field": h.field,
            "old_value": h.old_value,
            "new_value": h.new_value,
            "changed_by": h.changed_by,
            "changed_at": h.changed_at.strftime("%Y-%m-%d %H:%M") if h.changed_at else "",
        }
        for h in entries
    ]
