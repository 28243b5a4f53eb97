from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.workboard.workboard.core.enums import DragState
from src.workboard.workboard.core.exceptions import ScheduleUpdateError, StaleRecordError, ValidationError
from src.workboard.workboard.schedules.drag import DragSession
from src.workboard.workboard.schedules.model import Vacation
from src.workboard.workboard.schedules.service import WeeklyScheduleService

from .fakes import InMemorySchedules, InMemoryVacations, make_item

MON = date(2026, 2, 2)
TUE, WED, THU, FRI, SAT, SUN = (MON + timedelta(days=i) for i in range(1, 7))


def _session(items, vacations=None):
    schedules = InMemorySchedules(items)
    svc = WeeklyScheduleService(schedules, InMemoryVacations(vacations), clock=lambda: datetime(2026, 2, 4, 9, 0))
    svc.load_week(user_id="u1", user_name="Alice", day=MON)
    return DragSession(svc, actor_name="Alice", actor_user_id="u1"), svc, schedules


def test_successful_drag_commits_and_returns_to_idle():
    drag, svc, schedules = _session([make_item("t1", TUE, THU)])

    assert drag.start("t1")
    assert drag.state == DragState.DRAGGING
    assert drag.dragged_id == "t1"

    updated = drag.drop(FRI)

    assert drag.state == DragState.IDLE
    assert drag.dragged_id is None
    assert (updated.start_date, updated.end_date) == (FRI, SUN)
    assert svc.cache.get("t1").start_date == FRI
    assert len(schedules.update_calls) == 1

    layout = svc.current_layout()
    [bar] = layout.bars
    assert (bar.interval.day_offset, bar.interval.day_span) == (4, 3)


def test_drag_from_protected_badge_does_not_start():
    drag, _, _ = _session([make_item("t1", TUE, THU)])

    assert drag.start("t1", from_protected=True) is False
    assert drag.state == DragState.IDLE


def test_vacation_items_are_not_draggable():
    drag, _, _ = _session([], [Vacation(vacation_id="v1", user_id="u1", date=WED)])

    assert drag.start("vacation_v1") is False
    assert drag.state == DragState.IDLE


def test_drop_outside_any_day_cancels_without_store_call():
    drag, svc, schedules = _session([make_item("t1", TUE, THU)])

    drag.start("t1")
    assert drag.drop(None) is None

    assert drag.state == DragState.IDLE
    assert schedules.update_calls == []
    assert svc.cache.get("t1").start_date == TUE


def test_failed_update_reverts_cached_item():
    drag, svc, schedules = _session([make_item("t1", TUE, THU)])
    schedules.fail_updates = True

    drag.start("t1")
    assert drag.drop(FRI) is None

    assert drag.state == DragState.FAILED
    assert isinstance(drag.last_error, ScheduleUpdateError)
    cached = svc.cache.get("t1")
    assert (cached.start_date, cached.end_date) == (TUE, THU)
    assert cached.history == ()
    assert schedules.items["t1"].history == ()

    drag.acknowledge()
    assert drag.state == DragState.IDLE


def test_item_deleted_before_drop_fails_as_stale():
    drag, svc, schedules = _session([make_item("t1", TUE, THU)])

    drag.start("t1")
    del schedules.items["t1"]
    drag.drop(FRI)

    assert drag.state == DragState.FAILED
    assert isinstance(drag.last_error, StaleRecordError)
    assert svc.cache.get("t1") is None
    assert svc.cache.window is None
    assert schedules.update_calls == []

    view = svc.load_week(user_id="u1", user_name="Alice", day=MON)
    assert view.layout.bars == []
    assert schedules.list_calls == 2


def test_only_one_drag_at_a_time():
    drag, _, _ = _session([make_item("t1", TUE, THU), make_item("t2", MON, MON)])

    drag.start("t1")
    with pytest.raises(ValidationError):
        drag.start("t2")


def test_drop_on_same_day_keeps_history_empty():
    drag, svc, schedules = _session([make_item("t1", TUE, THU)])

    drag.start("t1")
    result = drag.drop(TUE)

    assert drag.state == DragState.IDLE
    assert result.history == ()
    assert schedules.update_calls == []
