from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.enums import DragState, Role
from ..core.exceptions import DomainError, StaleRecordError, ValidationError
from .model import ScheduleItem
from .service import WeeklyScheduleService, apply_plan, plan_move

logger = logging.getLogger(__name__)


class DragSession:
    """One drag gesture at a time over the weekly grid.

    IDLE -> DRAGGING -> COMMITTING -> IDLE on success, or -> FAILED on error
    (cached item restored to its pre-drag copy) and back to IDLE through
    ``acknowledge``. Dropping outside a day cell cancels with no store call.
    """

    def __init__(
        self,
        service: WeeklyScheduleService,
        *,
        actor_name: str,
        actor_user_id: str,
        actor_role: Role = Role.USER,
    ):
        self._service = service
        self._actor_name = actor_name
        self._actor_user_id = actor_user_id
        self._actor_role = actor_role

        self.state = DragState.IDLE
        self.dragged_id: Optional[str] = None
        self.last_error: Optional[DomainError] = None
        self._snapshot: Optional[ScheduleItem] = None

    def start(self, item_id: str, *, from_protected: bool = False) -> bool:
        """Begin dragging ``item_id``.

        Gestures that begin on a nested control (``from_protected``) and
        read-only items such as vacations do not start a drag.
        """

        if self.state != DragState.IDLE:
            raise ValidationError("Another drag is already in progress")
        if from_protected:
            return False

        item = self._service.cache.get(item_id)
        if item is None or not item.draggable:
            return False

        self.state = DragState.DRAGGING
        self.dragged_id = item_id
        self._snapshot = item
        self.last_error = None
        return True

    def cancel(self) -> None:
        if self.state == DragState.DRAGGING:
            self._reset()

    def drop(self, target_day: Optional[date]) -> Optional[ScheduleItem]:
        if self.state != DragState.DRAGGING:
            return None
        if target_day is None:
            self.cancel()
            return None

        snapshot = self._snapshot
        plan = plan_move(snapshot, target_day, changed_by=self._actor_name, changed_at=now_local())
        # Show the bar at its new place while the store round trip runs.
        self._service.cache.replace(apply_plan(snapshot, plan))
        self.state = DragState.COMMITTING

        try:
            updated = self._service.reschedule(
                item_id=snapshot.item_id,
                target_day=target_day,
                actor_name=self._actor_name,
                actor_user_id=self._actor_user_id,
                actor_role=self._actor_role,
            )
        except DomainError as e:
            logger.warning("drag of item=%s to %s failed: %s", snapshot.item_id, target_day, e)
            if isinstance(e, StaleRecordError):
                # Gone from the store; the next load_week must refetch.
                self._service.cache.invalidate()
            else:
                self._service.cache.replace(snapshot)
            self.last_error = e
            self.state = DragState.FAILED
            return None

        self._service.cache.replace(updated)
        self._reset()
        return updated

    def acknowledge(self) -> None:
        if self.state == DragState.FAILED:
            self._reset()

    def _reset(self) -> None:
        self.state = DragState.IDLE
        self.dragged_id = None
        self._snapshot = None
