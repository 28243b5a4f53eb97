from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access checks."""

    ADMIN = "admin"
    USER = "user"


class ItemStatus(str, Enum):
    """Work item status as stored in the database."""

    WAITING = "WAITING"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    POSTPONED = "POSTPONED"


class ItemKind(str, Enum):
    TASK = "TASK"
    VACATION = "VACATION"


class DragState(str, Enum):
    """Lifecycle of a single drag gesture on the weekly grid."""

    IDLE = "IDLE"
    DRAGGING = "DRAGGING"
    COMMITTING = "COMMITTING"
    FAILED = "FAILED"
