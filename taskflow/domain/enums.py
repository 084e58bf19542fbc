"""Domain enumerations for the task-management service.

Enums represent fixed sets of domain values (roles, task status, step actions).
"""

from enum import Enum


class UserRole(str, Enum):
    """Caller role carried by the identity token.

    Admins edit workflow definitions and may force-advance tasks; users work
    tasks; clients only see and approve their own tasks at client steps.
    """

    ADMIN = "admin"
    USER = "user"
    CLIENT = "client"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings."""
        return [role.value for role in cls]


class TaskStatus(str, Enum):
    """Task lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ON_HOLD = "on_hold"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]

    @classmethod
    def live(cls) -> tuple["TaskStatus", ...]:
        """Statuses of tasks that still occupy a workflow step."""
        return (cls.ACTIVE, cls.ON_HOLD)


class StepAction(str, Enum):
    """Action a caller performs on the current step of a task."""

    APPROVE = "approve"
    REJECT = "reject"
    FORCE_ADVANCE = "force_advance"


class TaskHistoryAction(str, Enum):
    """Kinds of entries recorded in a task's progression history."""

    CREATED = "created"
    STEP_ADVANCED = "step_advanced"
    STEP_REVERTED = "step_reverted"
    APPROVED = "approved"
    COMPLETED = "completed"
    REOPENED = "reopened"
