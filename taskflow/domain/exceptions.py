"""Domain exceptions for the task-management service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class TaskflowException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class to allow consistent error
    handling and logging. Presentation layer maps these to HTTP responses
    using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, offending value).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body: error, message, details."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TaskflowException):
    """Raised when input validation fails (bad name, color, empty steps, ...)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        error_code: str = "VALIDATION_ERROR",
    ) -> None:
        """Initialize with message and optional field name and offending value.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
            value: Optional offending value (included only when not None).
            error_code: Override for subclasses that need a distinct code.
        """
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, error_code, details)


class DuplicateWorkflowNameError(ValidationException):
    """Raised when an active workflow already uses the name (case-insensitive)."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Workflow name already exists: {name}",
            field="name",
            value=name,
        )


class InvalidStepError(ValidationException):
    """Raised when a step fails validation (color pattern, lengths, approval flags)."""

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        super().__init__(message, field=field, value=value, error_code="INVALID_STEP")


class AuthenticationException(TaskflowException):
    """Raised when authentication fails (e.g. missing or invalid token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(TaskflowException):
    """Raised when the caller lacks the role required for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'workflow', 'task').
            action: Optional action that was attempted (e.g. 'create').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(TaskflowException):
    """Raised when a requested resource (workflow, step, task) is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'workflow', 'step').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InactiveWorkflowError(TaskflowException):
    """Raised when an operation needs an active workflow (set default, new task)."""

    def __init__(self, workflow_id: str) -> None:
        super().__init__(
            f"Workflow is not active: {workflow_id}",
            "INACTIVE_WORKFLOW",
            {"workflow_id": workflow_id},
        )


class LastStepError(TaskflowException):
    """Raised when removing a step would leave the workflow without steps."""

    def __init__(self, workflow_id: str, order: int) -> None:
        super().__init__(
            "Cannot remove the last step of a workflow",
            "LAST_STEP",
            {"workflow_id": workflow_id, "order": order},
        )


class InvalidPermutationError(TaskflowException):
    """Raised when a reorder list is not a permutation of the workflow's step ids."""

    def __init__(
        self,
        workflow_id: str,
        *,
        missing: list[str] | None = None,
        unknown: list[str] | None = None,
        duplicates: list[str] | None = None,
    ) -> None:
        super().__init__(
            "Step order must list every step of the workflow exactly once",
            "INVALID_PERMUTATION",
            {
                "workflow_id": workflow_id,
                "missing": missing or [],
                "unknown": unknown or [],
                "duplicates": duplicates or [],
            },
        )


class ReferencedStepError(TaskflowException):
    """Raised when removing a step that live tasks are currently at."""

    def __init__(self, workflow_id: str, order: int, task_count: int) -> None:
        super().__init__(
            f"{task_count} task(s) are at step {order}; move them before removing it",
            "REFERENCED_STEP",
            {"workflow_id": workflow_id, "order": order, "task_count": task_count},
        )


class AwaitingApprovalError(TaskflowException):
    """Raised when a gated step is advanced without an approval."""

    def __init__(self, task_id: str | None, order: int, action: str) -> None:
        super().__init__(
            f"Step {order} requires approval before the task can advance",
            "AWAITING_APPROVAL",
            {"task_id": task_id, "order": order, "action": action},
        )


class UnauthorizedStepActionError(TaskflowException):
    """Raised when the caller's identity may not perform the action at this step."""

    def __init__(self, order: int, action: str, role: str, reason: str) -> None:
        super().__init__(
            f"Action '{action}' not allowed for role '{role}' at step {order}: {reason}",
            "UNAUTHORIZED_STEP_ACTION",
            {"order": order, "action": action, "role": role, "reason": reason},
        )


class TaskAlreadyCompletedError(TaskflowException):
    """Raised when advancing a task that already reached the end of its workflow."""

    def __init__(self, task_id: str | None) -> None:
        super().__init__(
            "Task is already completed",
            "TASK_COMPLETED",
            {"task_id": task_id},
        )


class ConcurrentModificationError(TaskflowException):
    """Raised when a conditional write lost the race with another writer (optimistic lock)."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        expected_version: int | None = None,
    ) -> None:
        details: dict[str, Any] = {
            "resource_type": resource_type,
            "resource_id": resource_id,
        }
        if expected_version is not None:
            details["expected_version"] = expected_version
        super().__init__(
            f"{resource_type} {resource_id} was modified by another request; re-read and retry.",
            "CONCURRENT_MODIFICATION",
            details,
        )
