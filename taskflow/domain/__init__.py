"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from taskflow.domain.entities import (
    StepSettings,
    TaskEntity,
    TaskHistoryEntry,
    WorkflowEntity,
    WorkflowStats,
    WorkflowStep,
)
from taskflow.domain.enums import StepAction, TaskHistoryAction, TaskStatus, UserRole
from taskflow.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    AwaitingApprovalError,
    ConcurrentModificationError,
    DuplicateWorkflowNameError,
    InactiveWorkflowError,
    InvalidPermutationError,
    InvalidStepError,
    LastStepError,
    ReferencedStepError,
    ResourceNotFoundException,
    TaskAlreadyCompletedError,
    TaskflowException,
    UnauthorizedStepActionError,
    ValidationException,
)
from taskflow.domain.value_objects import HexColor, StepTransition

__all__ = [
    # Entities
    "StepSettings",
    "TaskEntity",
    "TaskHistoryEntry",
    "WorkflowEntity",
    "WorkflowStats",
    "WorkflowStep",
    # Enums
    "StepAction",
    "TaskHistoryAction",
    "TaskStatus",
    "UserRole",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "AwaitingApprovalError",
    "ConcurrentModificationError",
    "DuplicateWorkflowNameError",
    "InactiveWorkflowError",
    "InvalidPermutationError",
    "InvalidStepError",
    "LastStepError",
    "ReferencedStepError",
    "ResourceNotFoundException",
    "TaskAlreadyCompletedError",
    "TaskflowException",
    "UnauthorizedStepActionError",
    "ValidationException",
    # Value objects
    "HexColor",
    "StepTransition",
]
