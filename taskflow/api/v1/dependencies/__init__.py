"""API v1 dependencies: caller identity, role checks and service wiring."""

from taskflow.api.v1.dependencies.auth import (
    get_caller,
    get_caller_optional,
    require_role,
)
from taskflow.api.v1.dependencies.task import get_task_service, get_task_service_for_write
from taskflow.api.v1.dependencies.workflow import (
    get_workflow_service,
    get_workflow_service_for_write,
)

__all__ = [
    "get_caller",
    "get_caller_optional",
    "get_task_service",
    "get_task_service_for_write",
    "get_workflow_service",
    "get_workflow_service_for_write",
    "require_role",
]
