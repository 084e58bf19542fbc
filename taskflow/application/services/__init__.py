"""Application services: step progression rules and built-in workflow definitions."""

from taskflow.application.services.default_workflows import (
    SOCIAL_MEDIA_WORKFLOW_NAME,
    social_media_workflow,
)
from taskflow.application.services.step_progression import (
    advance_task,
    can_client_view,
    revert_task,
)

__all__ = [
    "SOCIAL_MEDIA_WORKFLOW_NAME",
    "advance_task",
    "can_client_view",
    "revert_task",
    "social_media_workflow",
]
