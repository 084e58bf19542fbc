"""Task use cases."""

from taskflow.application.use_cases.tasks.task_progression import TaskService

__all__ = ["TaskService"]
