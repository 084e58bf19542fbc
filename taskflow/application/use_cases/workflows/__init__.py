"""Workflow use cases."""

from taskflow.application.use_cases.workflows.workflow_operations import WorkflowService

__all__ = ["WorkflowService"]
