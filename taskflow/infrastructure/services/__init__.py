"""Infrastructure services (implementations of application service ports)."""

from taskflow.infrastructure.services.workflow_stats_service import WorkflowStatsRecorder

__all__ = ["WorkflowStatsRecorder"]
