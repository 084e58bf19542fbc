"""Agency task-management service: workflow definitions and task step progression."""

__version__ = "1.0.0"
