"""Persistence models: ORM entities and mixins."""

from taskflow.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    VersionedMixin,
    VersionedModel,
)
from taskflow.infrastructure.persistence.models.task import Task
from taskflow.infrastructure.persistence.models.workflow import Workflow

__all__ = [
    "CuidMixin",
    "Task",
    "TimestampMixin",
    "VersionedMixin",
    "VersionedModel",
    "Workflow",
]
