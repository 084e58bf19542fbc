"""Domain value objects."""

from taskflow.domain.value_objects.core import HexColor, StepTransition

__all__ = [
    "HexColor",
    "StepTransition",
]
