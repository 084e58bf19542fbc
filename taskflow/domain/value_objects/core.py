"""Domain value objects for the task-management service.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

from taskflow.domain.enums import StepAction

# Step colors are stored as 6-digit hex (e.g. #3B82F6).
_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class HexColor:
    """Value object for a step color in ``#RRGGBB`` form."""

    value: str

    def __post_init__(self) -> None:
        """Validate the hex pattern.

        Raises:
            ValueError: If value is not a ``#RRGGBB`` string.
        """
        if not isinstance(self.value, str) or not _HEX_COLOR_RE.match(self.value):
            raise ValueError("Color must be a hex string in the form #RRGGBB")


@dataclass(frozen=True)
class StepTransition:
    """Outcome of a progression action on a task.

    ``step_to`` is None when the task reached the terminal Completed state;
    ``reopened`` marks a revert that brought a completed task back to work.
    """

    action: StepAction | None
    step_from: int
    step_to: int | None
    reopened: bool = False

    @property
    def completed(self) -> bool:
        """Return whether this transition ends the workflow."""
        return self.step_to is None

    @property
    def is_revert(self) -> bool:
        """Return whether the task moved backwards."""
        return self.step_to is not None and self.step_to < self.step_from
