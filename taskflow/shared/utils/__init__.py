"""Shared utilities: datetime and id generators."""

from taskflow.shared.utils.datetime import ensure_utc, hours_between, utc_now
from taskflow.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "hours_between",
]
