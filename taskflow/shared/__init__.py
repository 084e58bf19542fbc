"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from taskflow.shared.utils import ensure_utc, generate_cuid, hours_between, utc_now

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "hours_between",
    "utc_now",
]
