"""Identifier generation for workflows, steps, tasks and request ids."""

from cuid2 import cuid_wrapper

_next_id = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2: lowercase, alphanumeric, starts with a letter."""
    return str(_next_id())
