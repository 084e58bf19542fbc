"""Core: settings, rate limiter, exception handlers and lifespan."""

from taskflow.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
