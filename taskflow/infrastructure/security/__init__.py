"""Security: bearer tokens decoded into caller identities."""

from taskflow.infrastructure.security.jwt import CallerTokenCodec

__all__ = ["CallerTokenCodec"]
