"""Security: bearer token verification."""

from authcore.infrastructure.security.jwt import verify_token

__all__ = ["verify_token"]
