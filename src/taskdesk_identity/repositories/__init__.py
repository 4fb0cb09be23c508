"""Abstract repository interfaces for identity management."""

from taskdesk_identity.repositories.remember_token_repository import (
    RememberTokenData,
    RememberTokenRepository,
)

__all__ = [
    "RememberTokenData",
    "RememberTokenRepository",
]
