"""Credential services (password hashing, token generation)."""

from taskdesk_identity.services.password_service import PasswordHashingService
from taskdesk_identity.services.token_service import generate_token

__all__ = ["PasswordHashingService", "generate_token"]
