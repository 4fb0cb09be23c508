# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy models for the identity store."""

from taskdesk_identity.infrastructure.persistence.sqlalchemy.models.account_model import (
    AccountModel,
)
from taskdesk_identity.infrastructure.persistence.sqlalchemy.models.remember_token_model import (
    RememberTokenModel,
)

__all__ = [
    "AccountModel",
    "RememberTokenModel",
]
