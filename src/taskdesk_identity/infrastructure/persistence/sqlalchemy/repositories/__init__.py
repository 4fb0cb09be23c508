# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""Record-store backed repository implementations."""

from taskdesk_identity.infrastructure.persistence.sqlalchemy.repositories.account_repository import (
    AccountRepositorySQLAlchemy,
)
from taskdesk_identity.infrastructure.persistence.sqlalchemy.repositories.remember_token_repository import (
    RememberTokenRepositorySQLAlchemy,
)

__all__ = [
    "AccountRepositorySQLAlchemy",
    "RememberTokenRepositorySQLAlchemy",
]
