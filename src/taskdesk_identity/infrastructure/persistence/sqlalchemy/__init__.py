"""SQLAlchemy persistence for the identity store."""

from taskdesk_identity.infrastructure.persistence.sqlalchemy.record_store import (
    TOKENS,
    USERS,
    Record,
    RecordStore,
)
from taskdesk_identity.infrastructure.persistence.sqlalchemy.repositories import (
    AccountRepositorySQLAlchemy,
    RememberTokenRepositorySQLAlchemy,
)

__all__ = [
    "TOKENS",
    "USERS",
    "AccountRepositorySQLAlchemy",
    "Record",
    "RecordStore",
    "RememberTokenRepositorySQLAlchemy",
]
