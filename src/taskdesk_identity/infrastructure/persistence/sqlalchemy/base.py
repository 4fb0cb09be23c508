"""SQLAlchemy declarative base for identity store models."""

from sqlalchemy.orm import DeclarativeBase


class IdentityBase(DeclarativeBase):
    """Base class for all identity store models."""
