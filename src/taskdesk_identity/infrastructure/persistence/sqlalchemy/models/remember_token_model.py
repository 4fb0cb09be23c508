"""SQLAlchemy model for the ``tokens`` table."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from taskdesk_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase


class RememberTokenModel(IdentityBase):
    """SQLAlchemy model for remember-me tokens."""

    __tablename__ = "tokens"

    token: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    expires: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<RememberTokenModel(user_id={self.user_id}, expires={self.expires})>"
