"""Application layer for identity management."""

from taskdesk_identity.application.formatting import format_lockout_time, initials_for
from taskdesk_identity.application.services import (
    AccountManager,
    RememberMeManager,
    SessionManager,
)

__all__ = [
    "AccountManager",
    "RememberMeManager",
    "SessionManager",
    "format_lockout_time",
    "initials_for",
]
