"""Application services: account, session and remember-me management."""

from taskdesk_identity.application.services.account_manager import AccountManager
from taskdesk_identity.application.services.remember_me_manager import (
    RememberMeManager,
)
from taskdesk_identity.application.services.session_manager import SessionManager

__all__ = [
    "AccountManager",
    "RememberMeManager",
    "SessionManager",
]
