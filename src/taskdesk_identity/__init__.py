"""TaskDesk Identity - local accounts, sessions and remember-me logins.

This package handles the identity concerns of a single installation:
- Account registration, password policy and failed-login lockout
- The current session and logout
- Remember-me tokens backing "quick login"

Accounts and tokens live in a durable record store (SQLAlchemy asyncio);
the session and remembered-user list live in local storage.
"""

from taskdesk_identity.application import (
    AccountManager,
    RememberMeManager,
    SessionManager,
    format_lockout_time,
    initials_for,
)
from taskdesk_identity.bootstrap import (
    IdentityContainer,
    build_identity,
    configure_logging,
)
from taskdesk_identity.domain.account import (
    Account,
    AccountNotFoundError,
    AccountRepository,
    DuplicateAccountError,
    Email,
    InvalidEmailError,
    PasswordFeedback,
    PasswordStrength,
)
from taskdesk_identity.exceptions import (
    AccountLockedError,
    AuthError,
    InvalidCredentialsError,
    StoreUnavailableError,
    TokenExpiredError,
    TokenInvalidError,
    WeakPasswordError,
)
from taskdesk_identity.infrastructure.local_storage import (
    FileLocalStorage,
    InMemoryLocalStorage,
    LocalStorage,
    StorageEvent,
)
from taskdesk_identity.infrastructure.persistence.sqlalchemy import RecordStore
from taskdesk_identity.repositories import (
    RememberTokenData,
    RememberTokenRepository,
)
from taskdesk_identity.schemas import (
    CachedLogin,
    CurrentUser,
    LockStatus,
    LoginResult,
    RememberedUser,
    Session,
    StoreStatus,
    TokenValidation,
)
from taskdesk_identity.services import PasswordHashingService, generate_token

__all__ = [
    # Domain - Account
    "Account",
    "AccountNotFoundError",
    "AccountRepository",
    "DuplicateAccountError",
    "Email",
    "InvalidEmailError",
    "PasswordFeedback",
    "PasswordStrength",
    # Application
    "AccountManager",
    "RememberMeManager",
    "SessionManager",
    "format_lockout_time",
    "initials_for",
    # Bootstrap
    "IdentityContainer",
    "build_identity",
    "configure_logging",
    # Exceptions
    "AccountLockedError",
    "AuthError",
    "InvalidCredentialsError",
    "StoreUnavailableError",
    "TokenExpiredError",
    "TokenInvalidError",
    "WeakPasswordError",
    # Infrastructure
    "FileLocalStorage",
    "InMemoryLocalStorage",
    "LocalStorage",
    "RecordStore",
    "StorageEvent",
    # Repositories
    "RememberTokenData",
    "RememberTokenRepository",
    # Schemas
    "CachedLogin",
    "CurrentUser",
    "LockStatus",
    "LoginResult",
    "RememberedUser",
    "Session",
    "StoreStatus",
    "TokenValidation",
    # Services
    "PasswordHashingService",
    "generate_token",
]
