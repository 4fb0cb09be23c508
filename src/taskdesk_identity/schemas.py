"""Identity schemas and data structures.

Records kept in local storage (session, remembered users, legacy accounts)
are pydantic models serialized with camelCase keys, the layout the browser
front end reads. Results handed back to callers are plain frozen
dataclasses.
"""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskdesk_identity.exceptions import AuthError


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Session(_CamelModel):
    """The current session of this installation.

    Replaced wholesale on every login; never partially updated.
    """

    model_config = ConfigDict(frozen=True)

    account_id: str
    name: str
    email: str
    is_authenticated: bool = True
    login_time: datetime


class RememberedUser(_CamelModel):
    """Cache entry backing a "quick login" button.

    Not authoritative: the token it references may have expired or been
    deleted. Validation paths drop stale entries.
    """

    token: str
    name: str
    email: str
    initials: str
    expires_at: datetime
    last_login: datetime


class LegacyAccountRecord(_CamelModel):
    """Account record in the pre-database plaintext format."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str = "User"
    email: str
    password: str = Field(min_length=1)
    created_at: datetime | None = None
    failed_login_attempts: int = Field(default=0, ge=0)
    locked_until: datetime | None = None
    last_login: datetime | None = None


@dataclass(frozen=True)
class CachedLogin:
    """Read-only view of a remembered user for quick-login affordances."""

    email: str
    name: str
    initials: str
    last_login: datetime


@dataclass(frozen=True)
class CurrentUser:
    """Identity of the user the current session belongs to."""

    id: str
    name: str
    email: str


@dataclass(frozen=True)
class LockStatus:
    """Lockout state of an account.

    Attributes
    ----------
    locked
        Whether login attempts are currently refused
    remaining_seconds
        Seconds until the lock lifts (rounded up), None if not locked
    locked_until
        When the lock lifts, None if not locked
    """

    locked: bool
    remaining_seconds: int | None = None
    locked_until: datetime | None = None


@dataclass(frozen=True)
class TokenValidation:
    """Result of checking a remember-me token."""

    valid: bool
    account_id: str | None = None
    expired: bool = False


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login attempt.

    ``error`` carries the typed failure for callers that need more than the
    user-facing message.
    """

    success: bool
    expired: bool
    message: str
    error: AuthError | None = None


@dataclass(frozen=True)
class StoreStatus:
    """Snapshot of the record store for diagnostics."""

    exists: bool
    tables: list[str]
    user_count: int
