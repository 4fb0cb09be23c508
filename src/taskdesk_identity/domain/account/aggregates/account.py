"""Account aggregate."""

from datetime import datetime, timedelta
from typing import Union
from uuid import uuid4

from taskdesk_identity.domain.shared.time import utc_now
from taskdesk_identity.domain.account.value_objects.email import Email


class Account:
    """
    Account aggregate root.

    One account exists per normalized email. The aggregate owns the
    failed-login counter and lockout timestamp; persistence and policy
    parameters (threshold, lockout duration) live outside it.
    """

    def __init__(  # noqa: PLR0913
        self,
        name: str,
        email: Union[str, Email],
        password_hash: str,
        id: str | None = None,
        created_at: datetime | None = None,
        failed_login_attempts: int = 0,
        locked_until: datetime | None = None,
        last_login: datetime | None = None,
    ):
        name = name.strip()
        if not name:
            msg = "Name cannot be empty"
            raise ValueError(msg)
        if failed_login_attempts < 0:
            msg = "failed_login_attempts cannot be negative"
            raise ValueError(msg)

        self._id = id or str(uuid4())
        self._name = name
        self._email = email if isinstance(email, Email) else Email(email)
        self._password_hash = password_hash
        self._created_at = created_at or utc_now()
        self._failed_login_attempts = failed_login_attempts
        self._locked_until = locked_until
        self._last_login = last_login

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def failed_login_attempts(self) -> int:
        return self._failed_login_attempts

    @property
    def locked_until(self) -> datetime | None:
        return self._locked_until

    @property
    def last_login(self) -> datetime | None:
        return self._last_login

    def is_locked(self, now: datetime) -> bool:
        return self._locked_until is not None and now < self._locked_until

    def lock_remaining(self, now: datetime) -> timedelta | None:
        """Time left on the lock, or None when the account is not locked."""
        if not self.is_locked(now):
            return None
        return self._locked_until - now  # type: ignore[operator]

    def register_failed_login(
        self,
        now: datetime,
        max_attempts: int,
        lockout_duration: timedelta,
    ) -> bool:
        """Count a failed credential check.

        Returns True when this failure locked the account. Locking resets
        the counter so the next window starts from zero.
        """
        self._failed_login_attempts += 1
        if self._failed_login_attempts >= max_attempts:
            self._locked_until = now + lockout_duration
            self._failed_login_attempts = 0
            return True
        return False

    def register_successful_login(self, now: datetime) -> None:
        self._failed_login_attempts = 0
        self._locked_until = None
        self._last_login = now

    def clear_lock(self) -> None:
        self._locked_until = None

    def rename(self, name: str) -> None:
        name = name.strip()
        if not name:
            msg = "Name cannot be empty"
            raise ValueError(msg)
        self._name = name

    def change_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash

    def touch_last_login(self, now: datetime) -> None:
        self._last_login = now

    def set_failed_login_attempts(self, attempts: int) -> None:
        if attempts < 0:
            msg = "failed_login_attempts cannot be negative"
            raise ValueError(msg)
        self._failed_login_attempts = attempts

    def set_locked_until(self, locked_until: datetime | None) -> None:
        self._locked_until = locked_until

    @classmethod
    def create(
        cls,
        name: str,
        email: Union[str, Email],
        password_hash: str,
    ) -> "Account":
        return cls(name=name, email=email, password_hash=password_hash)

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: str,
        name: str,
        email: Union[str, Email],
        password_hash: str,
        created_at: datetime,
        failed_login_attempts: int,
        locked_until: datetime | None,
        last_login: datetime | None,
    ) -> "Account":
        return cls(
            id=id,
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=created_at,
            failed_login_attempts=failed_login_attempts,
            locked_until=locked_until,
            last_login=last_login,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Account(id={self._id}, email={self._email.value})"
