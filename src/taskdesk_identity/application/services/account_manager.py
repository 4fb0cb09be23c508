"""Account lifecycle and credential policy."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from taskdesk_identity.domain.account import (
    Account,
    AccountNotFoundError,
    DuplicateAccountError,
    Email,
    InvalidEmailError,
    PasswordStrength,
)
from taskdesk_identity.domain.shared.time import ensure_tz_aware_or_none, utc_now
from taskdesk_identity.exceptions import InvalidCredentialsError, WeakPasswordError
from taskdesk_identity.schemas import LegacyAccountRecord, LockStatus

if TYPE_CHECKING:
    from taskdesk_identity.domain.account import AccountRepository
    from taskdesk_identity.services import PasswordHashingService

logger = logging.getLogger(__name__)


class AccountManager:
    """
    Application service for account CRUD, password policy and lockout.

    Lockout state machine: a failed credential check increments the
    account's counter; reaching ``max_failed_attempts`` locks the account
    for ``lockout_duration_minutes`` and resets the counter. A successful
    check resets the counter and stamps ``last_login``. ``is_locked`` lifts
    an elapsed lock as a side effect.

    The read-modify-write in ``record_failed_attempt`` is not atomic;
    two concurrent failures against one account may be counted once.
    """

    # Fields ``update`` may change; id, email, created_at and the password
    # hash are managed by dedicated operations.
    UPDATABLE_FIELDS = frozenset(
        {"name", "failed_login_attempts", "locked_until", "last_login"},
    )

    def __init__(
        self,
        account_repository: AccountRepository,
        password_service: PasswordHashingService,
        max_failed_attempts: int = 5,
        lockout_duration_minutes: int = 15,
    ):
        self._account_repo = account_repository
        self._password_service = password_service
        self._max_failed_attempts = max_failed_attempts
        self._lockout_duration = timedelta(minutes=lockout_duration_minutes)

    @property
    def lockout_duration(self) -> timedelta:
        return self._lockout_duration

    async def create(self, name: str, email: str, password: str) -> Account:
        email_obj = Email(email)

        if await self._account_repo.exists_by_email(email_obj):
            raise DuplicateAccountError(email_obj.value)

        password_hash = self._password_service.hash(password)
        account = Account.create(name, email_obj, password_hash)
        await self._account_repo.add(account)

        logger.info("Account registered: %s", account.email)
        return account

    async def find_by_email(self, email: str) -> Account | None:
        try:
            email_obj = Email(email)
        except InvalidEmailError:
            return None
        return await self._account_repo.find_by_email(email_obj)

    async def find_by_id(self, account_id: str) -> Account | None:
        return await self._account_repo.find_by_id(account_id)

    async def list_all(self) -> list[Account]:
        return await self._account_repo.list_all()

    async def update(self, email: str, **fields: Any) -> Account:
        unknown = set(fields) - self.UPDATABLE_FIELDS
        if unknown:
            msg = f"Cannot update fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        account = await self._require(email)

        if "name" in fields:
            account.rename(fields["name"])
        if "failed_login_attempts" in fields:
            account.set_failed_login_attempts(fields["failed_login_attempts"])
        if "locked_until" in fields:
            account.set_locked_until(fields["locked_until"])
        if "last_login" in fields:
            account.touch_last_login(fields["last_login"])

        await self._account_repo.save(account)
        return account

    async def delete(self, email: str) -> bool:
        """Delete an account.

        Tokens, remembered-user entries and the session are not touched;
        ``SessionManager.delete_account`` performs the full cascade.
        """
        try:
            email_obj = Email(email)
        except InvalidEmailError:
            return False
        return await self._account_repo.delete(email_obj)

    def validate_password_strength(self, password: str) -> PasswordStrength:
        return self._password_service.evaluate(password)

    def verify_password(self, account: Account, password: str) -> bool:
        return self._password_service.verify(password, account.password_hash)

    async def upgrade_password_hash(self, account: Account, password: str) -> bool:
        """Re-hash a verified password if its work factor is outdated.

        Call only after ``verify_password`` succeeded. The policy is not
        applied, so imported legacy passwords can be upgraded too.
        """
        if not self._password_service.needs_rehash(account.password_hash):
            return False

        account.change_password_hash(
            self._password_service.hash(password, enforce_policy=False),
        )
        await self._account_repo.save(account)
        logger.info("Upgraded password hash for account: %s", account.id)
        return True

    async def change_password(
        self,
        email: str,
        current_password: str,
        new_password: str,
    ) -> Account:
        account = await self._require(email)

        if not self.verify_password(account, current_password):
            msg = "Current password is incorrect"
            raise InvalidCredentialsError(msg)

        if new_password == current_password:
            msg = "New password must be different from current password"
            raise WeakPasswordError(msg)

        account.change_password_hash(self._password_service.hash(new_password))
        await self._account_repo.save(account)

        logger.info("Password changed for account: %s", account.id)
        return account

    async def is_locked(self, email: str) -> LockStatus:
        account = await self.find_by_email(email)
        if account is None or account.locked_until is None:
            return LockStatus(locked=False)

        now = utc_now()
        remaining = account.lock_remaining(now)
        if remaining is not None:
            return LockStatus(
                locked=True,
                remaining_seconds=math.ceil(remaining.total_seconds()),
                locked_until=account.locked_until,
            )

        # Lock has elapsed
        account.clear_lock()
        await self._account_repo.save(account)
        logger.info("Lock expired for account: %s", account.id)
        return LockStatus(locked=False)

    async def record_failed_attempt(self, email: str) -> LockStatus:
        account = await self.find_by_email(email)
        if account is None:
            return LockStatus(locked=False)

        locked = account.register_failed_login(
            utc_now(),
            self._max_failed_attempts,
            self._lockout_duration,
        )
        await self._account_repo.save(account)

        if not locked:
            logger.debug(
                "Failed login %d/%d for account %s",
                account.failed_login_attempts,
                self._max_failed_attempts,
                account.id,
            )
            return LockStatus(locked=False)

        logger.warning(
            "Account %s locked for %s after %d failed attempts",
            account.id,
            self._lockout_duration,
            self._max_failed_attempts,
        )
        return LockStatus(
            locked=True,
            remaining_seconds=int(self._lockout_duration.total_seconds()),
            locked_until=account.locked_until,
        )

    async def record_successful_login(self, email: str) -> Account:
        account = await self._require(email)
        account.register_successful_login(utc_now())
        await self._account_repo.save(account)
        return account

    async def import_legacy_accounts(
        self,
        records: Iterable[Mapping[str, Any]],
    ) -> int:
        """Import accounts from the old plaintext local-storage format.

        Passwords are hashed on the way in and are not checked against the
        current policy. Records whose email already exists, or that cannot
        be parsed, are skipped.

        Returns
        -------
        Number of accounts imported
        """
        imported = 0
        for raw in records:
            try:
                legacy = LegacyAccountRecord.model_validate(raw)
                email_obj = Email(legacy.email)
            except (ValidationError, InvalidEmailError) as e:
                logger.warning("Skipping unreadable legacy account: %s", e)
                continue

            if await self._account_repo.exists_by_email(email_obj):
                logger.debug("Legacy account already present: %s", email_obj.value)
                continue

            account = Account(
                id=legacy.id,
                name=legacy.name.strip() or "User",
                email=email_obj,
                password_hash=self._password_service.hash(
                    legacy.password,
                    enforce_policy=False,
                ),
                created_at=ensure_tz_aware_or_none(legacy.created_at),
                failed_login_attempts=legacy.failed_login_attempts,
                locked_until=ensure_tz_aware_or_none(legacy.locked_until),
                last_login=ensure_tz_aware_or_none(legacy.last_login),
            )
            await self._account_repo.add(account)
            imported += 1

        logger.info("Imported %d legacy accounts", imported)
        return imported

    async def _require(self, email: str) -> Account:
        account = await self.find_by_email(email)
        if account is None:
            raise AccountNotFoundError(email)
        return account
