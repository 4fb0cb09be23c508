"""Login, logout and the current session of this installation."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from taskdesk_identity.application.formatting import format_lockout_time
from taskdesk_identity.domain.shared.time import ensure_tz_aware, utc_now
from taskdesk_identity.exceptions import (
    AccountLockedError,
    AuthError,
    InvalidCredentialsError,
    TokenExpiredError,
    TokenInvalidError,
)
from taskdesk_identity.schemas import CurrentUser, LoginResult, Session

if TYPE_CHECKING:
    from taskdesk_identity.application.services.account_manager import (
        AccountManager,
    )
    from taskdesk_identity.application.services.remember_me_manager import (
        RememberMeManager,
    )
    from taskdesk_identity.domain.account import Account
    from taskdesk_identity.infrastructure.local_storage import SessionStore

logger = logging.getLogger(__name__)

LOGIN_SUCCESS_MESSAGE = "Login successful."
REMEMBERED_USER_NOT_FOUND_MESSAGE = "Remembered user not found."
ACCOUNT_GONE_MESSAGE = "User account no longer exists."


class SessionManager:
    """
    Authentication flows over the account and remember-me managers.

    ``authenticate`` is the raising form; ``login`` and ``login_with_token``
    convert ``AuthError`` into a failed ``LoginResult`` carrying the message
    to show. ``StoreUnavailableError`` is never converted.
    """

    SESSION_MAX_AGE_HOURS = 24

    def __init__(
        self,
        account_manager: AccountManager,
        remember_me_manager: RememberMeManager,
        session_store: SessionStore,
        session_max_age_hours: int | None = SESSION_MAX_AGE_HOURS,
    ):
        self._accounts = account_manager
        self._remember_me = remember_me_manager
        self._session_store = session_store
        self._session_max_age = (
            timedelta(hours=session_max_age_hours) if session_max_age_hours else None
        )

    async def authenticate(
        self,
        email: str,
        password: str,
        remember_me: bool = False,
    ) -> Session:
        """
        Check credentials and start a session.

        Parameters
        ----------
        email
            Login email, normalized before lookup
        password
            Plain text password
        remember_me
            Also issue a remember-me token for quick login

        Returns
        -------
        The new current session

        Raises
        ------
        AccountLockedError
            If the account is locked; the failure counter is not touched
        InvalidCredentialsError
            If the account does not exist or the password is wrong
        """
        lock = await self._accounts.is_locked(email)
        if lock.locked:
            logger.info("Login refused for locked account: %s", email)
            raise AccountLockedError(remaining_seconds=lock.remaining_seconds)

        account = await self._accounts.find_by_email(email)
        if account is None:
            logger.debug("Login failed, no account for %s", email)
            raise InvalidCredentialsError

        if not self._accounts.verify_password(account, password):
            status = await self._accounts.record_failed_attempt(email)
            logger.info("Login failed for account %s", account.id)
            if status.locked:
                logger.debug("Account %s is now locked", account.id)
            raise InvalidCredentialsError

        await self._accounts.upgrade_password_hash(account, password)
        account = await self._accounts.record_successful_login(account.email)
        session = self._start_session(account)

        if remember_me:
            await self._remember_me.issue(account)

        logger.info("Account logged in: %s", account.id)
        return session

    async def login(
        self,
        email: str,
        password: str,
        remember_me: bool = False,
    ) -> LoginResult:
        try:
            await self.authenticate(email, password, remember_me=remember_me)
        except AccountLockedError as e:
            message = (
                "Account is temporarily locked. Please try again in "
                f"{format_lockout_time(e.remaining_seconds)}."
            )
            return LoginResult(success=False, expired=False, message=message, error=e)
        except AuthError as e:
            return LoginResult(success=False, expired=False, message=e.message, error=e)

        return LoginResult(success=True, expired=False, message=LOGIN_SUCCESS_MESSAGE)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        remember_me: bool = False,
    ) -> Account:
        """Create an account and log it in."""
        account = await self._accounts.create(name, email, password)
        account = await self._accounts.record_successful_login(account.email)
        self._start_session(account)

        if remember_me:
            await self._remember_me.issue(account)

        return account

    async def login_with_token(self, email: str) -> LoginResult:
        """
        Quick login through a remembered user's token.

        Any failure after the cache lookup revokes the remembered entry so
        the stale quick-login button disappears.
        """
        entry = self._remember_me.find_cached(email)
        if entry is None:
            return LoginResult(
                success=False,
                expired=False,
                message=REMEMBERED_USER_NOT_FOUND_MESSAGE,
            )

        validation = await self._remember_me.validate(entry.token)
        if not validation.valid:
            await self._remember_me.revoke(entry.email)
            error = TokenExpiredError() if validation.expired else TokenInvalidError()
            return LoginResult(
                success=False,
                expired=validation.expired,
                message=error.message,
                error=error,
            )

        account = await self._accounts.find_by_email(entry.email)
        if account is None or account.id != validation.account_id:
            await self._remember_me.revoke(entry.email)
            return LoginResult(
                success=False,
                expired=False,
                message=ACCOUNT_GONE_MESSAGE,
            )

        account = await self._accounts.record_successful_login(account.email)
        self._start_session(account)
        self._session_store.set_current_token(entry.token)
        self._remember_me.touch(account.email)

        logger.info("Account logged in with remember-me token: %s", account.id)
        return LoginResult(success=True, expired=False, message=LOGIN_SUCCESS_MESSAGE)

    def logout(self) -> None:
        """End the session. Remember-me grants stay valid."""
        self._session_store.clear_session()
        self._session_store.clear_current_token()
        logger.info("Logged out")

    def current_session(self) -> Session | None:
        session = self._session_store.get_session()
        if session is None:
            return None

        if self._session_max_age is not None:
            age = utc_now() - ensure_tz_aware(session.login_time)
            if age > self._session_max_age:
                logger.info("Session of account %s expired", session.account_id)
                self._session_store.clear_session()
                return None

        return session

    def current_user(self) -> CurrentUser | None:
        session = self.current_session()
        if session is None or not session.is_authenticated:
            return None
        return CurrentUser(id=session.account_id, name=session.name, email=session.email)

    def is_authenticated(self) -> bool:
        return self.current_user() is not None

    async def delete_account(self, email: str) -> bool:
        """Delete an account with its tokens, remembered entry and session."""
        account = await self._accounts.find_by_email(email)
        if account is None:
            return False

        await self._remember_me.revoke_all(account)
        deleted = await self._accounts.delete(account.email)

        session = self._session_store.get_session()
        if session is not None and session.account_id == account.id:
            self.logout()

        logger.info("Account deleted: %s", account.id)
        return deleted

    def _start_session(self, account: Account) -> Session:
        session = Session(
            account_id=account.id,
            name=account.name,
            email=account.email,
            login_time=utc_now(),
        )
        self._session_store.set_session(session)
        return session
