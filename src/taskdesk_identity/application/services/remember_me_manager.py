"""Long-lived "remember me" grants, independent of session lifetime.

Each grant is written twice: the authoritative token goes to the record
store's ``tokens`` table, and a display copy goes to the remembered-user
list in local storage. The two writes are not transactional, so the list
may reference tokens that expired or were never stored. ``validate`` and
``reconcile_all`` repair such drift when they meet it.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from taskdesk_identity.application.formatting import initials_for
from taskdesk_identity.domain.shared.time import utc_now
from taskdesk_identity.exceptions import TokenExpiredError, TokenInvalidError
from taskdesk_identity.schemas import CachedLogin, RememberedUser, TokenValidation
from taskdesk_identity.services import generate_token

if TYPE_CHECKING:
    from taskdesk_identity.domain.account import Account
    from taskdesk_identity.infrastructure.local_storage import (
        RememberedUserCache,
        SessionStore,
    )
    from taskdesk_identity.repositories import RememberTokenRepository

logger = logging.getLogger(__name__)


class RememberMeManager:
    """Issue, validate and revoke remember-me tokens."""

    TOKEN_EXPIRY_DAYS = 30

    def __init__(
        self,
        token_repository: RememberTokenRepository,
        cache: RememberedUserCache,
        session_store: SessionStore,
        token_expiry_days: int = TOKEN_EXPIRY_DAYS,
    ):
        self._token_repo = token_repository
        self._cache = cache
        self._session_store = session_store
        self._token_lifetime = timedelta(days=token_expiry_days)

    async def issue(self, account: Account) -> str:
        now = utc_now()
        token = generate_token()
        expires = now + self._token_lifetime

        await self._token_repo.create(token, account.id, expires)

        replaced = self._cache.upsert(
            RememberedUser(
                token=token,
                name=account.name,
                email=account.email,
                initials=initials_for(account.name),
                expires_at=expires,
                last_login=now,
            ),
        )
        self._session_store.set_current_token(token)

        # One grant per account in the list; retire the superseded token
        if replaced is not None and replaced.token != token:
            await self._token_repo.delete(replaced.token)
            logger.debug("Replaced remember-me grant for %s", account.email)

        return token

    async def validate(self, token: str) -> TokenValidation:
        data = await self._token_repo.find_by_token(token)
        if data is None:
            return TokenValidation(valid=False, expired=False)

        if data.is_expired(utc_now()):
            await self._token_repo.delete(token)
            logger.info("Collected expired remember-me token of account %s", data.user_id)
            return TokenValidation(valid=False, expired=True)

        return TokenValidation(valid=True, account_id=data.user_id)

    async def verify(self, token: str) -> str:
        """Raising form of ``validate``; returns the owning account id.

        Raises
        ------
        TokenExpiredError
            If the token existed but has expired
        TokenInvalidError
            If the token is unknown
        """
        result = await self.validate(token)
        if result.expired:
            raise TokenExpiredError
        if not result.valid or result.account_id is None:
            raise TokenInvalidError
        return result.account_id

    async def revoke(self, email: str) -> None:
        entry = self._cache.find_by_email(email)
        if entry is None:
            return

        await self._token_repo.delete(entry.token)
        self._cache.remove(email)

        if self._session_store.get_current_token() == entry.token:
            self._session_store.clear_current_token()

        logger.info("Revoked remember-me grant for %s", entry.email)

    async def revoke_all(self, account: Account) -> int:
        """Delete every token of ``account`` and drop its cached entry."""
        tokens = {t.token for t in await self._token_repo.find_all_for_user(account.id)}
        deleted = await self._token_repo.delete_all_for_user(account.id)

        entry = self._cache.remove(account.email)
        if entry is not None:
            tokens.add(entry.token)
            # Cached token may predate the table (drift); delete it too
            if await self._token_repo.delete(entry.token):
                deleted += 1

        if self._session_store.get_current_token() in tokens:
            self._session_store.clear_current_token()

        return deleted

    def find_cached(self, email: str) -> RememberedUser | None:
        return self._cache.find_by_email(email)

    def touch(self, email: str) -> None:
        """Refresh the cached entry's ``last_login``."""
        entry = self._cache.find_by_email(email)
        if entry is None:
            return
        self._cache.upsert(entry.model_copy(update={"last_login": utc_now()}))

    def list_cached(self) -> list[CachedLogin]:
        """Snapshot of remembered users. Performs no validation."""
        return [_to_cached_login(entry) for entry in self._cache.load()]

    async def reconcile_all(self) -> list[CachedLogin]:
        """Drop remembered users whose backing token is invalid or expired.

        Meant to run once at startup, not on every render.
        """
        entries = self._cache.load()
        survivors: list[RememberedUser] = []

        for entry in entries:
            result = await self.validate(entry.token)
            if result.valid:
                survivors.append(entry)
            else:
                logger.info(
                    "Dropping %s remembered user: %s",
                    "expired" if result.expired else "invalid",
                    entry.email,
                )

        if len(survivors) != len(entries):
            self._cache.replace_all(survivors)
            current = self._session_store.get_current_token()
            if current is not None and current not in {e.token for e in survivors}:
                self._session_store.clear_current_token()

        return [_to_cached_login(entry) for entry in survivors]

    async def purge_expired(self) -> int:
        """Delete every expired token from the record store."""
        deleted = await self._token_repo.cleanup_expired()
        if deleted:
            logger.info("Purged %d expired remember-me tokens", deleted)
        return deleted


def _to_cached_login(entry: RememberedUser) -> CachedLogin:
    return CachedLogin(
        email=entry.email,
        name=entry.name,
        initials=entry.initials,
        last_login=entry.last_login,
    )
