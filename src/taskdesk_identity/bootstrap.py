"""Wire the identity store together from settings.

A presentation layer builds one ``IdentityContainer`` per installation,
awaits ``start()`` once, and then talks to the managers it holds.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from taskdesk_config.settings import Settings, get_settings
from taskdesk_identity.application.services import (
    AccountManager,
    RememberMeManager,
    SessionManager,
)
from taskdesk_identity.infrastructure.local_storage import (
    FileLocalStorage,
    InMemoryLocalStorage,
    LocalStorage,
    RememberedUserCache,
    SessionStore,
)
from taskdesk_identity.infrastructure.persistence.sqlalchemy import (
    AccountRepositorySQLAlchemy,
    RecordStore,
    RememberTokenRepositorySQLAlchemy,
)
from taskdesk_identity.services import PasswordHashingService

if TYPE_CHECKING:
    from taskdesk_identity.schemas import CachedLogin

logger = logging.getLogger(__name__)


@lru_cache()
def configure_logging(log_level: str = "INFO") -> None:
    """Configure console logging once per process.

    Sets the package log level and quiets noisy third-party loggers.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    logging.getLogger("taskdesk_identity").setLevel(level)
    logging.getLogger("taskdesk_config").setLevel(level)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@dataclass
class IdentityContainer:
    """The record store, local storage and managers of one installation."""

    store: RecordStore
    local_storage: LocalStorage
    accounts: AccountManager
    remember_me: RememberMeManager
    sessions: SessionManager

    async def start(self) -> list[CachedLogin]:
        """Open the record store and drop stale remembered users and tokens.

        Returns the remembered users that survived, for quick-login display.
        """
        await self.store.initialize()
        survivors = await self.remember_me.reconcile_all()
        await self.remember_me.purge_expired()
        return survivors

    async def close(self) -> None:
        await self.store.close()


def build_identity(
    settings: Settings | None = None,
    *,
    local_storage: LocalStorage | None = None,
    **engine_kwargs: Any,
) -> IdentityContainer:
    """
    Build an identity container. Nothing touches the database yet.

    Parameters
    ----------
    settings
        Defaults to the cached ``get_settings()``
    local_storage
        Overrides the storage chosen by ``settings.local_storage_path``
    engine_kwargs
        Passed to ``create_async_engine`` (e.g. ``poolclass`` for tests)
    """
    if settings is None:
        settings = get_settings()

    # Configure logging on first build, not on module import
    configure_logging(settings.log_level)

    store = RecordStore(
        settings.database_url,
        echo=settings.database_echo,
        **engine_kwargs,
    )

    if local_storage is None:
        if settings.local_storage_path is not None:
            local_storage = FileLocalStorage(settings.local_storage_path)
        else:
            local_storage = InMemoryLocalStorage()

    session_store = SessionStore(local_storage)

    accounts = AccountManager(
        AccountRepositorySQLAlchemy(store),
        PasswordHashingService(rounds=settings.bcrypt_rounds),
        max_failed_attempts=settings.max_failed_login_attempts,
        lockout_duration_minutes=settings.lockout_duration_minutes,
    )
    remember_me = RememberMeManager(
        RememberTokenRepositorySQLAlchemy(store),
        RememberedUserCache(local_storage),
        session_store,
        token_expiry_days=settings.remember_token_expire_days,
    )
    sessions = SessionManager(
        accounts,
        remember_me,
        session_store,
        session_max_age_hours=settings.session_max_age_hours,
    )

    logger.debug("Identity container built for %s", settings.app_name)
    return IdentityContainer(
        store=store,
        local_storage=local_storage,
        accounts=accounts,
        remember_me=remember_me,
        sessions=sessions,
    )
