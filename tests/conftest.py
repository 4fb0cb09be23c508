"""Root pytest configuration and shared fixtures.

Test Structure:
    tests/
    ├── unit/           # Fast, isolated tests (mocks, in-memory storage)
    └── integration/    # Tests against a real in-memory SQLite record store

Integration tests are marked ``@pytest.mark.integration``. They need no
external services, so they run by default.
"""

from pathlib import Path

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

from taskdesk_config import clear_settings_cache
from taskdesk_identity.application.services import (
    AccountManager,
    RememberMeManager,
    SessionManager,
)
from taskdesk_identity.infrastructure.local_storage import (
    InMemoryLocalStorage,
    RememberedUserCache,
    SessionStore,
)
from taskdesk_identity.infrastructure.persistence.sqlalchemy import (
    AccountRepositorySQLAlchemy,
    RecordStore,
    RememberTokenRepositorySQLAlchemy,
)
from taskdesk_identity.services import PasswordHashingService

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.test if present (settings overrides for the test run)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.test").exists():
    load_dotenv(CONFIG_DIR / ".env.test")

IN_MEMORY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Ensure every test sees freshly loaded settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest_asyncio.fixture
async def record_store():
    """
    A record store on a private in-memory SQLite database.

    StaticPool keeps the single connection alive, so every session of the
    store sees the same in-memory database.
    """
    store = RecordStore(IN_MEMORY_DATABASE_URL, poolclass=StaticPool)
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def local_storage() -> InMemoryLocalStorage:
    return InMemoryLocalStorage()


@pytest.fixture
def session_store(local_storage) -> SessionStore:
    return SessionStore(local_storage)


@pytest.fixture
def remembered_user_cache(local_storage) -> RememberedUserCache:
    return RememberedUserCache(local_storage)


@pytest.fixture
def password_service() -> PasswordHashingService:
    """Low bcrypt work factor for fast tests."""
    return PasswordHashingService(rounds=4)


@pytest.fixture
def account_repository(record_store) -> AccountRepositorySQLAlchemy:
    return AccountRepositorySQLAlchemy(record_store)


@pytest.fixture
def token_repository(record_store) -> RememberTokenRepositorySQLAlchemy:
    return RememberTokenRepositorySQLAlchemy(record_store)


@pytest.fixture
def account_manager(account_repository, password_service) -> AccountManager:
    return AccountManager(account_repository, password_service)


@pytest.fixture
def remember_me_manager(
    token_repository,
    remembered_user_cache,
    session_store,
) -> RememberMeManager:
    return RememberMeManager(token_repository, remembered_user_cache, session_store)


@pytest.fixture
def session_manager(
    account_manager,
    remember_me_manager,
    session_store,
) -> SessionManager:
    return SessionManager(account_manager, remember_me_manager, session_store)
