"""Integration tests for building the identity container from settings."""

import logging
from datetime import timedelta

import pytest
from sqlalchemy.pool import StaticPool

from taskdesk_config import Settings
from taskdesk_identity.bootstrap import build_identity, configure_logging
from taskdesk_identity.domain.shared.time import utc_now
from taskdesk_identity.infrastructure.local_storage import (
    FileLocalStorage,
    InMemoryLocalStorage,
)
from taskdesk_identity.infrastructure.persistence.sqlalchemy import TOKENS

TEST_PASSWORD = "Analytical1!"


def _settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite:///:memory:",
        "bcrypt_rounds": 4,
        "max_failed_login_attempts": 2,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.mark.integration
class TestBuildIdentity:
    """Tests for build_identity and the container lifecycle."""

    def test_defaults_to_in_memory_local_storage(self):
        """Without a storage path everything stays in memory."""
        identity = build_identity(_settings(), poolclass=StaticPool)

        assert isinstance(identity.local_storage, InMemoryLocalStorage)
        assert identity.store.is_ready is False

    def test_file_local_storage_from_settings(self, tmp_path):
        """A storage path selects the JSON file backend."""
        path = tmp_path / "local.json"

        identity = build_identity(_settings(local_storage_path=path), poolclass=StaticPool)

        assert isinstance(identity.local_storage, FileLocalStorage)
        assert identity.local_storage.path == path

    @pytest.mark.asyncio
    async def test_settings_flow_into_managers(self):
        """Policy settings reach the managers."""
        identity = build_identity(_settings(), poolclass=StaticPool)
        await identity.start()
        await identity.accounts.create("Ada Lovelace", "ada@example.com", TEST_PASSWORD)

        await identity.sessions.login("ada@example.com", "Wrong_pass1")
        result = await identity.sessions.login("ada@example.com", "Wrong_pass1")
        status = await identity.accounts.is_locked("ada@example.com")

        assert result.success is False
        assert status.locked is True
        await identity.close()

    @pytest.mark.asyncio
    async def test_start_reconciles_remembered_users(self, tmp_path):
        """start drops remembered users whose tokens did not survive."""
        storage = FileLocalStorage(tmp_path / "local.json")
        db_url = f"sqlite+aiosqlite:///{tmp_path}/taskdesk.db"

        first = build_identity(_settings(database_url=db_url), local_storage=storage)
        await first.start()
        await first.sessions.register(
            "Ada Lovelace",
            "ada@example.com",
            TEST_PASSWORD,
            remember_me=True,
        )
        await first.close()

        # Same local storage, fresh database: the grant no longer exists
        second = build_identity(
            _settings(database_url=f"sqlite+aiosqlite:///{tmp_path}/other.db"),
            local_storage=FileLocalStorage(tmp_path / "local.json"),
        )
        survivors = await second.start()

        assert survivors == []
        assert second.remember_me.list_cached() == []
        await second.close()

    @pytest.mark.asyncio
    async def test_start_purges_expired_tokens(self):
        """start deletes expired tokens nothing refers to."""
        identity = build_identity(_settings(), poolclass=StaticPool)
        await identity.store.put(
            TOKENS,
            {"token": "orphan", "user_id": "u-9", "expires": utc_now() - timedelta(days=1)},
        )

        await identity.start()

        assert await identity.store.get_by_key(TOKENS, "orphan") is None
        await identity.close()

    @pytest.mark.asyncio
    async def test_start_keeps_live_grants(self, tmp_path):
        """Remembered users with live tokens survive a restart."""
        db_url = f"sqlite+aiosqlite:///{tmp_path}/taskdesk.db"
        storage_path = tmp_path / "local.json"

        first = build_identity(_settings(database_url=db_url, local_storage_path=storage_path))
        await first.start()
        await first.sessions.register(
            "Ada Lovelace",
            "ada@example.com",
            TEST_PASSWORD,
            remember_me=True,
        )
        await first.close()

        second = build_identity(_settings(database_url=db_url, local_storage_path=storage_path))
        survivors = await second.start()
        result = await second.sessions.login_with_token("ada@example.com")

        assert [s.email for s in survivors] == ["ada@example.com"]
        assert result.success is True
        await second.close()


def test_configure_logging_sets_package_level():
    """configure_logging applies the level to the package loggers."""
    configure_logging.cache_clear()

    configure_logging("DEBUG")

    assert logging.getLogger("taskdesk_identity").level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    configure_logging.cache_clear()


def test_build_identity_applies_log_level_setting():
    """build_identity configures logging from settings.log_level."""
    configure_logging.cache_clear()

    build_identity(_settings(log_level="WARNING"), poolclass=StaticPool)

    assert logging.getLogger("taskdesk_identity").level == logging.WARNING
    assert logging.getLogger("taskdesk_config").level == logging.WARNING
    configure_logging.cache_clear()
