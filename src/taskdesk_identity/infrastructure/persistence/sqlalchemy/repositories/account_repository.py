"""Record-store implementation of AccountRepository."""

import logging
from typing import Union

from sqlalchemy.exc import IntegrityError

from taskdesk_identity.domain.account import (
    Account,
    AccountRepository,
    DuplicateAccountError,
    Email,
)
from taskdesk_identity.domain.shared.time import (
    ensure_tz_aware,
    ensure_tz_aware_or_none,
)
from taskdesk_identity.infrastructure.persistence.sqlalchemy.record_store import (
    USERS,
    Record,
    RecordStore,
)

logger = logging.getLogger(__name__)


class AccountRepositorySQLAlchemy(AccountRepository):
    """AccountRepository backed by the ``users`` table of a RecordStore."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def find_by_email(self, email: Union[str, Email]) -> Account | None:
        email_value = email.value if isinstance(email, Email) else Email(email).value

        record = await self._store.get_by_key(USERS, email_value)
        if record is None:
            logger.debug("No account found for %s", email_value)
            return None

        return self._map_to_domain(record)

    async def find_by_id(self, account_id: str) -> Account | None:
        records = await self._store.get_by_index(USERS, "id", account_id)
        if not records:
            return None
        return self._map_to_domain(records[0])

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        account = await self.find_by_email(email)
        return account is not None

    async def add(self, account: Account) -> None:
        if await self.exists_by_email(account.email_obj):
            raise DuplicateAccountError(account.email)

        try:
            await self._store.insert(USERS, self._map_to_record(account))
        except IntegrityError as e:
            # Lost a race with a concurrent add for the same email
            if "UNIQUE constraint failed" in str(e) or "unique" in str(e).lower():
                raise DuplicateAccountError(account.email) from e
            raise
        logger.info("Created account: %s (email: %s)", account.id, account.email)

    async def save(self, account: Account) -> None:
        await self._store.put(USERS, self._map_to_record(account))
        logger.debug("Saved account: %s", account.id)

    async def delete(self, email: Union[str, Email]) -> bool:
        email_value = email.value if isinstance(email, Email) else Email(email).value

        deleted = await self._store.delete_by_key(USERS, email_value)
        if deleted:
            logger.info("Deleted account: %s", email_value)
        return deleted

    async def list_all(self) -> list[Account]:
        records = await self._store.get_all(USERS)
        accounts = [self._map_to_domain(record) for record in records]
        return sorted(accounts, key=lambda account: account.created_at)

    def _map_to_domain(self, record: Record) -> Account:
        return Account.reconstitute(
            id=record["id"],
            name=record["name"],
            email=record["email"],
            password_hash=record["password_hash"],
            created_at=ensure_tz_aware(record["created_at"]),
            failed_login_attempts=record["failed_login_attempts"],
            locked_until=ensure_tz_aware_or_none(record["locked_until"]),
            last_login=ensure_tz_aware_or_none(record["last_login"]),
        )

    def _map_to_record(self, account: Account) -> Record:
        return {
            "email": account.email,
            "id": account.id,
            "name": account.name,
            "password_hash": account.password_hash,
            "created_at": account.created_at,
            "failed_login_attempts": account.failed_login_attempts,
            "locked_until": account.locked_until,
            "last_login": account.last_login,
        }
