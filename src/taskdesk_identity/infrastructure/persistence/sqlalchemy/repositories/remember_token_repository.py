"""Record-store implementation of RememberTokenRepository."""

import logging
from datetime import datetime

from taskdesk_identity.domain.shared.time import ensure_tz_aware, utc_now
from taskdesk_identity.infrastructure.persistence.sqlalchemy.record_store import (
    TOKENS,
    Record,
    RecordStore,
)
from taskdesk_identity.repositories import (
    RememberTokenData,
    RememberTokenRepository,
)

logger = logging.getLogger(__name__)


class RememberTokenRepositorySQLAlchemy(RememberTokenRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    async def create(
        self,
        token: str,
        user_id: str,
        expires: datetime,
    ) -> RememberTokenData:
        record = await self._store.put(
            TOKENS,
            {"token": token, "user_id": user_id, "expires": expires},
        )
        logger.info("Issued remember-me token for account %s", user_id)
        return self._to_data(record)

    async def find_by_token(self, token: str) -> RememberTokenData | None:
        record = await self._store.get_by_key(TOKENS, token)
        if record is None:
            return None
        return self._to_data(record)

    async def find_all_for_user(self, user_id: str) -> list[RememberTokenData]:
        records = await self._store.get_by_index(TOKENS, "user_id", user_id)
        return [self._to_data(record) for record in records]

    async def delete(self, token: str) -> bool:
        return await self._store.delete_by_key(TOKENS, token)

    async def delete_all_for_user(self, user_id: str) -> int:
        deleted = await self._store.delete_by_index(TOKENS, "user_id", user_id)
        logger.info("Deleted %d remember-me tokens for account %s", deleted, user_id)
        return deleted

    async def cleanup_expired(self) -> int:
        deleted = await self._store.delete_where_before(TOKENS, "expires", utc_now())
        if deleted:
            logger.info("Cleaned up %d expired remember-me tokens", deleted)
        return deleted

    def _to_data(self, record: Record) -> RememberTokenData:
        return RememberTokenData(
            token=record["token"],
            user_id=record["user_id"],
            expires=ensure_tz_aware(record["expires"]),
        )
