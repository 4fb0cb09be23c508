"""Current-session and current-token records kept in local storage."""

import logging

from pydantic import ValidationError

from taskdesk_identity.infrastructure.local_storage.local_storage import LocalStorage
from taskdesk_identity.schemas import Session

logger = logging.getLogger(__name__)

CURRENT_SESSION_KEY = "current_session"
CURRENT_TOKEN_KEY = "current_token"


class SessionStore:
    """Persist at most one session and one current-token pointer."""

    def __init__(self, storage: LocalStorage):
        self._storage = storage

    def get_session(self) -> Session | None:
        raw = self._storage.get_item(CURRENT_SESSION_KEY)
        if not raw:
            return None
        try:
            return Session.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable session record: %s", e)
            self._storage.remove_item(CURRENT_SESSION_KEY)
            return None

    def set_session(self, session: Session) -> None:
        self._storage.set_item(
            CURRENT_SESSION_KEY,
            session.model_dump_json(by_alias=True),
        )

    def clear_session(self) -> None:
        self._storage.remove_item(CURRENT_SESSION_KEY)

    def get_current_token(self) -> str | None:
        return self._storage.get_item(CURRENT_TOKEN_KEY)

    def set_current_token(self, token: str) -> None:
        self._storage.set_item(CURRENT_TOKEN_KEY, token)

    def clear_current_token(self) -> None:
        self._storage.remove_item(CURRENT_TOKEN_KEY)
