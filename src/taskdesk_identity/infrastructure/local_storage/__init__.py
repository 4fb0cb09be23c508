"""Local storage: the session, current token and remembered-user records."""

from taskdesk_identity.infrastructure.local_storage.local_storage import (
    FileLocalStorage,
    InMemoryLocalStorage,
    LocalStorage,
    StorageEvent,
    StorageListener,
)
from taskdesk_identity.infrastructure.local_storage.remembered_user_cache import (
    REMEMBERED_USERS_KEY,
    RememberedUserCache,
)
from taskdesk_identity.infrastructure.local_storage.session_store import (
    CURRENT_SESSION_KEY,
    CURRENT_TOKEN_KEY,
    SessionStore,
)

__all__ = [
    "CURRENT_SESSION_KEY",
    "CURRENT_TOKEN_KEY",
    "REMEMBERED_USERS_KEY",
    "FileLocalStorage",
    "InMemoryLocalStorage",
    "LocalStorage",
    "RememberedUserCache",
    "SessionStore",
    "StorageEvent",
    "StorageListener",
]
