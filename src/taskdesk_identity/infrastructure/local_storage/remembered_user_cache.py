"""Remembered-user list kept in local storage.

A denormalized copy of remember-me grants for fast "quick login"
rendering. The list holds at most one entry per normalized email; it is
not authoritative and may reference tokens that no longer exist.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from taskdesk_identity.domain.account.value_objects import normalize_email
from taskdesk_identity.infrastructure.local_storage.local_storage import LocalStorage
from taskdesk_identity.schemas import RememberedUser

logger = logging.getLogger(__name__)

REMEMBERED_USERS_KEY = "remembered_users"

_entries_adapter = TypeAdapter(list[RememberedUser])


class RememberedUserCache:
    """Read and write the ``remembered_users`` list."""

    def __init__(self, storage: LocalStorage):
        self._storage = storage

    def load(self) -> list[RememberedUser]:
        raw = self._storage.get_item(REMEMBERED_USERS_KEY)
        if not raw:
            return []
        try:
            return _entries_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable remembered users list: %s", e)
            return []

    def replace_all(self, entries: list[RememberedUser]) -> None:
        payload = _entries_adapter.dump_json(entries, by_alias=True)
        self._storage.set_item(REMEMBERED_USERS_KEY, payload.decode("utf-8"))

    def find_by_email(self, email: str) -> RememberedUser | None:
        wanted = normalize_email(email)
        for entry in self.load():
            if normalize_email(entry.email) == wanted:
                return entry
        return None

    def find_by_token(self, token: str) -> RememberedUser | None:
        for entry in self.load():
            if entry.token == token:
                return entry
        return None

    def upsert(self, entry: RememberedUser) -> RememberedUser | None:
        """Insert or replace the entry for ``entry.email``.

        Returns the entry that was replaced, if any. Replacement keeps the
        entry's position in the list.
        """
        entries = self.load()
        wanted = normalize_email(entry.email)

        for index, existing in enumerate(entries):
            if normalize_email(existing.email) == wanted:
                entries[index] = entry
                self.replace_all(entries)
                return existing

        entries.append(entry)
        self.replace_all(entries)
        return None

    def remove(self, email: str) -> RememberedUser | None:
        """Drop the entry for ``email``. Returns the removed entry, if any."""
        entries = self.load()
        wanted = normalize_email(email)

        kept = [e for e in entries if normalize_email(e.email) != wanted]
        if len(kept) == len(entries):
            return None

        removed = next(e for e in entries if normalize_email(e.email) == wanted)
        self.replace_all(kept)
        return removed
