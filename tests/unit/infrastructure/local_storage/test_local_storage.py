"""Unit tests for the local storage backends."""

import json

import pytest

from taskdesk_identity.infrastructure.local_storage import (
    FileLocalStorage,
    InMemoryLocalStorage,
    StorageEvent,
)


@pytest.fixture(params=["memory", "file"])
def storage(request, tmp_path):
    """Run each test against both backends."""
    if request.param == "memory":
        return InMemoryLocalStorage()
    return FileLocalStorage(tmp_path / "storage.json")


class TestLocalStorage:
    """Behaviour shared by every backend."""

    def test_missing_key_returns_none(self, storage):
        """Absent keys read as None."""
        assert storage.get_item("current_token") is None

    def test_set_and_get(self, storage):
        """Values round-trip as strings."""
        storage.set_item("current_token", "abc")

        assert storage.get_item("current_token") == "abc"
        assert storage.keys() == ["current_token"]

    def test_remove_item(self, storage):
        """remove_item deletes the key; removing again is a no-op."""
        storage.set_item("current_token", "abc")

        storage.remove_item("current_token")
        storage.remove_item("current_token")

        assert storage.get_item("current_token") is None

    def test_clear(self, storage):
        """clear empties the storage."""
        storage.set_item("a", "1")
        storage.set_item("b", "2")

        storage.clear()

        assert storage.keys() == []

    def test_listeners_receive_events(self, storage):
        """Every write is broadcast with old and new values."""
        events: list[StorageEvent] = []
        storage.subscribe(events.append)

        storage.set_item("current_token", "abc")
        storage.set_item("current_token", "def")
        storage.remove_item("current_token")

        assert events == [
            StorageEvent("current_token", None, "abc"),
            StorageEvent("current_token", "abc", "def"),
            StorageEvent("current_token", "def", None),
        ]

    def test_unsubscribe(self, storage):
        """An unsubscribed listener hears nothing further."""
        events: list[StorageEvent] = []
        unsubscribe = storage.subscribe(events.append)

        unsubscribe()
        storage.set_item("current_token", "abc")

        assert events == []

    def test_failing_listener_does_not_undo_write(self, storage):
        """A listener raising does not affect the write or other listeners."""
        events: list[StorageEvent] = []

        def broken(event):
            raise RuntimeError("boom")

        storage.subscribe(broken)
        storage.subscribe(events.append)

        storage.set_item("current_token", "abc")

        assert storage.get_item("current_token") == "abc"
        assert len(events) == 1


class TestFileLocalStorage:
    """Tests specific to the JSON file backend."""

    def test_persists_across_instances(self, tmp_path):
        """A second instance on the same file sees earlier writes."""
        path = tmp_path / "nested" / "storage.json"
        FileLocalStorage(path).set_item("current_token", "abc")

        assert FileLocalStorage(path).get_item("current_token") == "abc"
        assert json.loads(path.read_text()) == {"current_token": "abc"}

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        """An unreadable file is treated as empty storage."""
        path = tmp_path / "storage.json"
        path.write_text("{not json")

        storage = FileLocalStorage(path)

        assert storage.get_item("current_token") is None
        storage.set_item("current_token", "abc")
        assert storage.get_item("current_token") == "abc"
