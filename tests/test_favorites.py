"""Tests for the favorites store and slot storage."""

import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from hypothesis import given, settings, strategies as st

from src.services.errors import StorageError
from src.services.favorites import (
    FAVORITES_SLOT,
    FavoritesStore,
    FileSlotStorage,
    MemorySlotStorage,
)


game_ids = st.integers(min_value=1, max_value=10_000_000)


class TestToggle:
    """Tests for toggling favorites."""

    def test_toggle_adds_then_removes(self) -> None:
        storage = MemorySlotStorage()
        store = FavoritesStore(storage)
        store.load()

        assert store.toggle(3498) is True
        assert store.is_favorite(3498)
        assert json.loads(storage.slots[FAVORITES_SLOT]) == [3498]

        assert store.toggle(3498) is False
        assert not store.is_favorite(3498)
        assert json.loads(storage.slots[FAVORITES_SLOT]) == []

    def test_every_toggle_persists_full_list(self) -> None:
        storage = MemorySlotStorage()
        store = FavoritesStore(storage)
        store.load()

        for game_id in (30, 10, 20):
            _ = store.toggle(game_id)

        assert json.loads(storage.slots[FAVORITES_SLOT]) == [10, 20, 30]
        assert store.count == 3
        assert store.ids == frozenset({10, 20, 30})

    @given(st.lists(game_ids, max_size=20), game_ids)
    @settings(max_examples=100)
    def test_double_toggle_restores_persisted_value(self, initial: list[int], game_id: int) -> None:
        """Toggling the same id twice leaves membership and the stored value unchanged.

        A value already in the written form (sorted, unique ids) comes back
        byte-identical; any other value is rewritten in that form by the
        first toggle.
        """
        original = json.dumps(sorted(set(initial)))
        storage = MemorySlotStorage({FAVORITES_SLOT: original})
        store = FavoritesStore(storage)
        store.load()

        _ = store.toggle(game_id)
        _ = store.toggle(game_id)

        assert store.ids == frozenset(initial)
        assert storage.slots[FAVORITES_SLOT] == original

    def test_first_write_normalizes_stored_value(self) -> None:
        storage = MemorySlotStorage({FAVORITES_SLOT: "[3, 1, 3]"})
        store = FavoritesStore(storage)
        store.load()

        _ = store.toggle(2)
        _ = store.toggle(2)

        assert storage.slots[FAVORITES_SLOT] == "[1, 3]"

    @given(st.lists(game_ids, max_size=30))
    @settings(max_examples=100)
    def test_reload_sees_persisted_set(self, toggles: list[int]) -> None:
        storage = MemorySlotStorage()
        store = FavoritesStore(storage)
        store.load()
        for game_id in toggles:
            _ = store.toggle(game_id)

        reloaded = FavoritesStore(storage)
        reloaded.load()

        assert reloaded.ids == store.ids

    def test_failed_write_rolls_back(self) -> None:
        storage = MemorySlotStorage()
        store = FavoritesStore(storage)
        store.load()
        _ = store.toggle(1)

        with patch.object(storage, "write", side_effect=StorageError("disk full")):
            with pytest.raises(StorageError):
                _ = store.toggle(2)

        assert store.ids == frozenset({1})
        assert json.loads(storage.slots[FAVORITES_SLOT]) == [1]


class TestLoad:
    """Tests for reading persisted favorites."""

    def test_missing_slot_is_empty(self) -> None:
        store = FavoritesStore(MemorySlotStorage())
        store.load()
        assert store.count == 0

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            '{"ids": [1, 2]}',
            '"3498"',
            '[1, "two", 3]',
            "[1.5]",
            "[true]",
        ],
    )
    def test_malformed_value_is_treated_as_empty(self, raw: str) -> None:
        storage = MemorySlotStorage({FAVORITES_SLOT: raw})
        store = FavoritesStore(storage)

        with patch("src.services.favorites.log") as mock_logger:
            store.load()

        assert store.count == 0
        mock_logger.error.assert_called_once()

    def test_loads_valid_list(self) -> None:
        store = FavoritesStore(MemorySlotStorage({FAVORITES_SLOT: "[3, 1, 2]"}))
        store.load()
        assert store.ids == frozenset({1, 2, 3})

    def test_unreadable_slot_is_treated_as_empty(self) -> None:
        storage = MemorySlotStorage({FAVORITES_SLOT: "[1]"})
        store = FavoritesStore(storage)

        with patch.object(storage, "read", side_effect=StorageError("Cannot read favorites")):
            assert store.load() is False

        assert store.count == 0

    def test_valid_load_reports_success(self) -> None:
        assert FavoritesStore(MemorySlotStorage()).load() is True
        assert FavoritesStore(MemorySlotStorage({FAVORITES_SLOT: "[1]"})).load() is True

    def test_load_is_repeatable(self) -> None:
        storage = MemorySlotStorage({FAVORITES_SLOT: "[5]"})
        store = FavoritesStore(storage)
        store.load()
        store.load()
        assert store.ids == frozenset({5})


class TestFileSlotStorage:
    """Tests for the on-disk slot storage."""

    def test_write_then_read(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = FileSlotStorage(Path(temp_dir) / "nested")

            storage.write(FAVORITES_SLOT, "[1, 2]")

            assert storage.read(FAVORITES_SLOT) == "[1, 2]"
            assert storage.path_for(FAVORITES_SLOT).name == f"{FAVORITES_SLOT}.json"
            assert not list(Path(temp_dir, "nested").glob("*.tmp"))

    def test_missing_slot_reads_none(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            assert FileSlotStorage(Path(temp_dir)).read("absent") is None

    def test_write_failure_raises_storage_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = FileSlotStorage(Path(temp_dir))

            with patch.object(Path, "write_text", side_effect=PermissionError("Permission denied")):
                with pytest.raises(StorageError) as exc_info:
                    storage.write(FAVORITES_SLOT, "[]")

            assert exc_info.value.path == str(storage.path_for(FAVORITES_SLOT))

    def test_store_round_trip_through_files(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = FavoritesStore(FileSlotStorage(Path(temp_dir)))
            store.load()
            _ = store.toggle(42)
            _ = store.toggle(7)

            reloaded = FavoritesStore(FileSlotStorage(Path(temp_dir)))
            reloaded.load()

            assert reloaded.ids == frozenset({7, 42})

    def test_undecodable_file_is_treated_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = FileSlotStorage(Path(temp_dir))
            _ = storage.path_for(FAVORITES_SLOT).write_bytes(b"[1, 2\xff\xfe]")
            store = FavoritesStore(storage)

            assert store.load() is False
            assert store.count == 0

            # The slot stays writable after a bad read
            _ = store.toggle(5)
            assert json.loads(storage.path_for(FAVORITES_SLOT).read_text()) == [5]

    def test_undecodable_file_raises_storage_error_on_read(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = FileSlotStorage(Path(temp_dir))
            _ = storage.path_for(FAVORITES_SLOT).write_bytes(b"\xff\xfe")

            with pytest.raises(StorageError) as exc_info:
                _ = storage.read(FAVORITES_SLOT)

            assert isinstance(exc_info.value.original_error, UnicodeDecodeError)
