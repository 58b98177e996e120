"""Favorites store backed by a single persisted key-value slot."""

import json
from pathlib import Path
from typing import Protocol

import structlog

from .errors import StorageError

log = structlog.stdlib.get_logger()

FAVORITES_SLOT = "playhub-favorites"


class SlotStorage(Protocol):
    """Named string slots, read once and overwritten wholesale."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class FileSlotStorage:
    """Stores each slot as ``<key>.json`` inside a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory: Path = directory

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {key}", original_error=e, path=str(path)) from e

    def write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write-then-replace so a crash never leaves a truncated slot
            temp_path.write_text(value, encoding="utf-8")
            temp_path.replace(path)
        except OSError as e:
            log.error("Failed to write storage slot", key=key, path=str(path), error=str(e))
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    log.warning("Failed to clean up temporary slot file", path=str(temp_path))
            raise StorageError(f"Cannot save {key}", original_error=e, path=str(path)) from e


class MemorySlotStorage:
    """In-process slot storage."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.slots: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.slots.get(key)

    def write(self, key: str, value: str) -> None:
        self.slots[key] = value


class FavoritesStore:
    """Set of favorited game ids with write-through persistence.

    The store is the only writer of the favorites slot. ``load()`` is called
    once at startup; every ``toggle()`` rewrites the whole list, sorted, so
    the persisted value depends only on set membership.
    """

    def __init__(self, storage: SlotStorage, key: str = FAVORITES_SLOT) -> None:
        self._storage: SlotStorage = storage
        self._key: str = key
        self._ids: set[int] = set()

    def load(self) -> bool:
        """Read the persisted set; unreadable or malformed data is logged and treated as empty.

        Returns:
            False if the saved value could not be used
        """
        self._ids = set()
        try:
            raw = self._storage.read(self._key)
        except StorageError as e:
            log.error(
                "Failed to read saved favorites, starting empty",
                error=e.message,
                details=e.technical_details,
            )
            return False
        if raw is None:
            log.info("No saved favorites found")
            return True

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a list, got {type(data).__name__}")
            ids: set[int] = set()
            for value in data:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValueError(f"invalid game id {value!r}")
                ids.add(value)
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            log.error("Failed to parse saved favorites, starting empty", error=str(e))
            return False

        self._ids = ids

        log.info("Favorites loaded", count=len(self._ids))
        return True

    def toggle(self, game_id: int) -> bool:
        """Add the id if absent, remove it if present, and persist.

        Returns:
            True if the game is a favorite after the toggle
        """
        if game_id in self._ids:
            self._ids.discard(game_id)
            now_favorite = False
        else:
            self._ids.add(game_id)
            now_favorite = True

        try:
            self._persist()
        except StorageError:
            # Keep memory and disk in agreement
            self._ids ^= {game_id}
            raise
        log.info("Favorite toggled", game_id=game_id, favorite=now_favorite, count=len(self._ids))
        return now_favorite

    def is_favorite(self, game_id: int) -> bool:
        return game_id in self._ids

    @property
    def ids(self) -> frozenset[int]:
        return frozenset(self._ids)

    @property
    def count(self) -> int:
        return len(self._ids)

    def _persist(self) -> None:
        self._storage.write(self._key, json.dumps(sorted(self._ids)))
