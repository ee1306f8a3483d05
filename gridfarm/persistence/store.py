"""Save slots over a pluggable byte store.

The session only knows how to turn itself into a snapshot and back.
``SaveStore`` backends decide where bytes live; ``SaveSlots`` maps slot
numbers to keys, encodes snapshots as JSON, and turns backend failures
into a plain ``False`` so the shell can show a notice.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from gridfarm.errors import PersistenceUnavailable, SnapshotError

if TYPE_CHECKING:
    from gridfarm.simulation.session import Session

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class SaveStore(Protocol):
    """Minimal key/value byte storage."""

    def put(self, key: str, data: bytes) -> None: ...

    def get(self, key: str) -> bytes | None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemorySaveStore:
    """In-process store, used by tests and as a fallback backend."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def put(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class DirectorySaveStore:
    """One file per key under a root directory.

    Attributes:
        root: Directory holding the save files.
    """

    suffix = ".json"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser()

    def _path(self, key: str) -> Path:
        return self.root / (_SAFE_KEY.sub("_", key) + self.suffix)

    def put(self, key: str, data: bytes) -> None:
        """Write ``data`` atomically under ``key``.

        Raises:
            PersistenceUnavailable: If the directory or file cannot be written.
        """
        path = self._path(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            tmp.replace(path)
        except OSError as exc:
            msg = f"cannot write {path}: {exc}"
            raise PersistenceUnavailable(msg) from exc

    def get(self, key: str) -> bytes | None:
        """Read the bytes stored under ``key``, or None if absent.

        Raises:
            PersistenceUnavailable: If the file exists but cannot be read.
        """
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            msg = f"cannot read {path}: {exc}"
            raise PersistenceUnavailable(msg) from exc

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            msg = f"cannot delete {key!r}: {exc}"
            raise PersistenceUnavailable(msg) from exc

    def keys(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.stem for p in self.root.glob(f"*{self.suffix}"))


class SaveSlots:
    """Numbered save slots plus an autosave slot on top of a SaveStore.

    Attributes:
        store: Backend holding the encoded snapshots.
        prefix: Namespace prepended to every key.
    """

    AUTOSAVE = "autosave"

    def __init__(self, store: SaveStore, prefix: str = "gridfarm") -> None:
        self.store = store
        self.prefix = prefix

    def key_for(self, slot: int | str) -> str:
        """Return the storage key for a slot number or name."""
        name = slot if isinstance(slot, str) else f"slot{slot}"
        return f"{self.prefix}_{name}"

    def save(self, session: Session, slot: int | str) -> bool:
        """Write the session to a slot.

        Returns:
            True on success, False if the backend failed.
        """
        data = json.dumps(session.serialize(), separators=(",", ":")).encode()
        try:
            self.store.put(self.key_for(slot), data)
        except PersistenceUnavailable as exc:
            logger.warning("save to slot %s failed: %s", slot, exc)
            return False
        logger.info("saved turn %d to slot %s", session.turn, slot)
        return True

    def load(self, session: Session, slot: int | str) -> bool:
        """Replace the session state with a slot's snapshot.

        Returns:
            True on success, False if the slot is empty, unreadable or
            holds an incompatible snapshot.  The session is unchanged
            on failure.
        """
        try:
            data = self.store.get(self.key_for(slot))
        except PersistenceUnavailable as exc:
            logger.warning("load from slot %s failed: %s", slot, exc)
            return False
        if data is None:
            logger.info("slot %s is empty", slot)
            return False
        try:
            session.deserialize(json.loads(data))
        except (json.JSONDecodeError, UnicodeDecodeError, SnapshotError) as exc:
            logger.warning("slot %s holds an unusable snapshot: %s", slot, exc)
            return False
        logger.info("loaded turn %d from slot %s", session.turn, slot)
        return True

    def autosave(self, session: Session) -> bool:
        """Write the session to the autosave slot."""
        return self.save(session, self.AUTOSAVE)

    def load_autosave(self, session: Session) -> bool:
        """Restore the session from the autosave slot."""
        return self.load(session, self.AUTOSAVE)

    def delete(self, slot: int | str) -> bool:
        """Remove a slot; returns False if the backend failed."""
        try:
            self.store.delete(self.key_for(slot))
        except PersistenceUnavailable as exc:
            logger.warning("delete of slot %s failed: %s", slot, exc)
            return False
        return True

    def occupied_slots(self) -> list[str]:
        """Names of slots that currently hold data."""
        head = f"{self.prefix}_"
        return [k[len(head) :] for k in self.store.keys() if k.startswith(head)]
