# scenarios.py
"""
Named scenario persistence.

The whole scenario list lives as one JSON array under a single key. Every
mutation reads the full list, changes it and writes it back in one piece.
Two writers sharing the same backend can overwrite each other's last change;
there is no locking.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from constants import STORAGE_KEY, STORE_DIR
from errors import NotFoundError, StorageCorruptError, ValidationError
from models import CodeKind, InputMode, Scenario

logger = logging.getLogger(__name__)


# ---------- Key-value backends ----------
class MemoryBackend:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileBackend:
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: Path = STORE_DIR):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except UnicodeDecodeError as exc:
            raise StorageCorruptError(f"{path.name} is not UTF-8 text: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, self._path(key))
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise


# ---------- Store ----------
def decode_entries(raw: Optional[str]) -> List:
    """Parse the stored blob into its raw JSON entries."""
    if raw is None or not raw.strip():
        return []
    try:
        items = json.loads(raw)
    except ValueError as exc:
        raise StorageCorruptError(f"Scenario blob is not valid JSON: {exc}") from exc
    if not isinstance(items, list):
        raise StorageCorruptError("Scenario blob is not a JSON array.")
    return items


def decode_scenarios(entries: List) -> List[Tuple[int, Scenario]]:
    """Readable scenarios with their position in ``entries``; malformed entries are skipped."""
    out = []
    for pos, item in enumerate(entries):
        try:
            out.append((pos, Scenario.from_dict(item)))
        except StorageCorruptError as exc:
            logger.warning("Skipping scenario entry %d: %s", pos, exc)
    return out


def encode_entries(entries: List) -> str:
    return json.dumps(entries, ensure_ascii=False)


class ScenarioStore:
    """
    Ordered scenario list over a key-value backend.

    Indices count readable scenarios only. Entries this version cannot read
    are left in the blob untouched and written back on every mutation.
    """

    def __init__(self, backend=None, key: str = STORAGE_KEY):
        self.backend = backend if backend is not None else JsonFileBackend()
        self.key = key

    def _entries(self) -> List:
        try:
            return decode_entries(self.backend.get(self.key))
        except StorageCorruptError as exc:
            logger.warning("Ignoring corrupt scenario storage under %r: %s", self.key, exc)
            return []
        except OSError as exc:
            logger.warning("Could not read scenario storage under %r: %s", self.key, exc)
            return []

    def _write(self, entries: List) -> None:
        self.backend.set(self.key, encode_entries(entries))

    def list(self) -> List[Scenario]:
        """All scenarios in saved order; an unreadable blob reads as empty."""
        return [s for _pos, s in decode_scenarios(self._entries())]

    def save(self, scenario: Scenario) -> int:
        """Append ``scenario`` and return its position."""
        if not scenario.name or not scenario.name.strip():
            raise ValidationError("Enter case name")
        entries = self._entries()
        index = len(decode_scenarios(entries))
        entries.append(scenario.to_dict())
        self._write(entries)
        logger.info("Saved scenario %r at index %d", scenario.name, index)
        return index

    def load_at(self, index: int) -> Scenario:
        scenarios = self.list()
        _check_index(index, len(scenarios))
        return scenarios[index]

    def delete_at(self, index: int) -> Scenario:
        entries = self._entries()
        readable = decode_scenarios(entries)
        _check_index(index, len(readable))
        pos, removed = readable[index]
        del entries[pos]
        self._write(entries)
        logger.info("Deleted scenario %r from index %d", removed.name, index)
        return removed


def _check_index(index: int, size: int) -> None:
    if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < size:
        raise NotFoundError(f"No saved case at position {index!r} (have {size}).")


def new_scenario(name: str, code: CodeKind, mode: InputMode, raw_inputs: Mapping[str, str]) -> Scenario:
    return Scenario(
        name=name.strip(),
        active_code=code,
        mode=mode,
        raw_inputs={k: "" if v is None else str(v) for k, v in raw_inputs.items()},
    )
