"""chain_engine.persistence

Local key-value storage for the ledger (the desktop stand-in for a browser's
local storage).

The ledger is stored as one flat JSON record, name -> value, under a single
key. Anything unreadable is logged and treated as "nothing stored".
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from chain_core.ledger import Ledger

logger = logging.getLogger(__name__)

DEFAULT_KEY = "units"


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """In-process store, used by the headless runner and tests."""

    def __init__(self, items: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStore:
    """Key-value store kept as one JSON object on disk.

    Writes go to a temp file in the same directory and replace the target, so
    a crash mid-write leaves the previous save intact.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("could not read %s: %s", self.path, e)
            return {}
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning("corrupt store file %s ignored: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("store file %s is not a JSON object, ignored", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = str(value)
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)


def parse_record(raw: Optional[str]) -> Optional[Any]:
    """json.loads that logs and returns None instead of raising."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning("unparsable stored state ignored: %s (%r)", e, raw[:200])
        return None


def load_ledger(ledger: Ledger, store: KeyValueStore, key: str = DEFAULT_KEY) -> bool:
    """Restore ledger values from the store. Returns True if any unit was restored."""
    data = parse_record(store.get_item(key))
    if data is None:
        return False
    return ledger.restore(data) > 0


def save_ledger(ledger: Ledger, store: KeyValueStore, key: str = DEFAULT_KEY) -> None:
    store.set_item(key, json.dumps(ledger.serialize()))
