"""
Persistence for the weight log.

The app keeps two keys, the way a browser's local storage would:
- "weightEntries": list of entry records {id, date, weight, notes}
- "goalWeight": target weight as a decimal string

Callers get a WeightRepository injected so tests can swap the JSON file for
an in-memory store.
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

ENTRIES_KEY = "weightEntries"
GOAL_KEY = "goalWeight"


class WeightRepository(ABC):
    @abstractmethod
    def load_entries(self) -> List[Dict[str, object]]:
        ...

    @abstractmethod
    def save_entries(self, records: List[Dict[str, object]]) -> None:
        ...

    @abstractmethod
    def load_goal(self) -> Optional[str]:
        ...

    @abstractmethod
    def save_goal(self, value: Optional[str]) -> None:
        ...

    def save_all(self, records: List[Dict[str, object]], goal: Optional[str]) -> None:
        """Replace the whole log and goal."""
        self.save_entries(records)
        self.save_goal(goal)


class InMemoryRepository(WeightRepository):
    def __init__(self, entries: Optional[List[Dict[str, object]]] = None, goal: Optional[str] = None):
        self.store: Dict[str, object] = {ENTRIES_KEY: list(entries or [])}
        if goal is not None:
            self.store[GOAL_KEY] = goal

    def load_entries(self) -> List[Dict[str, object]]:
        return [dict(r) for r in self.store.get(ENTRIES_KEY, [])]

    def save_entries(self, records: List[Dict[str, object]]) -> None:
        self.store[ENTRIES_KEY] = [dict(r) for r in records]

    def load_goal(self) -> Optional[str]:
        return self.store.get(GOAL_KEY)

    def save_goal(self, value: Optional[str]) -> None:
        if value is None:
            self.store.pop(GOAL_KEY, None)
        else:
            self.store[GOAL_KEY] = value


class JsonFileRepository(WeightRepository):
    """
    Key-value JSON document on local disk. Every save rewrites the whole file
    atomically and stamps "saved_at".

    A file that cannot be read is treated as empty, but it is copied aside to
    "<path>.corrupt-<timestamp>" before the first save replaces it.
    """

    def __init__(self, path: str):
        self.path = path
        self._unreadable = False

    def _read(self) -> Dict[str, object]:
        self._unreadable = False
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                obj = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, starting empty: %s", self.path, e)
            self._unreadable = True
            return {}
        if not isinstance(obj, dict):
            logger.warning("Unexpected data in %s (%s), starting empty", self.path, type(obj).__name__)
            self._unreadable = True
            return {}
        if not isinstance(obj.get(ENTRIES_KEY, []), list):
            logger.warning("Ignoring non-list %r in %s", ENTRIES_KEY, self.path)
            self._unreadable = True
            obj = dict(obj)
            obj[ENTRIES_KEY] = []
        return obj

    def _backup_unreadable(self) -> None:
        if not self._unreadable or not os.path.exists(self.path):
            return
        backup = f"{self.path}.corrupt-{datetime.now():%Y%m%d-%H%M%S-%f}"
        shutil.copy2(self.path, backup)
        logger.warning("Kept unreadable %s as %s", self.path, backup)
        self._unreadable = False

    def _write(self, obj: Dict[str, object]) -> None:
        parent = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(parent, exist_ok=True)
        self._backup_unreadable()
        obj["saved_at"] = datetime.now().isoformat()
        fd, tmp_path = tempfile.mkstemp(dir=parent, prefix=".weights-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(obj, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.debug("Saved %s", self.path)

    def load_entries(self) -> List[Dict[str, object]]:
        return self._read().get(ENTRIES_KEY, [])

    def save_entries(self, records: List[Dict[str, object]]) -> None:
        obj = self._read()
        obj[ENTRIES_KEY] = list(records)
        self._write(obj)

    def load_goal(self) -> Optional[str]:
        value = self._read().get(GOAL_KEY)
        if value is None:
            return None
        return str(value)

    def save_goal(self, value: Optional[str]) -> None:
        obj = self._read()
        if value is None:
            obj.pop(GOAL_KEY, None)
        else:
            obj[GOAL_KEY] = str(value)
        self._write(obj)

    def save_all(self, records: List[Dict[str, object]], goal: Optional[str]) -> None:
        obj = self._read()
        obj[ENTRIES_KEY] = list(records)
        if goal is None:
            obj.pop(GOAL_KEY, None)
        else:
            obj[GOAL_KEY] = str(goal)
        self._write(obj)
