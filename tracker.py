"""
Weight entries, the in-memory store that mirrors them to a repository, and the
derived values shown in the UI (recent change, goal progress, trend summary).

Run doctests with:
    RUN_DOCTESTS=1 python tracker.py
"""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Union

import pandas as pd
from dateutil import parser as dateparser

from storage import WeightRepository

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["Date", "Weight", "Notes", "Id"]


class InvalidWeightError(ValueError):
    """Raised when a weight or goal input does not parse as a number."""


# -------------------------------
# Data model
# -------------------------------

def _ensure_date(obj) -> date:
    if isinstance(obj, pd.Timestamp):
        return obj.date()
    if isinstance(obj, datetime):
        return obj.date()
    if isinstance(obj, date):
        return obj
    return dateparser.parse(str(obj)).date()


def _iso_date(obj) -> str:
    return _ensure_date(obj).strftime("%Y-%m-%d")


@dataclass(frozen=True)
class WeightEntry:
    id: int
    date: str
    weight: float
    notes: str = ""

    def to_dict(self) -> Dict[str, object]:
        return {"id": self.id, "date": self.date, "weight": self.weight, "notes": self.notes}

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "WeightEntry":
        """
        Build an entry from a persisted record.

        >>> WeightEntry.from_dict({"id": 1, "date": "2024/01/08", "weight": "78.5"})
        WeightEntry(id=1, date='2024-01-08', weight=78.5, notes='')
        """
        return cls(
            id=int(data["id"]),
            date=_iso_date(data["date"]),
            weight=float(data["weight"]),
            notes=str(data.get("notes") or ""),
        )


@dataclass
class TrendSummary:
    first: WeightEntry
    latest: WeightEntry
    total_change: float
    to_goal: Optional[float] = None


def parse_weight(raw: Union[str, float, int, None]) -> float:
    """
    Parse user input as a weight. Only numeric-ness is checked.

    >>> parse_weight(" 72.4 ")
    72.4
    >>> parse_weight(0)
    0.0
    >>> parse_weight("abc")  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
    ...
    tracker.InvalidWeightError: Not a valid weight: 'abc'
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidWeightError(f"Not a valid weight: {raw!r}")
    text = str(raw).strip()
    if not text:
        raise InvalidWeightError("Weight is required")
    try:
        value = float(text)
    except ValueError:
        raise InvalidWeightError(f"Not a valid weight: {raw!r}") from None
    if not math.isfinite(value):
        raise InvalidWeightError(f"Not a valid weight: {raw!r}")
    return value


# -------------------------------
# Derived values
# -------------------------------

def _sort_key(entry: WeightEntry):
    return (entry.date, entry.id)


def sort_newest_first(entries: Iterable[WeightEntry]) -> List[WeightEntry]:
    # Same-date entries: the later-created one counts as more recent.
    return sorted(entries, key=_sort_key, reverse=True)


def sort_oldest_first(entries: Iterable[WeightEntry]) -> List[WeightEntry]:
    return sorted(entries, key=_sort_key)


def weight_change(entries: Iterable[WeightEntry]) -> float:
    """
    Most recent weight minus the one before it, rounded to one decimal.

    >>> weight_change([WeightEntry(1, "2024-01-01", 80.0), WeightEntry(2, "2024-01-08", 78.0)])
    -2.0
    >>> weight_change([WeightEntry(1, "2024-01-01", 80.0)])
    0.0
    """
    ordered = sort_newest_first(entries)
    if len(ordered) < 2:
        return 0.0
    return round(ordered[0].weight - ordered[1].weight, 1)


def goal_progress(entries: Iterable[WeightEntry], goal: Optional[float]) -> float:
    """
    Percent of the distance from the first weight to the goal that has been
    closed by the latest weight, clamped to [0, 100].

    >>> log = [WeightEntry(1, "2024-01-01", 80.0), WeightEntry(2, "2024-02-01", 75.0)]
    >>> goal_progress(log, 70.0)
    50.0
    >>> goal_progress(log, None)
    0.0
    >>> goal_progress([WeightEntry(1, "2024-01-01", 70.0)], 70.0)
    100.0
    """
    ordered = sort_oldest_first(entries)
    if goal is None or not ordered:
        return 0.0
    initial = ordered[0].weight
    latest = ordered[-1].weight
    if initial == goal:
        return 100.0
    pct = (initial - latest) / (initial - goal) * 100.0
    return round(min(100.0, max(0.0, pct)), 1)


def trend_summary(entries: Iterable[WeightEntry], goal: Optional[float] = None) -> Optional[TrendSummary]:
    ordered = sort_oldest_first(entries)
    if len(ordered) < 2:
        return None
    first, latest = ordered[0], ordered[-1]
    to_goal = round(abs(latest.weight - goal), 1) if goal is not None else None
    return TrendSummary(
        first=first,
        latest=latest,
        total_change=round(latest.weight - first.weight, 1),
        to_goal=to_goal,
    )


def entries_frame(entries: Iterable[WeightEntry]) -> pd.DataFrame:
    """
    Tabular view of the entries, oldest first.

    >>> entries_frame([]).columns.tolist()
    ['Date', 'Weight', 'Notes', 'Id']
    """
    ordered = sort_oldest_first(entries)
    if not ordered:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    df = pd.DataFrame(
        [{"Date": _ensure_date(e.date), "Weight": float(e.weight), "Notes": e.notes, "Id": e.id} for e in ordered],
        columns=FRAME_COLUMNS,
    )
    return df.reset_index(drop=True)


# -------------------------------
# State store
# -------------------------------

def _now_ms() -> int:
    return int(time.time() * 1000)


class WeightTracker:
    """
    In-memory entry list plus goal, persisted through a repository on every
    mutation.
    """

    def __init__(
        self,
        repository: WeightRepository,
        entries: Optional[List[WeightEntry]] = None,
        goal: Optional[float] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self._repository = repository
        self._entries: List[WeightEntry] = list(entries or [])
        self._goal = goal
        self._clock = clock or _now_ms

    @classmethod
    def load(cls, repository: WeightRepository, clock: Optional[Callable[[], int]] = None) -> "WeightTracker":
        entries: List[WeightEntry] = []
        for record in repository.load_entries():
            try:
                entries.append(WeightEntry.from_dict(record))
            except (AttributeError, KeyError, TypeError, ValueError, OverflowError) as e:
                logger.warning("Skipping malformed entry %r: %s", record, e)

        goal = None
        raw_goal = repository.load_goal()
        if raw_goal not in (None, ""):
            try:
                goal = parse_weight(raw_goal)
            except InvalidWeightError:
                logger.warning("Ignoring malformed stored goal %r", raw_goal)

        logger.debug("Loaded %d entries, goal=%s", len(entries), goal)
        return cls(repository, entries=entries, goal=goal, clock=clock)

    @property
    def entries(self) -> List[WeightEntry]:
        return list(self._entries)

    @property
    def goal(self) -> Optional[float]:
        return self._goal

    def __len__(self) -> int:
        return len(self._entries)

    # Mutations

    def _next_id(self) -> int:
        candidate = int(self._clock())
        if self._entries:
            candidate = max(candidate, max(e.id for e in self._entries) + 1)
        return candidate

    def _commit_entries(self, entries: List[WeightEntry]) -> None:
        # Persist first so a failed write leaves the in-memory list untouched.
        self._repository.save_entries([e.to_dict() for e in entries])
        self._entries = entries

    def add_entry(self, entry_date, weight, notes: str = "") -> WeightEntry:
        value = parse_weight(weight)
        entry = WeightEntry(
            id=self._next_id(),
            date=_iso_date(entry_date),
            weight=value,
            notes=(notes or "").strip(),
        )
        self._commit_entries(self._entries + [entry])
        logger.info("Added entry %s: %s kg on %s", entry.id, entry.weight, entry.date)
        return entry

    def delete_entry(self, entry_id: int) -> bool:
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) == len(self._entries):
            logger.warning("No entry with id %s to delete", entry_id)
            return False
        self._commit_entries(remaining)
        logger.info("Deleted entry %s", entry_id)
        return True

    def set_goal(self, raw) -> float:
        value = parse_weight(raw)
        self._repository.save_goal(repr(value))
        self._goal = value
        logger.info("Goal set to %s kg", value)
        return value

    def clear_goal(self) -> None:
        self._repository.save_goal(None)
        self._goal = None
        logger.info("Goal cleared")

    # Views

    def newest_first(self) -> List[WeightEntry]:
        return sort_newest_first(self._entries)

    def oldest_first(self) -> List[WeightEntry]:
        return sort_oldest_first(self._entries)

    def latest(self) -> Optional[WeightEntry]:
        ordered = self.newest_first()
        return ordered[0] if ordered else None

    def first(self) -> Optional[WeightEntry]:
        ordered = self.oldest_first()
        return ordered[0] if ordered else None

    def weight_change(self) -> float:
        return weight_change(self._entries)

    def goal_progress(self) -> float:
        return goal_progress(self._entries, self._goal)

    def trend_summary(self) -> Optional[TrendSummary]:
        return trend_summary(self._entries, self._goal)

    def frame(self) -> pd.DataFrame:
        return entries_frame(self._entries)


def _run_doctests_if_requested():
    import os as _os
    if _os.environ.get("RUN_DOCTESTS", "0") == "1":
        import doctest as _doctest
        _doctest.testmod(verbose=True)


if __name__ == "__main__":
    _run_doctests_if_requested()
