"""
Business logic for habits, entries and the 30-day progress series.

Each service receives its store at construction time and talks only to
that store; services never call one another.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from .repository import HabitStore
from .schemas import EntryCreate, EntryRead, HabitCreate, HabitRead, ProgressPoint

PROGRESS_WINDOW_DAYS = 30
EARLIEST_AS_OF = date.min + timedelta(days=PROGRESS_WINDOW_DAYS - 1)


class HabitService:
    """Creates and lists habit definitions."""

    def __init__(self, store: HabitStore) -> None:
        self._store = store

    async def list_habits(self) -> List[HabitRead]:
        return await self._store.list_habits()

    async def create_habit(self, habit: HabitCreate) -> HabitRead:
        return await self._store.insert_habit(habit)


class EntryService:
    """Records a habit's completion status for one calendar date."""

    def __init__(self, store: HabitStore) -> None:
        self._store = store

    async def record_entry(self, entry: EntryCreate) -> EntryRead:
        """
        Upsert the entry keyed on (habit_id, date) and return the stored state.

        Neither the habit reference nor the date format is checked: an entry
        for an unknown habit is stored as-is, and a malformed date simply
        never shows up in the progress series.
        """
        return await self._store.upsert_entry(entry)


def percent_of(completed: int, habit_count: int) -> int:
    """Round completed/habit_count to a whole percent, halves rounding up."""
    if habit_count <= 0:
        return 0
    return (200 * completed + habit_count) // (2 * habit_count)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class ProgressAggregator:
    """Derives the daily completion percentage over the last 30 days."""

    def __init__(self, store: HabitStore) -> None:
        self._store = store

    async def compute_progress(self, as_of: Optional[date] = None) -> List[ProgressPoint]:
        """
        Return one point per day from `as_of` minus 29 days up to `as_of`.

        The denominator is the number of habits that exist now, also for
        days before some of them were created, and the result is not capped
        at 100. Entries for all 30 days are fetched in one query; any store
        failure aborts the whole computation.

        Raises ValueError when the window would start before `date.min`.
        """
        as_of = as_of or utc_today()
        if as_of < EARLIEST_AS_OF:
            raise ValueError(f"asOf must be on or after {EARLIEST_AS_OF.isoformat()}")
        days = [
            (as_of - timedelta(days=offset)).isoformat()
            for offset in range(PROGRESS_WINDOW_DAYS - 1, -1, -1)
        ]
        habit_count = await self._store.count_habits()
        entries = await self._store.find_entries(days)
        completed = Counter(entry.date for entry in entries if entry.completed)
        return [
            ProgressPoint(date=day, percent=percent_of(completed[day], habit_count))
            for day in days
        ]
