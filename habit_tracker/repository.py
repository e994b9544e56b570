"""
Stores abstract the persistence layer from the application logic.

This module defines the store interface used by the services together
with concrete implementations for in-memory storage (used for testing)
and MongoDB (used in production). A store handle is constructed once and
handed to each service, so the storage backend can be swapped without
changing the API logic.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Sequence, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from .errors import StoreUnavailable
from .schemas import EntryCreate, EntryRead, HabitCreate, HabitRead

logger = logging.getLogger(__name__)


class HabitStore:
    """Interface for habit and entry persistence backends."""

    async def insert_habit(self, habit: HabitCreate) -> HabitRead:
        raise NotImplementedError

    async def list_habits(self) -> List[HabitRead]:
        raise NotImplementedError

    async def count_habits(self) -> int:
        raise NotImplementedError

    async def upsert_entry(self, entry: EntryCreate) -> EntryRead:
        raise NotImplementedError

    async def find_entries(self, dates: Sequence[str]) -> List[EntryRead]:
        """Return every entry whose date string equals one of `dates`."""
        raise NotImplementedError

    async def ping(self) -> None:
        """Raise StoreUnavailable if the backend cannot be reached."""

    def close(self) -> None:
        pass


class InMemoryStore(HabitStore):
    """Simple in-memory store for tests and local development.

    Habits are kept in a dictionary keyed by their generated ID, in
    insertion order. Entries are keyed by the (habit_id, date) pair, which
    gives upsert semantics for free.
    """

    def __init__(self) -> None:
        self._habits: Dict[str, HabitRead] = {}
        self._entries: Dict[Tuple[str, str], EntryRead] = {}
        self._id_counter = 0

    async def insert_habit(self, habit: HabitCreate) -> HabitRead:
        self._id_counter += 1
        habit_id = str(self._id_counter)
        habit_read = HabitRead(id=habit_id, title=habit.title, target=habit.target)
        self._habits[habit_id] = habit_read
        return habit_read

    async def list_habits(self) -> List[HabitRead]:
        return list(self._habits.values())

    async def count_habits(self) -> int:
        return len(self._habits)

    async def upsert_entry(self, entry: EntryCreate) -> EntryRead:
        entry_read = EntryRead(
            habit_id=entry.habit_id, date=entry.date, completed=entry.completed
        )
        self._entries[(entry.habit_id, entry.date)] = entry_read
        return entry_read

    async def find_entries(self, dates: Sequence[str]) -> List[EntryRead]:
        wanted = set(dates)
        return [entry for entry in self._entries.values() if entry.date in wanted]


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        raise StoreUnavailable(f"{operation} failed: {exc}") from exc


def _habit_ref(habit_id: str):
    # Habit ids issued by this store are ObjectIds; anything else is kept verbatim.
    return ObjectId(habit_id) if ObjectId.is_valid(habit_id) else habit_id


class MongoStore(HabitStore):
    """MongoDB-backed store for production use.

    This implementation uses Motor, an asynchronous MongoDB driver. The
    store expects a database with two collections: `habits` and
    `entries`. Habit documents hold a title and a target. Entry documents
    reference a habit via `habitId`, store the date as a `YYYY-MM-DD`
    string and a `completed` flag. There is no unique index on
    (habitId, date); uniqueness comes from upserting on that pair.
    """

    def __init__(self, mongo_uri: str, db_name: str = "habit_tracker") -> None:
        self._client = AsyncIOMotorClient(mongo_uri)
        self._db = self._client[db_name]
        self._habits = self._db["habits"]
        self._entries = self._db["entries"]

    async def ping(self) -> None:
        with _store_errors("ping"):
            await self._client.admin.command("ping")

    def close(self) -> None:
        self._client.close()

    async def insert_habit(self, habit: HabitCreate) -> HabitRead:
        doc = {"title": habit.title, "target": habit.target}
        with _store_errors("insert habit"):
            result = await self._habits.insert_one(doc)
        habit_id = str(result.inserted_id)
        logger.info("Created habit %s", habit_id)
        return HabitRead(id=habit_id, title=habit.title, target=habit.target)

    async def list_habits(self) -> List[HabitRead]:
        habits: List[HabitRead] = []
        with _store_errors("list habits"):
            async for doc in self._habits.find({}):
                habits.append(
                    HabitRead(
                        id=str(doc["_id"]),
                        title=doc.get("title"),
                        target=doc.get("target", 1),
                    )
                )
        return habits

    async def count_habits(self) -> int:
        with _store_errors("count habits"):
            return await self._habits.count_documents({})

    async def upsert_entry(self, entry: EntryCreate) -> EntryRead:
        with _store_errors("upsert entry"):
            doc = await self._entries.find_one_and_update(
                {"habitId": _habit_ref(entry.habit_id), "date": entry.date},
                {"$set": {"completed": entry.completed}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        logger.debug("Upserted entry %s on %s", entry.habit_id, entry.date)
        return EntryRead(
            habit_id=str(doc["habitId"]),
            date=doc["date"],
            completed=doc.get("completed", False),
        )

    async def find_entries(self, dates: Sequence[str]) -> List[EntryRead]:
        results: List[EntryRead] = []
        with _store_errors("find entries"):
            async for doc in self._entries.find({"date": {"$in": list(dates)}}):
                results.append(
                    EntryRead(
                        habit_id=str(doc.get("habitId")),
                        date=doc["date"],
                        completed=bool(doc.get("completed", False)),
                    )
                )
        return results
