"""
PlannerStore - day-keyed event references that outlive a single run.

The whole mapping is one JSON blob in the key-value table. Every change is
a load-modify-save inside transaction(), serialized on an asyncio lock.
Storage failures are logged and swallowed: the run continues in memory.
"""
import asyncio
import json
import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta, timezone
from typing import AsyncIterator, Callable, Dict, Iterable, List, Optional

import aiosqlite
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.entities import NormalizedItem
from processing.dates import expand_date_keys
from processing.deduplicator import is_duplicate
from services.database import Database

logger = logging.getLogger(__name__)

STORAGE_KEY = "upAhead_planner"
PRUNE_DAYS_PAST = 7

PlannerData = Dict[str, List[dict]]


class PlannerRecord(BaseModel):
    """
    Lightweight reference to an event stored under a day key.
    Persisted with the key addedAt; added_at is accepted on input too.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    category: str
    link: str = ""
    added_at: Optional[datetime] = Field(default=None, alias="addedAt")


def prune(data: PlannerData, today: date) -> PlannerData:
    """Remove day keys more than PRUNE_DAYS_PAST days in the past."""
    cutoff_key = (today - timedelta(days=PRUNE_DAYS_PAST)).isoformat()
    for key in [k for k in data if k < cutoff_key]:
        del data[key]
    return data


class PlannerStore:
    def __init__(
        self,
        database: Database,
        storage_key: str = STORAGE_KEY,
        clock: Callable[[], date] = date.today,
    ):
        self.db = database
        self.storage_key = storage_key
        self.clock = clock
        self._lock = asyncio.Lock()

    async def _load(self) -> PlannerData:
        try:
            raw = await self.db.get_value(self.storage_key)
        except (aiosqlite.Error, OSError) as e:
            logger.warning(f"Planner store unreadable, starting empty: {e}")
            return {}

        if not raw:
            return {}

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Planner store corrupt, starting empty: {e}")
            return {}

        if not isinstance(data, dict):
            return {}
        return {k: list(v) for k, v in data.items() if isinstance(v, list)}

    async def _save(self, data: PlannerData) -> None:
        try:
            await self.db.set_value(self.storage_key, json.dumps(data, sort_keys=True))
        except (aiosqlite.Error, OSError) as e:
            logger.warning(f"Planner store write failed, keeping changes in memory only: {e}")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[PlannerData]:
        """
        Load (pruned), hand out for mutation, save on clean exit if the
        mapping differs from what was stored.

        Nothing is written if the body raises.
        """
        async with self._lock:
            loaded = await self._load()
            snapshot = json.dumps(loaded, sort_keys=True)
            data = prune(loaded, self.clock())
            yield data
            if json.dumps(data, sort_keys=True) != snapshot:
                await self._save(data)

    @staticmethod
    def _records(entries: Iterable[dict]) -> List[PlannerRecord]:
        records = []
        for entry in entries:
            try:
                records.append(PlannerRecord.model_validate(entry))
            except ValidationError:
                logger.debug(f"Skipping malformed planner entry: {entry}")
        return records

    async def get_day(self, date_key: str) -> List[PlannerRecord]:
        data = prune(await self._load(), self.clock())
        return self._records(data.get(date_key, []))

    async def get_all(self) -> Dict[str, List[PlannerRecord]]:
        async with self.transaction() as data:
            return {key: self._records(entries) for key, entries in sorted(data.items())}

    async def merge(self, date_keys: Iterable[str], records: Iterable[PlannerRecord]) -> int:
        """
        Add records under each day key, skipping ones already present by id
        or by a near-identical title.

        Returns:
            Number of entries written
        """
        records = list(records)
        added = 0

        async with self.transaction() as data:
            for key in date_keys:
                day = data.setdefault(key, [])
                for record in records:
                    entry = record.model_dump(mode="json", by_alias=True, exclude={"added_at"})
                    duplicate, reason = is_duplicate(day, entry)
                    if duplicate:
                        logger.debug(f"Planner duplicate on {key}: {record.title} ({reason})")
                        continue
                    entry["addedAt"] = datetime.now(timezone.utc).isoformat()
                    day.append(entry)
                    added += 1
                if not day:
                    del data[key]

        return added

    async def merge_items(self, items: Iterable[NormalizedItem], max_days: int = 14) -> int:
        """Record every item that has an extracted date under each day it spans."""
        added = 0
        for item in items:
            keys = expand_date_keys(item.extracted_date, max_days=max_days)
            if not keys:
                continue
            record = PlannerRecord(
                id=item.id,
                title=item.title,
                category=item.category.value,
                link=item.link,
            )
            added += await self.merge(keys, [record])
        return added

    async def add_item(self, date_key: str, record: PlannerRecord) -> int:
        return await self.merge([date_key], [record])

    async def remove_item(self, date_key: str, item_id: str) -> None:
        async with self.transaction() as data:
            if date_key not in data:
                return
            data[date_key] = [e for e in data[date_key] if e.get("id") != item_id]
            if not data[date_key]:
                del data[date_key]

    async def clear(self) -> None:
        async with self._lock:
            try:
                await self.db.delete_value(self.storage_key)
            except (aiosqlite.Error, OSError) as e:
                logger.warning(f"Planner store clear failed: {e}")

    async def get_upcoming_days(
        self,
        n: int = 14,
        today: Optional[date] = None,
    ) -> List[Dict[str, object]]:
        """Days from today onward (n of them) that hold at least one entry."""
        data = await self.get_all()
        today = today or self.clock()
        upcoming = []

        for offset in range(n):
            key = (today + timedelta(days=offset)).isoformat()
            if data.get(key):
                upcoming.append({"date": key, "items": data[key]})

        return upcoming
