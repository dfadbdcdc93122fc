"""
In-memory access layer for houses and officers.

Each store owns its own list of records, seeded once from a JSON document,
and a TTLCache that remembers snapshots for a short window:

    "all-houses"      → every house             (fetch_all)
    "house-{id}"      → one house               (fetch_by_id)
    "all-officers"    → every officer
    "officer-{id}"    → one officer

Any house write drops every house key, not just the one id; the collection is
small enough that recomputing is cheaper than tracking dependencies.

Edits are never written back to disk.  Restarting the process reverts to the
seed file.

Usage::

    store = HouseStore.from_json(Path("data/beneficiaries.json"))
    houses = store.fetch_all()
    store.update(3, {"progress": 60})
"""

from __future__ import annotations

import itertools
import json
import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from housing.errors import DataLoadError
from housing.models import House, HouseUpdate, Officer
from utils.cache import TTLCache

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 60.0

ALL_HOUSES_KEY = "all-houses"
HOUSE_KEY_PREFIX = "house-"
ALL_OFFICERS_KEY = "all-officers"
OFFICER_KEY_PREFIX = "officer-"

RecordT = TypeVar("RecordT", bound=BaseModel)


def load_records(path: Path, collection_key: str) -> list[dict[str, Any]]:
    """Read ``{collection_key: [...]}`` from a JSON file.

    A bare top-level list is accepted as well.

    Raises:
        DataLoadError: If the file is missing, unreadable, not JSON, or does
            not hold a list under *collection_key*.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise DataLoadError(path, str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise DataLoadError(path, f"invalid JSON: {exc}") from exc

    records = data.get(collection_key) if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise DataLoadError(path, f"expected a list under '{collection_key}'")
    return records


def _deep_merge(base: dict[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Return *base* updated with *patch*, merging nested dicts key by key."""
    merged = dict(base)
    for key, value in patch.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class _CachedCollection(Generic[RecordT]):
    """Shared read path: cached snapshots of an in-memory list of models."""

    model: type[RecordT]
    all_key: str
    item_prefix: str

    def __init__(
        self,
        records: Iterable[Mapping[str, Any] | RecordT],
        cache: TTLCache | None = None,
        clock: Callable[[], float] | None = None,
        latency_ms: int = 0,
        cache_ttl: float = DEFAULT_CACHE_TTL,
    ) -> None:
        self._records: list[RecordT] = [self._coerce(r) for r in records]
        self._cache = cache if cache is not None else TTLCache(
            maxsize=512, ttl_seconds=cache_ttl, clock=clock,
        )
        self._latency = latency_ms / 1000.0
        # Guards _records from look-up through write-back; re-entrant because
        # update_progress calls update
        self._lock = threading.RLock()
        # Number of times the backing list was consulted (cache misses)
        self.source_reads = 0

    @classmethod
    def _coerce(cls, record: Mapping[str, Any] | RecordT) -> RecordT:
        if isinstance(record, cls.model):
            return record.model_copy(deep=True)
        return cls.model.model_validate(record)

    @property
    def cache(self) -> TTLCache:
        return self._cache

    def __len__(self) -> int:
        return len(self._records)

    def _delay(self) -> None:
        if self._latency > 0:
            time.sleep(self._latency)

    def _index_of(self, record_id: int) -> int | None:
        for i, record in enumerate(self._records):
            if record.id == record_id:
                return i
        return None

    def fetch_all(self) -> list[RecordT]:
        """Return a copy of every record; cached for the TTL window."""
        cached = self._cache.get(self.all_key)
        if cached is None:
            self._delay()
            with self._lock:
                self.source_reads += 1
                cached = [r.model_copy(deep=True) for r in self._records]
                self._cache.set(self.all_key, cached)
        return [r.model_copy(deep=True) for r in cached]

    def fetch_by_id(self, record_id: int) -> RecordT | None:
        """Return a copy of one record, or ``None`` if no record has that id."""
        key = f"{self.item_prefix}{record_id}"
        cached = self._cache.get(key)
        if cached is None:
            self._delay()
            with self._lock:
                self.source_reads += 1
                idx = self._index_of(record_id)
                if idx is None:
                    return None
                cached = self._records[idx].model_copy(deep=True)
                self._cache.set(key, cached)
        return cached.model_copy(deep=True)

    def invalidate(self) -> None:
        """Drop every cached snapshot of this collection."""
        removed = self._cache.invalidate_prefix(self.all_key, self.item_prefix)
        logger.debug("cache invalidated prefix=%s removed=%d", self.item_prefix, removed)


class HouseStore(_CachedCollection[House]):
    """Beneficiary houses with create/update/delete.

    Ids come from a counter seeded at max(seed ids) + 1 and never move
    backwards, so an id freed by ``delete`` is not handed out again.
    """

    model = House
    all_key = ALL_HOUSES_KEY
    item_prefix = HOUSE_KEY_PREFIX

    def __init__(
        self,
        records: Iterable[Mapping[str, Any] | House] = (),
        cache: TTLCache | None = None,
        clock: Callable[[], float] | None = None,
        today: Callable[[], date] = date.today,
        latency_ms: int = 0,
        cache_ttl: float = DEFAULT_CACHE_TTL,
    ) -> None:
        super().__init__(records, cache=cache, clock=clock,
                         latency_ms=latency_ms, cache_ttl=cache_ttl)
        self._today = today
        start = max((h.id for h in self._records), default=0) + 1
        self._ids = itertools.count(start)

    @classmethod
    def from_json(cls, path: Path, **kwargs: Any) -> "HouseStore":
        """Seed a store from ``{"beneficiaries": [...]}``."""
        return cls(load_records(path, "beneficiaries"), **kwargs)

    def _stamp(self) -> str:
        return self._today().isoformat()

    def create(self, record: Mapping[str, Any] | House) -> House:
        """Add a house under a fresh id and return a copy of it.

        Raises:
            pydantic.ValidationError: If *record* is not a valid house.
        """
        self._delay()
        data = record.model_dump() if isinstance(record, House) else dict(record)
        data.pop("id", None)
        house = House.model_validate(data)
        house.last_updated = self._stamp()
        with self._lock:
            house.id = next(self._ids)
            self._records.append(house)
            self.invalidate()
        logger.info("house created id=%d beneficiary=%s", house.id, house.beneficiary_name)
        return house.model_copy(deep=True)

    def update(self, house_id: int, patch: Mapping[str, Any] | HouseUpdate) -> House | None:
        """Merge a partial record into house *house_id*.

        ``last_updated`` is always restamped and ``id`` never changes.  When
        only one of ``fund_utilized`` / ``fund_details.utilized`` is sent, the
        other follows it.

        Returns:
            Copy of the updated house, or ``None`` if the id is unknown.

        Raises:
            pydantic.ValidationError: If the merged record is invalid.
        """
        self._delay()
        if not isinstance(patch, HouseUpdate):
            patch = HouseUpdate.model_validate(patch)
        changes = patch.model_dump(exclude_unset=True)
        _mirror_utilized(changes)
        stamp = self._stamp()

        # The stamp is taken first: nothing between look-up and write-back
        # calls out of this store.
        with self._lock:
            idx = self._index_of(house_id)
            if idx is None:
                return None
            merged = _deep_merge(self._records[idx].model_dump(), changes)
            merged["id"] = house_id
            merged["last_updated"] = stamp
            updated = House.model_validate(merged)
            self._records[idx] = updated
            self.invalidate()
        logger.info("house updated id=%d fields=%s", house_id, sorted(changes))
        return updated.model_copy(deep=True)

    def update_progress(
        self,
        house_id: int,
        progress: int,
        stage: str | None = None,
        fund_utilized: str | None = None,
        remarks: str | None = None,
        new_images: Iterable[str] = (),
    ) -> House | None:
        """Officer progress update: progress, optional stage/funds/remarks, extra images.

        ``stage`` is left untouched unless given; progress does not imply a
        stage.
        """
        new_images = list(new_images)
        with self._lock:
            idx = self._index_of(house_id)
            if idx is None:
                return None
            patch: dict[str, Any] = {"progress": progress}
            if stage is not None:
                patch["stage"] = stage
            if fund_utilized is not None:
                patch["fund_utilized"] = fund_utilized
            if remarks:
                patch["remarks"] = remarks
            if new_images:
                patch["images"] = [*self._records[idx].images, *new_images]
            return self.update(house_id, patch)

    def delete(self, house_id: int) -> bool:
        """Remove a house; ``False`` if the id is unknown."""
        self._delay()
        with self._lock:
            idx = self._index_of(house_id)
            if idx is None:
                return False
            del self._records[idx]
            self.invalidate()
        logger.info("house deleted id=%d", house_id)
        return True


class OfficerStore(_CachedCollection[Officer]):
    """Read-only view of the field officers."""

    model = Officer
    all_key = ALL_OFFICERS_KEY
    item_prefix = OFFICER_KEY_PREFIX

    @classmethod
    def from_json(cls, path: Path, **kwargs: Any) -> "OfficerStore":
        """Seed a store from ``{"officers": [...]}``."""
        return cls(load_records(path, "officers"), **kwargs)


def _mirror_utilized(changes: dict[str, Any]) -> None:
    fund_details = changes.get("fund_details") or {}
    nested = fund_details.get("utilized")
    flat = changes.get("fund_utilized")
    if flat is not None and nested is None:
        changes["fund_details"] = {**fund_details, "utilized": flat}
    elif nested is not None and flat is None:
        changes["fund_utilized"] = nested
