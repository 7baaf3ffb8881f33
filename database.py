"""
In-memory entity store.

``db`` holds one ``Collection`` per entity type, keyed by entity id.
Collections store deep copies of the pydantic models handed to them and
hand out deep copies on every read, so nothing outside the store can
mutate stored state by reference.

All collections share one re-entrant lock. Every collection method
takes it, and services take it around multi-step operations so each
service call is atomic to other threads. Nothing is persisted: state
lives for the lifetime of the process.
"""
import logging
import threading
import uuid
from typing import Callable, Dict, List, Optional, Set

from pydantic import BaseModel

logger = logging.getLogger(__name__)

COLLECTIONS = ("user", "product", "cart_item", "order", "order_item")


class Collection:
    def __init__(self, name: str, lock: threading.RLock):
        self.name = name
        self._lock = lock
        self._rows: Dict[str, BaseModel] = {}
        self._issued: Set[str] = set()

    def new_id(self) -> str:
        """Random UUID4 string never handed out by this collection before."""
        with self._lock:
            candidate = str(uuid.uuid4())
            while candidate in self._issued:
                candidate = str(uuid.uuid4())
            self._issued.add(candidate)
            return candidate

    def put(self, entity: BaseModel) -> BaseModel:
        with self._lock:
            self._rows[entity.id] = entity.model_copy(deep=True)
            self._issued.add(entity.id)
        return entity.model_copy(deep=True)

    def get(self, entity_id: str) -> Optional[BaseModel]:
        with self._lock:
            row = self._rows.get(entity_id)
            return row.model_copy(deep=True) if row is not None else None

    def delete(self, entity_id: str) -> bool:
        with self._lock:
            return self._rows.pop(entity_id, None) is not None

    def list_all(self) -> List[BaseModel]:
        with self._lock:
            return [row.model_copy(deep=True) for row in self._rows.values()]

    def find(self, predicate: Callable[[BaseModel], bool]) -> List[BaseModel]:
        with self._lock:
            return [row.model_copy(deep=True) for row in self._rows.values() if predicate(row)]

    def find_one(self, predicate: Callable[[BaseModel], bool]) -> Optional[BaseModel]:
        with self._lock:
            for row in self._rows.values():
                if predicate(row):
                    return row.model_copy(deep=True)
            return None

    def count(self) -> int:
        with self._lock:
            return len(self._rows)

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()

    def __contains__(self, entity_id: str) -> bool:
        with self._lock:
            return entity_id in self._rows


class Database:
    def __init__(self):
        self.lock = threading.RLock()
        self._collections = {name: Collection(name, self.lock) for name in COLLECTIONS}

    def __getitem__(self, name: str) -> Collection:
        try:
            return self._collections[name]
        except KeyError:
            raise KeyError(f"Unknown collection: {name}") from None

    def list_collection_names(self) -> List[str]:
        return list(self._collections)

    def reset(self) -> None:
        """Drop every row in every collection."""
        with self.lock:
            for collection in self._collections.values():
                collection.clear()
        logger.info("store reset")


db = Database()
