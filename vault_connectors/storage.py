"""
Entity Storage — keyed record stores used by the entity storage connector.

A store keeps records of one model type, indexed by ``record.id`` and
optionally partitioned by a tenant identifier. Only single-record
get/set/remove are atomic; nothing spans two calls.
"""
from typing import Any, Generic, Optional, Protocol, TypeVar

from datamodel import BaseModel

M = TypeVar("M", bound=BaseModel)

DEFAULT_PARTITION = "default"


class EntityStorage(Protocol[M]):
    """Keyed record store contract."""

    async def get(self, id: str, partition: Optional[str] = None) -> Optional[M]:
        ...

    async def set(self, record: M, partition: Optional[str] = None) -> None:
        ...

    async def remove(self, id: str, partition: Optional[str] = None) -> None:
        ...


class MemoryEntityStorage(Generic[M]):
    """In-process record store.

    Records are copied on the way in and out, so callers never share
    state with the store.
    """

    def __init__(self, model: type[M], initial: Optional[dict[str, list[M]]] = None):
        self._model = model
        self._store: dict[str, dict[str, dict[str, Any]]] = {}
        for partition, records in (initial or {}).items():
            for record in records:
                self._partition(partition)[record.id] = record.to_dict()

    def _partition(self, partition: Optional[str]) -> dict[str, dict[str, Any]]:
        return self._store.setdefault(partition or DEFAULT_PARTITION, {})

    async def get(self, id: str, partition: Optional[str] = None) -> Optional[M]:
        data = self._partition(partition).get(id)
        if data is None:
            return None
        return self._model(**data)

    async def set(self, record: M, partition: Optional[str] = None) -> None:
        self._partition(partition)[record.id] = record.to_dict()

    async def remove(self, id: str, partition: Optional[str] = None) -> None:
        self._partition(partition).pop(id, None)

    def count(self, partition: Optional[str] = None) -> int:
        """Number of records held in a partition."""
        return len(self._partition(partition))
