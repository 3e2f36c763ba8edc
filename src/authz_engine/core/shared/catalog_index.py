"""In-memory catalog index keyed by stable id with a unique name index."""

import logging
from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogIndex(Generic[T]):
    """Id-keyed store with a secondary name index.

    Entities must expose ``id`` and ``name`` attributes. Name uniqueness is
    the caller's responsibility; ``put`` replaces any entry sharing the id
    and re-points the name.
    """

    def __init__(self, key: Callable[[T], str] = lambda entity: entity.name):
        self._by_id: Dict[str, T] = {}
        self._id_by_name: Dict[str, str] = {}
        self._key = key

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, name: str) -> bool:
        return name in self._id_by_name

    def put(self, entity: T) -> None:
        previous = self._by_id.get(entity.id)
        if previous is not None:
            self._id_by_name.pop(self._key(previous), None)
        self._by_id[entity.id] = entity
        self._id_by_name[self._key(entity)] = entity.id

    def remove(self, entity_id: str) -> Optional[T]:
        entity = self._by_id.pop(entity_id, None)
        if entity is not None:
            self._id_by_name.pop(self._key(entity), None)
        return entity

    def get(self, entity_id: str) -> Optional[T]:
        return self._by_id.get(entity_id)

    def get_by_name(self, name: str) -> Optional[T]:
        entity_id = self._id_by_name.get(name)
        return self._by_id.get(entity_id) if entity_id else None

    def values(self) -> List[T]:
        return list(self._by_id.values())

    def names(self) -> List[str]:
        return list(self._id_by_name)

    def replace_all(self, entities: Iterable[T]) -> None:
        self._by_id.clear()
        self._id_by_name.clear()
        for entity in entities:
            self.put(entity)
        logger.debug(f"Catalog index reloaded with {len(self._by_id)} entries")

    def clear(self) -> None:
        self._by_id.clear()
        self._id_by_name.clear()
