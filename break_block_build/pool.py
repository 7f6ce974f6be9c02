"""
Entity Pools
=============
Bounded, insertion-ordered collections of entity records.

Each entity type lives in exactly one pool owned by the Game. Entities are
never removed while a system iterates; they are flagged inactive and
filtered out in one pass after collisions are resolved.
"""

from typing import Callable, Generic, Iterator, List, Optional, TypeVar


# Type variable for entity records
E = TypeVar('E')


class EntityPool(Generic[E]):
    """
    Insertion-ordered collection with identity uniqueness and a size cap.

    When the cap is exceeded the oldest entries are evicted, bounding the
    worst-case cost of the per-frame collision passes.
    """

    def __init__(self, max_size: int):
        if max_size <= 0:
            raise ValueError(f'max_size must be positive, got {max_size}')
        self.max_size = max_size
        self._items: List[E] = []
        self._ids = set()

    def add(self, entity: E) -> E:
        """Append an entity. Adding one that is already present is a no-op."""
        if id(entity) in self._ids:
            return entity
        self._items.append(entity)
        self._ids.add(id(entity))
        while len(self._items) > self.max_size:
            evicted = self._items.pop(0)
            self._ids.discard(id(evicted))
        return entity

    def extend(self, entities) -> None:
        for entity in entities:
            self.add(entity)

    def prune(self, keep: Optional[Callable[[E], bool]] = None) -> int:
        """
        Drop inactive entities (and any that fail `keep`), then enforce the cap.

        Returns the number of entities removed.
        """
        before = len(self._items)
        survivors = [
            e for e in self._items
            if getattr(e, 'active', True) and (keep is None or keep(e))
        ]
        if len(survivors) > self.max_size:
            survivors = survivors[-self.max_size:]
        self._items = survivors
        self._ids = {id(e) for e in survivors}
        return before - len(survivors)

    def clear(self) -> None:
        self._items = []
        self._ids = set()

    def active(self) -> Iterator[E]:
        """Iterate entities that are still flagged active."""
        for entity in list(self._items):
            if getattr(entity, 'active', True):
                yield entity

    def __iter__(self) -> Iterator[E]:
        # Iterate a copy so systems may append while iterating
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity) -> bool:
        return id(entity) in self._ids
