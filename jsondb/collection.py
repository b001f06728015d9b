"""
jsondb/collection.py
Collection: an ordered, sparse, index-addressed container.

Every pushed item gets a slot index from a counter that only grows.
forget(index) removes the slot without renumbering the others, so an index
handed out once stays valid (or becomes a harmless miss) for the lifetime
of the collection. Rows rely on this: they remember (collection, index)
pairs and replay them on delete().

Items that define register_membership(collection, index) are told about
their slot when pushed. Derived collections (slice/take/skip/filter/map)
do not notify; they are snapshots.
"""

from __future__ import annotations
import json
from typing import Any, Callable, Iterator

from jsondb.pagination import PaginatedCollection


class Collection:
    """
    Ordered container keyed by stable slot indices.

    `length` is the number of occupied slots and always equals len(self).
    """

    def __init__(self, items: list[Any] | tuple[Any, ...] = ()) -> None:
        self._data: dict[int, Any] = {}
        self._next_index: int = 0
        self.length: int = 0
        self.push(*items)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def push(self, *items: Any) -> "Collection":
        """Append items in order, notifying those that track membership."""
        for item in items:
            index = self._place(self._next_index, item)
            register = getattr(item, "register_membership", None)
            if callable(register):
                register(self, index)
        return self

    def forget(self, index: int) -> "Collection":
        """Remove the slot at index. Missing slots are ignored."""
        if index in self._data:
            del self._data[index]
            self.length -= 1
        return self

    # ------------------------------------------------------------------
    # Derived collections
    # ------------------------------------------------------------------

    def slice(self, start: int, length: int | None = None) -> "Collection":
        """
        Items from position `start` (counting live slots only), at most
        `length` of them. Slot indices are carried over unchanged.
        """
        slots = list(self._data.items())
        stop = None if length is None else start + length
        if length is not None and length < 0:
            stop = len(slots) + length
        result = Collection()
        for index, item in slots[start:stop]:
            result._place(index, item)
        return result

    def skip(self, items: int) -> "Collection":
        return self.slice(items)

    def take(self, items: int) -> "Collection":
        return self.slice(0, max(1, items))

    def filter(self, predicate: Callable[[Any, int, "Collection"], Any]) -> "Collection":
        """New collection of the items for which predicate(item, index, result) is truthy."""
        result = Collection()
        for index, item in list(self._data.items()):
            if predicate(item, index, result):
                result._place(result._next_index, item)
        return result

    def map(self, transform: Callable[[Any, int, "Collection"], Any]) -> "Collection":
        """New collection of transform(item, index, self); self is left as is."""
        result = Collection()
        for index, item in list(self._data.items()):
            result._place(result._next_index, transform(item, index, self))
        return result

    def each(self, visitor: Callable[[Any, int, "Collection"], Any]) -> "Collection":
        for index, item in list(self._data.items()):
            visitor(item, index, self)
        return self

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find(self, identifier: int | str) -> Any | None:
        """Return the first item whose "id" field equals int(identifier)."""
        wanted = int(identifier)
        for item in self._data.values():
            getter = getattr(item, "get", None)
            if callable(getter) and getter("id") == wanted:
                return item
        return None

    def first(self) -> Any | None:
        for item in self._data.values():
            return item
        return None

    def get(self, index: int) -> Any | None:
        """Return the item in slot index, or None if the slot is empty."""
        return self._data.get(index)

    def keys(self) -> list[int]:
        """Live slot indices in order."""
        return list(self._data.keys())

    def is_empty(self) -> bool:
        return self.length == 0

    @property
    def next_index(self) -> int:
        """Slot index the next push will assign."""
        return self._next_index

    def paginate(self, per_page: int = 10, page: int = 1) -> PaginatedCollection:
        return PaginatedCollection(self, per_page=per_page, page=page)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_array(self) -> list[Any]:
        """Plain list; items with their own to_array() are converted too."""
        stack = []
        for item in self._data.values():
            converter = getattr(item, "to_array", None)
            stack.append(converter() if callable(converter) else item)
        return stack

    def to_json(self) -> str:
        return json.dumps(self.to_array(), ensure_ascii=False)

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._data.values()))

    def __getitem__(self, index: int) -> Any:
        try:
            return self._data[index]
        except KeyError:
            raise KeyError(f"slot {index} is empty") from None

    def __repr__(self) -> str:
        return f"Collection(length={self.length}, slots={self.keys()})"

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _place(self, index: int, item: Any) -> int:
        """Store item in slot index without any membership notification."""
        if index not in self._data:
            self.length += 1
        self._data[index] = item
        self._next_index = max(self._next_index, index + 1)
        return index
