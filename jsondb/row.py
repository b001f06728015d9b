"""
jsondb/row.py
Row: a mutable view over one decoded document of a Table.

A Row remembers every (collection, index) slot it was pushed into.
delete() replays that list so the row disappears from the table's own
collection and from any other collection it was explicitly pushed into.
"""

from __future__ import annotations
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsondb.collection import Collection
    from jsondb.table import Table


class Row:
    def __init__(
        self,
        table: "Table",
        collection: "Collection",
        original: dict[str, Any],
        index: int,
    ) -> None:
        self.table = table
        self.collection = collection
        self.original = original
        self.index = index
        self.memberships: list[tuple["Collection", int]] = []
        self.deleted = False
        self.register_membership(collection, index)

    # Field access ------------------------------------------------------

    @property
    def id(self) -> Any:
        return self.original.get("id")

    def get(self, field: str) -> Any:
        """Value of field, or None when the row has no such field."""
        return self.original.get(field)

    def set(self, field: str, value: Any) -> "Row":
        self.original[field] = value
        self.table.is_dirty = True
        return self

    def has(self, field: str) -> bool:
        return field in self.original

    def unset(self, field: str) -> None:
        self.original.pop(field, None)
        self.table.is_dirty = True

    def remove(self, field: str) -> "Row":
        self.unset(field)
        return self

    def rename(self, field: str, new_name: str) -> "Row":
        """Move field's value under new_name. Does nothing if field is absent."""
        if field in self.original and field != new_name:
            self.set(new_name, self.original[field])
            self.remove(field)
        return self

    # Membership --------------------------------------------------------

    def register_membership(self, collection: "Collection", index: int) -> None:
        for known, known_index in self.memberships:
            if known is collection and known_index == index:
                return
        self.memberships.append((collection, index))

    def delete(self) -> "Row":
        """
        Remove the row from every collection that registered it and
        decrement the table's row counter. Deleting twice is a no-op.
        """
        if self.deleted:
            return self
        meta = self.table.meta
        rows = meta.get("rows")

        for collection, index in self.memberships:
            collection.forget(index)
        self.memberships = []
        self.deleted = True

        meta.set("rows", rows - 1)
        self.table.is_dirty = True
        return self

    # Conversion --------------------------------------------------------

    def to_array(self) -> dict[str, Any]:
        return dict(self.original)

    def to_object(self) -> dict[str, Any]:
        return self.original

    def to_json(self) -> str:
        return json.dumps(self.original, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"Row(table={self.table.name!r}, id={self.id!r}, fields={list(self.original)})"
