"""
jsondb/table.py
Table: one JSON document array plus its metadata file, held in memory.

Lifecycle:
  loaded:   constructor read both files, is_dirty is False
  modified: any row mutation, insert, push or delete sets is_dirty
  saved:    save() wrote both files and cleared is_dirty

Nothing touches disk between load and save(). Unsaved changes are simply
dropped with the object.
"""

from __future__ import annotations
import logging
import os
from typing import TYPE_CHECKING, Any, Callable, Iterator

from jsondb.collection import Collection
from jsondb.errors import FileSystemError, NameAlreadyUsedError
from jsondb.location import check_table_name
from jsondb.meta import Meta
from jsondb.pagination import PaginatedCollection
from jsondb.row import Row
from jsondb.storage import read_json, write_json

if TYPE_CHECKING:
    from jsondb.database import Database

logger = logging.getLogger(__name__)


class Table:
    """
    In-memory table bound to `<name>.json` and `<name>.meta.json` inside
    a database directory.
    """

    def __init__(self, database: "Database", name: str) -> None:
        self.database = database
        self.name = name
        self.location = database.location(name)
        self.is_dirty = False
        self.meta = Meta(self.location.meta_path)
        self.data = self._load_all()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load_all(self) -> Collection:
        path = self.location.data_path
        documents = read_json(path)
        if not isinstance(documents, list):
            raise FileSystemError(path, "malformed table (expected a JSON array)")

        collection = Collection()
        for document in documents:
            if not isinstance(document, dict):
                raise FileSystemError(path, "malformed table (every row must be a JSON object)")
            collection.push(Row(self, collection, document, collection.next_index))
        logger.debug("loaded table %s (%d rows)", self.name, collection.length)
        return collection

    # ------------------------------------------------------------------
    # DML
    # ------------------------------------------------------------------

    def all(self) -> Collection:
        return self.data

    def insert(self, *documents: dict[str, Any]) -> "Table":
        """
        Append documents as new rows. Each one gets the next value of the
        `current_id` counter as its "id"; ids are never reused.
        """
        current_id = self.meta.get("current_id")
        rows = self.meta.get("rows")
        self.is_dirty = True
        for document in documents:
            current_id += 1
            rows += 1
            self.meta.set("current_id", current_id)
            self.meta.set("rows", rows)

            document = dict(document)  # the row owns its own copy
            document["id"] = current_id
            self.data.push(Row(self, self.data, document, self.data.next_index))
        return self

    def save(self) -> bool | None:
        """
        Flush rows and metadata.

        Returns None if nothing changed since the last save, True if both
        files were written and False if either write failed. A failed save
        leaves the table dirty, so calling save() again retries both files.
        """
        if not self.is_dirty:
            return None

        try:
            write_json(self.location.data_path, self.data.to_array())
        except FileSystemError as e:
            logger.error("saving table %s failed: %s", self.name, e)
            return False

        if self.meta.save() is False:
            return False

        self.is_dirty = False
        logger.debug("saved table %s (%d rows)", self.name, self.data.length)
        return True

    def rename(self, new_name: str) -> bool:
        """
        Rename both backing files.

        The data file decides success. The meta file follows on a best
        effort basis: a failure there is logged and otherwise ignored.
        """
        target = self.location.renamed(check_table_name(new_name))
        if target.data_path.exists():
            raise NameAlreadyUsedError(
                f"{self.database.name}.{new_name}", f"{self.database.name}.{self.name}"
            )

        try:
            os.rename(self.location.data_path, target.data_path)
        except OSError as e:
            raise FileSystemError(self.location.data_path, f"renaming the table failed ({e.strerror or e})") from e

        try:
            os.rename(self.location.meta_path, target.meta_path)
        except OSError as e:
            logger.warning("table %s renamed but its meta file was not: %s", new_name, e)

        self.name = new_name
        self.location = target
        self.meta.path = target.meta_path
        return True

    # ------------------------------------------------------------------
    # File info
    # ------------------------------------------------------------------

    def size(self) -> int:
        """Size of the data file in bytes."""
        return self._stat().st_size

    def times(self) -> dict[str, float]:
        st = self._stat()
        return {"created": st.st_ctime, "accessed": st.st_atime, "modified": st.st_mtime}

    def _stat(self) -> os.stat_result:
        try:
            return os.stat(self.location.data_path)
        except OSError as e:
            raise FileSystemError(self.location.data_path, f"can not be inspected ({e.strerror or e})") from e

    # ------------------------------------------------------------------
    # Collection operations re-exported by the table
    # ------------------------------------------------------------------

    @property
    def length(self) -> int:
        return self.data.length

    def push(self, *items: Any) -> "Table":
        self.data.push(*items)
        self.is_dirty = True
        return self

    def forget(self, index: int) -> "Table":
        self.data.forget(index)
        self.is_dirty = True
        return self

    def filter(self, predicate: Callable[[Any, int, Collection], Any]) -> Collection:
        return self.data.filter(predicate)

    def map(self, transform: Callable[[Any, int, Collection], Any]) -> Collection:
        return self.data.map(transform)

    def each(self, visitor: Callable[[Any, int, Collection], Any]) -> Collection:
        return self.data.each(visitor)

    def find(self, identifier: int | str) -> Row | None:
        return self.data.find(identifier)

    def first(self) -> Row | None:
        return self.data.first()

    def slice(self, start: int, length: int | None = None) -> Collection:
        return self.data.slice(start, length)

    def skip(self, items: int) -> Collection:
        return self.data.skip(items)

    def take(self, items: int) -> Collection:
        return self.data.take(items)

    def paginate(self, per_page: int = 10, page: int = 1) -> PaginatedCollection:
        return self.data.paginate(per_page, page)

    def is_empty(self) -> bool:
        return self.data.is_empty()

    def to_array(self) -> list[Any]:
        return self.data.to_array()

    def to_json(self) -> str:
        return self.data.to_json()

    def __len__(self) -> int:
        return self.data.length

    def __iter__(self) -> Iterator[Any]:
        return iter(self.data)

    def __repr__(self) -> str:
        return f"Table(name={self.name!r}, rows={self.data.length}, dirty={self.is_dirty})"
