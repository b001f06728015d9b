"""
jsondb/database.py
Database: a directory of tables.

  create_database("./data/app")   → make the directory, return Database
  connect("./data/app")           → open an existing directory
  databases("./data")             → names of database directories under a root

Nothing about the database itself is persisted; every query looks at the
filesystem again.
"""

from __future__ import annotations
import logging
import os
from pathlib import Path

from jsondb.errors import (
    DatabaseExistsError,
    DatabaseNotFoundError,
    FileSystemError,
    NameAlreadyUsedError,
    TableExistsError,
    TableNotFoundError,
)
from jsondb.location import META_EXT, StorageLocation, check_table_name
from jsondb.meta import Meta
from jsondb.storage import write_json
from jsondb.table import Table

logger = logging.getLogger(__name__)


class Database:
    """
    Handle on a database directory.

    Attributes:
        name: last path segment
        dir:  parent directory
        path: full directory path
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.name = self.path.name
        self.dir = self.path.parent

    # ------------------------------------------------------------------
    # Database level
    # ------------------------------------------------------------------

    @staticmethod
    def exists(path: str | Path) -> bool:
        return Path(path).is_dir()

    @classmethod
    def create(cls, path: str | Path) -> "Database":
        """Create the directory. Raises DatabaseExistsError if it is already there."""
        if cls.exists(path):
            raise DatabaseExistsError(str(path))
        try:
            Path(path).mkdir(parents=True)
        except OSError as e:
            raise FileSystemError(path, f"database can not be created ({e.strerror or e})") from e
        logger.debug("created database %s", path)
        return cls.connect(path)

    @classmethod
    def connect(cls, path: str | Path) -> "Database":
        if not cls.exists(path):
            raise DatabaseNotFoundError(str(path))
        return cls(path)

    def rename(self, new_name: str) -> bool:
        new_path = self.dir / new_name
        if new_path.is_dir():
            raise NameAlreadyUsedError(new_name, self.name)
        try:
            os.rename(self.path, new_path)
        except OSError as e:
            raise FileSystemError(self.path, f"database can not be renamed ({e.strerror or e})") from e
        self.path = new_path
        self.name = new_name
        return True

    def size(self) -> int:
        """Total size in bytes of the files in the database directory."""
        return sum(p.stat().st_size for p in self.path.iterdir() if p.is_file())

    def times(self) -> dict[str, float]:
        st = self.path.stat()
        return {"created": st.st_ctime, "accessed": st.st_atime, "modified": st.st_mtime}

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def location(self, table_name: str) -> StorageLocation:
        return StorageLocation(self.path, table_name)

    def table_exists(self, table_name: str) -> bool:
        return self.location(table_name).exists()

    def create_table(self, table_name: str) -> Table:
        """
        Write an empty table and its metadata (rows=0, current_id=0) and
        return it loaded. Raises TableExistsError if the data file exists.
        """
        loc = self.location(check_table_name(table_name))
        if loc.exists():
            raise TableExistsError(f"{self.name}.{table_name}")

        write_json(loc.data_path, [])
        write_json(loc.meta_path, {})

        meta = Meta(loc.meta_path)
        meta.set("rows", 0)
        meta.set("current_id", 0)
        if meta.save() is False:
            raise FileSystemError(loc.meta_path, "metadata can not be initialised")

        logger.debug("created table %s.%s", self.name, table_name)
        return Table(self, table_name)

    def table(self, table_name: str) -> Table:
        if not self.table_exists(table_name):
            raise TableNotFoundError(f"{self.name}.{table_name}")
        return Table(self, table_name)

    def drop_table(self, table_name: str) -> bool:
        """
        Delete both files of a table.
        Returns True if the table existed and was dropped, False otherwise.
        """
        loc = self.location(table_name)
        if not loc.exists():
            return False
        for path in (loc.data_path, loc.meta_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise FileSystemError(path, f"can not be removed ({e.strerror or e})") from e
        logger.debug("dropped table %s.%s", self.name, table_name)
        return True

    def tables(self) -> list[str]:
        """Sorted names of the tables that have a meta file."""
        suffix = "." + META_EXT
        names = (p.name[: -len(suffix)] for p in self.path.glob("*" + suffix))
        return sorted(n for n in names if not n.endswith(".meta"))

    def __repr__(self) -> str:
        tables = ", ".join(self.tables()) or "(none)"
        return f"Database(name={self.name!r}, tables=[{tables}])"


# ── Module-level shortcuts ────────────────────────────────────────────

def create_database(path: str | Path) -> Database:
    return Database.create(path)


def connect(path: str | Path) -> Database:
    return Database.connect(path)


def databases(root: str | Path) -> list[str]:
    """Sorted names of the directories directly under root."""
    root = Path(root)
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if p.is_dir())
