"""
jsondb/location.py
StorageLocation: where one table lives on disk.

A table named "users" in database directory "data/app" is two siblings:
  data/app/users.json        document array
  data/app/users.meta.json   metadata object
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from jsondb.errors import InvalidNameError

DB_EXT = "json"
META_EXT = "meta.json"

# "x.meta" would store its rows in "x.meta.json", the meta file of table "x"
_RESERVED_SUFFIX = ".meta"


def check_table_name(name: str) -> str:
    """Return name unchanged, or raise InvalidNameError."""
    if not name:
        raise InvalidNameError(name, "name is empty")
    if "/" in name or "\\" in name:
        raise InvalidNameError(name, "name contains a path separator")
    if name.endswith(_RESERVED_SUFFIX):
        raise InvalidNameError(name, f"name ends with '{_RESERVED_SUFFIX}'")
    return name


@dataclass(frozen=True)
class StorageLocation:
    directory: Path
    name: str

    @property
    def data_path(self) -> Path:
        return self.directory / f"{self.name}.{DB_EXT}"

    @property
    def meta_path(self) -> Path:
        return self.directory / f"{self.name}.{META_EXT}"

    def exists(self) -> bool:
        """A table exists when its data file does."""
        return self.data_path.is_file()

    def renamed(self, new_name: str) -> "StorageLocation":
        return StorageLocation(self.directory, new_name)
