"""
jsondb/errors.py
Exception hierarchy for jsondb.

  JsonDBError
    NotFoundError         DatabaseNotFoundError, TableNotFoundError
    AlreadyExistsError    DatabaseExistsError, TableExistsError, NameAlreadyUsedError
    InvalidNameError      table name would collide with another table's files
    FileSystemError       I/O failure (carries the path)
    MetaKeyError          metadata key missing (also a KeyError)
"""

from __future__ import annotations
from pathlib import Path


class JsonDBError(Exception):
    """Base class for every error raised by jsondb."""


# ── Missing things ────────────────────────────────────────────────────

class NotFoundError(JsonDBError):
    """A database or table does not exist."""

    kind = "object"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'"{name}" {self.kind} does not exist')


class DatabaseNotFoundError(NotFoundError):
    kind = "database"


class TableNotFoundError(NotFoundError):
    kind = "table"


# ── Name collisions ───────────────────────────────────────────────────

class AlreadyExistsError(JsonDBError):
    """A database, table or target name is already taken."""

    kind = "object"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'"{name}" {self.kind} already exists')


class DatabaseExistsError(AlreadyExistsError):
    kind = "database"


class TableExistsError(AlreadyExistsError):
    kind = "table"


class NameAlreadyUsedError(AlreadyExistsError):
    """Raised by rename when the target name is in use."""

    kind = "name"

    def __init__(self, name: str, current: str) -> None:
        super().__init__(name)
        self.current = current
        self.args = (f'"{current}" can not be renamed to "{name}": {self.kind} already in use',)


class InvalidNameError(JsonDBError, ValueError):
    """A table name that can not be mapped onto its own pair of files."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f'"{name}" is not a valid table name: {reason}')


# ── I/O ───────────────────────────────────────────────────────────────

class FileSystemError(JsonDBError):
    """Reading, writing, creating or renaming a file failed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class MetaKeyError(JsonDBError, KeyError):
    """Metadata key is neither pending nor present in the loaded snapshot."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"meta key '{key}' is not set")

    def __str__(self) -> str:
        return self.args[0]
