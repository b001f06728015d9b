"""
jsondb/meta.py
Meta: key/value overlay over a JSON metadata file.

Two layers:
  snapshot: what the file held at the last load()
  pending:  values set() since the last save(), not yet on disk

save() re-reads the file before merging `pending` on top of it, so keys
written by someone else in the meantime survive (last writer wins per key,
not per file).
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any

from jsondb.errors import FileSystemError, MetaKeyError
from jsondb.storage import read_json, write_json

logger = logging.getLogger(__name__)


class Meta:
    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self.snapshot: dict[str, Any] = {}
        self.pending: dict[str, Any] = {}
        if self.path is not None:
            self.load(self.path)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self, path: str | Path) -> None:
        """Replace the snapshot with the contents of path."""
        data = read_json(path)
        if isinstance(data, list) and not data:
            # freshly created files may hold an empty array
            data = {}
        if not isinstance(data, dict):
            raise FileSystemError(path, "malformed metadata (expected a JSON object)")
        self.snapshot = data

    def get(self, key: str) -> Any:
        if key in self.pending:
            return self.pending[key]
        if key in self.snapshot:
            return self.snapshot[key]
        raise MetaKeyError(key)

    def set(self, key: str, value: Any) -> None:
        self.pending[key] = value

    def has(self, key: str) -> bool:
        return key in self.pending or key in self.snapshot

    def to_dict(self) -> dict[str, Any]:
        """Merged view: snapshot with pending values on top."""
        return {**self.snapshot, **self.pending}

    def is_dirty(self) -> bool:
        return len(self.pending) > 0

    def save(self, path: str | Path | None = None) -> bool | None:
        """
        Write pending values to disk.

        Returns None when there is nothing to write, True when the merged
        document was written and False when the write failed.
        """
        if not self.is_dirty():
            return None

        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("Meta.save() needs a path: none was given and none was loaded")

        self.load(target)
        applied = self.pending
        self.snapshot.update(applied)
        self.pending = {}

        try:
            write_json(target, self.snapshot)
        except FileSystemError as e:
            # unwritten values stay pending so the next save() retries them
            self.pending = {**applied, **self.pending}
            logger.error("meta save failed: %s", e)
            return False
        logger.debug("meta saved to %s", target)
        return True

    def rollback(self) -> None:
        """Drop every value set since the last save."""
        self.pending = {}

    def __repr__(self) -> str:
        return f"Meta(path={self.path}, keys={sorted(self.to_dict())}, pending={len(self.pending)})"
