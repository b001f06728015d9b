"""
jsondb/storage.py
Whole-file JSON codec used by Table (data files) and Meta (meta files).

Reads decode the complete file in one go; there is no streaming.
Writes go to a ".tmp" sibling first and are moved over the target with
os.replace(), so a crash mid-write leaves the previous file intact.
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any

from jsondb.errors import FileSystemError

logger = logging.getLogger(__name__)


def _encode(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def _decode(text: str) -> Any:
    return json.loads(text)


def read_json(path: str | Path) -> Any:
    """Read and decode the JSON document at path."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FileSystemError(path, f"can not be read ({e.strerror or e})") from e
    try:
        data = _decode(text)
    except json.JSONDecodeError as e:
        raise FileSystemError(path, f"malformed JSON ({e.msg} at line {e.lineno})") from e
    logger.debug("read %s (%d bytes)", path, len(text))
    return data


def write_json(path: str | Path, data: Any) -> None:
    """Encode data and atomically replace the file at path with it."""
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    payload = _encode(data)
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise FileSystemError(path, f"can not be written ({e.strerror or e})") from e
    logger.debug("wrote %s (%d bytes)", path, len(payload))
