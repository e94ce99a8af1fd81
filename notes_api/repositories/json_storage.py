"""
JSON-based persistence adapter.

The whole database lives in one JSON document::

    {"users": [...], "notes": [...], "nextUserId": 1, "nextNoteId": 1}

and the document is the unit of read and write. ``transaction()`` holds a
process-wide lock across load -> mutate -> save so concurrent requests served
by the same process cannot overwrite each other's changes.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator
import copy
import json
import logging
import os
import tempfile
import threading

from notes_api.core.errors import StorageUnavailable

logger = logging.getLogger(__name__)


def empty_document() -> dict:
    return {"users": [], "notes": [], "nextUserId": 1, "nextNoteId": 1}


def db_defaults(db: dict) -> dict:
    db.setdefault("users", [])
    db.setdefault("notes", [])
    db.setdefault("nextUserId", 1)
    db.setdefault("nextNoteId", 1)
    return db


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def shape_problem(db: dict) -> str | None:
    """Describe the first structural defect of a parsed document, if any."""
    for key in ("users", "notes"):
        records = db[key]
        if not isinstance(records, list):
            return f"'{key}' is not a list"
        for record in records:
            if not isinstance(record, dict) or not _is_int(record.get("id")):
                return f"'{key}' holds a record without an integer id"
    for note in db["notes"]:
        if not _is_int(note.get("user_id")):
            return "a note has no integer user_id"
    for key in ("nextUserId", "nextNoteId"):
        if not _is_int(db[key]) or db[key] < 1:
            return f"'{key}' is not a positive integer"
    return None


class JsonStorage:
    """Load/save the whole document from a single JSON file."""

    def __init__(self, path: Path | str, *, recover_corrupt: bool = False) -> None:
        self.path = Path(path)
        self.recover_corrupt = recover_corrupt
        self._lock = threading.RLock()

    def load(self) -> dict:
        with self._lock:
            if not self.path.exists():
                logger.info("Initializing empty document at %s", self.path)
                db = empty_document()
                self.save(db)
                return db
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    db = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                return self._handle_corrupt(exc)
            except OSError as exc:
                raise StorageUnavailable() from exc
            if not isinstance(db, dict):
                return self._handle_corrupt(ValueError("document root is not an object"))
            problem = shape_problem(db_defaults(db))
            if problem:
                return self._handle_corrupt(ValueError(problem))
            return db

    def save(self, db: dict) -> None:
        payload = json.dumps(db, ensure_ascii=False, indent=2)
        with self._lock:
            tmp_name = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except OSError as exc:
                if tmp_name and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise StorageUnavailable() from exc

    @contextmanager
    def transaction(self) -> Iterator[dict]:
        """Yield the loaded document and persist it when the block succeeds.

        Nothing is written when the block leaves the document unchanged.
        """
        with self._lock:
            db = self.load()
            before = copy.deepcopy(db)
            yield db
            if db != before:
                self.save(db)

    def _handle_corrupt(self, exc: Exception) -> dict:
        if not self.recover_corrupt:
            logger.error("Document at %s is unreadable: %s", self.path, exc)
            raise StorageUnavailable() from exc
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            os.replace(self.path, backup)
        except OSError as move_exc:
            raise StorageUnavailable() from move_exc
        logger.warning("Document at %s was corrupt (%s); moved to %s and reinitialized", self.path, exc, backup)
        db = empty_document()
        self.save(db)
        return db
