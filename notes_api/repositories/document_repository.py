"""Account and note data access on top of the JSON document store."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from notes_api.domain.entities import Account, Note, parse_timestamp
from notes_api.repositories.json_storage import JsonStorage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentRepository:
    """CRUD helpers for accounts and notes.

    Every call loads the whole document, works on it in memory and, for
    mutations, saves it back. Absent records are reported as ``None`` (or
    ``False`` for deletions) and never raised.
    """

    def __init__(self, storage: JsonStorage, clock: Callable[[], datetime] = _utcnow) -> None:
        self.storage = storage
        self._clock = clock

    def _now(self) -> str:
        return self._clock().isoformat()

    @staticmethod
    def _find_user_record(db: dict, account_id: int) -> Optional[dict]:
        for user in db["users"]:
            if user.get("id") == account_id:
                return user
        return None

    @staticmethod
    def _find_note_index(db: dict, note_id: int, owner_id: int) -> int:
        for idx, note in enumerate(db["notes"]):
            if note.get("id") == note_id and note.get("user_id") == owner_id:
                return idx
        return -1

    # -------------------------- accounts --------------------------
    def _append_account(self, db: dict, name: str, email: str, password_hash: str) -> dict:
        record = {
            "id": db["nextUserId"],
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "created_at": self._now(),
        }
        db["nextUserId"] += 1
        db["users"].append(record)
        return record

    def create_account(self, name: str, email: str, password_hash: str) -> Account:
        with self.storage.transaction() as db:
            record = self._append_account(db, name, email, password_hash)
        return Account.from_record(record)

    def create_account_if_email_free(self, name: str, email: str, password_hash: str) -> Optional[Account]:
        """Create the account unless ``email`` is taken; check and insert share one transaction."""
        with self.storage.transaction() as db:
            if any(user.get("email") == email for user in db["users"]):
                return None
            record = self._append_account(db, name, email, password_hash)
        return Account.from_record(record)

    def find_account_by_email(self, email: str) -> Optional[Account]:
        db = self.storage.load()
        for user in db["users"]:
            if user.get("email") == email:
                return Account.from_record(user)
        return None

    def find_account_by_id(self, account_id: int) -> Optional[Account]:
        record = self._find_user_record(self.storage.load(), account_id)
        return Account.from_record(record) if record else None

    def _update_account(self, account_id: int, **values) -> Optional[Account]:
        with self.storage.transaction() as db:
            record = self._find_user_record(db, account_id)
            if record is None:
                return None
            record.update(values)
        return Account.from_record(record)

    def update_account_name(self, account_id: int, name: str) -> Optional[Account]:
        return self._update_account(account_id, name=name)

    def update_account_password_hash(self, account_id: int, password_hash: str) -> Optional[Account]:
        return self._update_account(account_id, password_hash=password_hash)

    def update_account_profile_image(self, account_id: int, image_path: str) -> Optional[Account]:
        return self._update_account(account_id, profile_image=image_path)

    def swap_account_profile_image(self, account_id: int, image_path: str) -> Optional[tuple[Account, Optional[str]]]:
        """Set a new avatar reference and return the account with the reference it replaced."""
        with self.storage.transaction() as db:
            record = self._find_user_record(db, account_id)
            if record is None:
                return None
            previous = record.get("profile_image")
            record["profile_image"] = image_path
        return Account.from_record(record), previous

    def count_notes_for_account(self, account_id: int) -> int:
        db = self.storage.load()
        return sum(1 for note in db["notes"] if note.get("user_id") == account_id)

    # -------------------------- notes --------------------------
    def create_note(self, owner_id: int, title: str, content: str) -> Note:
        now = self._now()
        with self.storage.transaction() as db:
            record = {
                "id": db["nextNoteId"],
                "user_id": owner_id,
                "title": title,
                "content": content,
                "created_at": now,
                "updated_at": now,
            }
            db["nextNoteId"] += 1
            db["notes"].append(record)
        return Note.from_record(record)

    def list_notes_for_account(self, owner_id: int) -> list[Note]:
        db = self.storage.load()
        notes = [Note.from_record(n) for n in db["notes"] if n.get("user_id") == owner_id]
        notes.sort(key=lambda n: parse_timestamp(n.updated_at), reverse=True)
        return notes

    def find_note(self, note_id: int, owner_id: int) -> Optional[Note]:
        db = self.storage.load()
        idx = self._find_note_index(db, note_id, owner_id)
        return Note.from_record(db["notes"][idx]) if idx >= 0 else None

    def update_note(self, note_id: int, owner_id: int, title: str, content: str) -> Optional[Note]:
        with self.storage.transaction() as db:
            idx = self._find_note_index(db, note_id, owner_id)
            if idx < 0:
                return None
            record = db["notes"][idx]
            record["title"] = title
            record["content"] = content
            record["updated_at"] = self._now()
        return Note.from_record(record)

    def delete_note(self, note_id: int, owner_id: int) -> bool:
        with self.storage.transaction() as db:
            idx = self._find_note_index(db, note_id, owner_id)
            if idx < 0:
                return False
            db["notes"].pop(idx)
        return True
