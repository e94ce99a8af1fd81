"""
Note use cases scoped to the caller's identity.
"""

from __future__ import annotations

from dataclasses import dataclass

from notes_api.core.errors import NotFound, ValidationError
from notes_api.domain.entities import Identity, Note
from notes_api.repositories.document_repository import DocumentRepository

NOTE_NOT_FOUND = "Note not found"


@dataclass
class NoteService:
    repository: DocumentRepository

    @staticmethod
    def _clean(title: str | None, content: str | None) -> tuple[str, str]:
        title_value = (title or "").strip()
        content_value = content or ""
        if not title_value or not content_value.strip():
            raise ValidationError("Title and content required")
        return title_value, content_value

    def list_notes(self, identity: Identity) -> list[Note]:
        return self.repository.list_notes_for_account(identity.account_id)

    def get_note(self, identity: Identity, note_id: int) -> Note:
        note = self.repository.find_note(note_id, identity.account_id)
        if not note:
            raise NotFound(NOTE_NOT_FOUND)
        return note

    def create_note(self, identity: Identity, title: str | None, content: str | None) -> Note:
        title_value, content_value = self._clean(title, content)
        return self.repository.create_note(identity.account_id, title_value, content_value)

    def update_note(self, identity: Identity, note_id: int, title: str | None, content: str | None) -> Note:
        title_value, content_value = self._clean(title, content)
        note = self.repository.update_note(note_id, identity.account_id, title_value, content_value)
        # another account's note and a missing note look the same to the caller
        if not note:
            raise NotFound(NOTE_NOT_FOUND)
        return note

    def delete_note(self, identity: Identity, note_id: int) -> None:
        if not self.repository.delete_note(note_id, identity.account_id):
            raise NotFound(NOTE_NOT_FOUND)
