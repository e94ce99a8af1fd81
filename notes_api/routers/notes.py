from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from notes_api.domain.entities import Identity
from notes_api.routers.deps import get_note_service
from notes_api.schemas import NoteRequest
from notes_api.services.note_service import NoteService
from notes_api.services.session_service import current_identity

router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("")
def list_notes(identity: Identity = Depends(current_identity), notes: NoteService = Depends(get_note_service)):
    return [note.to_dict() for note in notes.list_notes(identity)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_note(
    body: NoteRequest,
    identity: Identity = Depends(current_identity),
    notes: NoteService = Depends(get_note_service),
):
    return notes.create_note(identity, body.title, body.content).to_dict()


@router.get("/{note_id}")
def get_note(
    note_id: int = Path(..., ge=1),
    identity: Identity = Depends(current_identity),
    notes: NoteService = Depends(get_note_service),
):
    return notes.get_note(identity, note_id).to_dict()


@router.put("/{note_id}")
def update_note(
    body: NoteRequest,
    note_id: int = Path(..., ge=1),
    identity: Identity = Depends(current_identity),
    notes: NoteService = Depends(get_note_service),
):
    return notes.update_note(identity, note_id, body.title, body.content).to_dict()


@router.delete("/{note_id}")
def delete_note(
    note_id: int = Path(..., ge=1),
    identity: Identity = Depends(current_identity),
    notes: NoteService = Depends(get_note_service),
):
    notes.delete_note(identity, note_id)
    return {"success": True, "message": f"Note {note_id} deleted."}
