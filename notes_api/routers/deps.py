"""Dependency helpers resolving per-app services."""
from __future__ import annotations

from fastapi import Request

from notes_api.services.auth_service import AuthService
from notes_api.services.note_service import NoteService
from notes_api.services.profile_service import ProfileService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_note_service(request: Request) -> NoteService:
    return request.app.state.note_service


def get_profile_service(request: Request) -> ProfileService:
    return request.app.state.profile_service
