"""
High-level use cases for the notes API.

Routers call these services instead of touching the repository or the JSON
document directly. Service instances are built once per app in
``notes_api.app.create_app`` and stored on ``app.state``.
"""

from .auth_service import AuthResult, AuthService
from .note_service import NoteService
from .profile_service import ProfileService, ProfileSummary

__all__ = ["AuthResult", "AuthService", "NoteService", "ProfileService", "ProfileSummary"]
