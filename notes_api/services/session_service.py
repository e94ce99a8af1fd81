"""Bearer-token helpers (header parsing, identity resolution)."""
from __future__ import annotations

from fastapi import Request

from notes_api.core.errors import Unauthenticated
from notes_api.domain.entities import Identity

AUTH_HEADER_NAME = "authorization"
BEARER_PREFIX = "bearer "


def bearer_token(request: Request) -> str | None:
    """Return the token from ``Authorization: Bearer <token>``, if any."""
    header = request.headers.get(AUTH_HEADER_NAME) or ""
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def current_identity(request: Request) -> Identity:
    """FastAPI dependency: verified identity of the caller."""
    token = bearer_token(request)
    if not token:
        raise Unauthenticated("Access token required")
    return request.app.state.auth_service.verify_token(token)
