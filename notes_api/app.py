"""Application factory for the notes API."""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from notes_api.core.config import Settings, get_settings
from notes_api.core.errors import register_exception_handlers
from notes_api.core.logging_setup import configure_logging
from notes_api.core.rate_limiter import RateLimiter
from notes_api.repositories import DocumentRepository, JsonStorage
from notes_api.routers import auth as auth_router
from notes_api.routers import notes as notes_router
from notes_api.services import AuthService, NoteService, ProfileService

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", "default-src 'self'; img-src 'self' data:")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _allowed_origins(settings: Settings) -> list[str]:
    allowed = {settings.public_base_url}
    if settings.app_env != "prod":
        allowed.update(
            {
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:8000",
                "http://127.0.0.1:8000",
            }
        )
    return sorted(origin for origin in allowed if origin)


def create_app(settings: Settings | None = None, storage: JsonStorage | None = None) -> FastAPI:
    """Build a fully wired app; pass ``storage`` to isolate tests from the real document."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    storage = storage or JsonStorage(settings.db_path, recover_corrupt=settings.recover_corrupt_db)
    repository = DocumentRepository(storage)

    app = FastAPI(title="Personal Notes API")
    app.state.settings = settings
    app.state.repository = repository
    app.state.rate_limiter = RateLimiter(trust_proxy_headers=settings.trust_proxy_headers)
    app.state.auth_service = AuthService(repository=repository, settings=settings)
    app.state.note_service = NoteService(repository=repository)
    app.state.profile_service = ProfileService(
        repository=repository,
        uploads_dir=settings.uploads_dir,
        max_upload_bytes=settings.max_upload_bytes,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    register_exception_handlers(app)

    settings.uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.uploads_dir), name="uploads")

    app.include_router(auth_router.router)
    app.include_router(notes_router.router)

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok"}

    logger.info("Notes API ready (env=%s, document=%s)", settings.app_env, storage.path)
    return app
