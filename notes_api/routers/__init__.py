"""
FastAPI routers grouped by domain (auth/profile, notes).

Each module exposes an APIRouter included by ``notes_api.app.create_app``.
Routers resolve their services from ``request.app.state`` through the
helpers in ``deps``.
"""
