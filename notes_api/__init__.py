"""Personal notes API: JSON document store, token auth and FastAPI routers."""

__version__ = "1.0.0"
