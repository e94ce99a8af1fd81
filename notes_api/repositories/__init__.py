"""
Persistence adapters.

``JsonStorage`` owns the single JSON document; ``DocumentRepository`` exposes
typed account/note operations on top of it. Services depend on the repository
and never touch the JSON file directly.
"""

from .document_repository import DocumentRepository
from .json_storage import JsonStorage

__all__ = ["DocumentRepository", "JsonStorage"]
