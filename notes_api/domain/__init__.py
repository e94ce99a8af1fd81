"""Domain records (accounts, notes, identities)."""

from .entities import Account, Identity, Note

__all__ = ["Account", "Identity", "Note"]
