from __future__ import annotations


class PersistenceError(Exception):
    """Store failure: constraint violation, lost connection or bad query."""
