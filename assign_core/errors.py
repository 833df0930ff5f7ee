from __future__ import annotations


class InvalidMove(ValueError):
    """The claimed source position does not hold the item, or the source is not the pool."""


class PersistenceFailure(RuntimeError):
    """The snapshot gateway did not acknowledge a save. Safe to retry."""
