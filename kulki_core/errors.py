from __future__ import annotations


class KulkiError(Exception):
    """Base class for all rules-engine errors."""


class GridError(KulkiError, ValueError):
    """A grid mutation or lookup was not possible."""


class OutOfBounds(GridError):
    pass


class CellOccupied(GridError):
    pass


class SourceEmpty(GridError):
    pass


class NoPathExists(KulkiError):
    """No route of empty cells connects the two coordinates."""


class InvalidConfiguration(KulkiError, ValueError):
    """Board dimensions or counts cannot produce a playable game."""
