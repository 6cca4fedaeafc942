"""Error types raised by the Sokoban backend."""

from __future__ import annotations


class SokobanError(Exception):
    """Base class for every error the backend raises on purpose."""


class OutOfBounds(SokobanError, IndexError):
    """A grid was read or written outside its extent."""


class MalformedLevel(SokobanError, ValueError):
    """A level description has inconsistent dimensions or unknown tokens."""


class InvalidLevel(SokobanError, ValueError):
    """A level index outside the configured range was requested."""


class SnapshotCorrupt(SokobanError, ValueError):
    """Saved level state could not be decoded into a valid level."""
