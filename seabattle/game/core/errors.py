"""Domain error taxonomy for strike resolution and field generation."""

from __future__ import annotations


class SeaBattleError(Exception):
    """Base class for all domain errors."""


class OutOfBoundsError(SeaBattleError, IndexError):
    """Strike coordinate falls outside the field."""

    def __init__(self, x: int, y: int, size: int) -> None:
        super().__init__(f"Coordinate ({x}, {y}) is outside a {size}x{size} field.")
        self.x = x
        self.y = y
        self.size = size


class InvalidManifestError(SeaBattleError, ValueError):
    """Ship manifest cannot populate a field of the requested size."""


class ManifestFormatError(InvalidManifestError):
    """Manifest payload is malformed."""


class FieldGenerationError(SeaBattleError, RuntimeError):
    """Field layout could not be built."""
