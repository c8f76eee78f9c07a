"""Exception hierarchy for range allocation and identifier minting."""

from __future__ import annotations


class IDSlicerError(Exception):
    """Base class for all errors raised by idslicer."""


class InvalidArgumentError(IDSlicerError, ValueError):
    """Raised for a negative size, a bad width, or any other out-of-domain input."""


class InvalidRangeError(IDSlicerError):
    """Raised when range bounds are malformed or fall outside the namespace."""


class DuplicateRangeIdError(IDSlicerError):
    """Raised when an explicit insert reuses an existing range id."""


class OverlappingRangeError(IDSlicerError):
    """Raised when an explicit insert intersects a range already in the registry."""


class RangeNotFoundError(IDSlicerError):
    """Raised when a named lookup fails or no free interval is large enough."""

    def __init__(self, message: str, names: list[str] | None = None) -> None:
        super().__init__(message)
        self.names = names or []


class IDSpaceExhaustedError(IDSlicerError):
    """Raised when a generator runs out of identifiers in its bounds."""


class InvalidPolicyError(IDSlicerError):
    """Raised when a policy document cannot be turned into a valid registry."""
