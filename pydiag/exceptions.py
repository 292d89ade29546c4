"""
Exception types raised by pydiag.

Each error also derives from the builtin exception a caller would naturally
catch for the same mistake.
"""


class DiagonalIndexError(Exception):
    """Base class for pydiag-specific exceptions."""


class InvalidSelectorError(DiagonalIndexError, ValueError):
    """A diagonal selector was constructed with invalid offsets."""


class MisplacedSelectorError(DiagonalIndexError, IndexError):
    """The unsized ``diagonal`` selector was followed by further indices."""


class DimensionMismatchError(DiagonalIndexError, ValueError):
    """Selector or assigned value does not match the dimensions of the array."""
