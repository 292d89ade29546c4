"""
Diagonal selectors.

A diagonal selector is used as an index in an indexing expression and denotes
the diagonal elements over one or more consecutive axes of an array.

``diagonal`` selects the main diagonal over all remaining axes and may only be
used as the last index. ``diagonal(o_1, ..., o_N)`` (or ``DiagIndex(o_1, ..., o_N)``)
selects the diagonal starting at ``(first_1 + o_1, ..., first_N + o_N)`` on ``N``
consecutive axes.

Example:
    >>> A = make_tensor_view_from_ndarray(np.arange(36).reshape(4, 3, 3))
    >>> A[diagonal]           # A[0,0,0], A[1,1,1], A[2,2,2]
    >>> A[3, diagonal]        # A[3,0,0], A[3,1,1], A[3,2,2]
    >>> A[DiagIndex(1, 0), 2] = [-8, -9, -10]
"""

from typing import Tuple
from dataclasses import dataclass
import numbers

from .exceptions import InvalidSelectorError


@dataclass(frozen=True, init=False, repr=False)
class DiagIndex:
    """
    Diagonal along ``N`` consecutive axes with non-negative per-axis offsets.

    The number of axes is fixed at construction and is part of the selector's
    identity: ``DiagIndex(0, 0)`` and ``DiagIndex(0, 0, 0)`` compare unequal.

    Attributes:
        offsets: Offset from the first valid index of each spanned axis
    """
    offsets: Tuple[int, ...]

    def __init__(self, *offsets: int):
        if len(offsets) == 0:
            raise InvalidSelectorError("DiagIndex must span at least one axis")
        for o in offsets:
            if isinstance(o, bool) or not isinstance(o, numbers.Integral):
                raise InvalidSelectorError(f"Diagonal offsets must be integers. Got {offsets}")
        if not all(o >= 0 for o in offsets):
            raise InvalidSelectorError(f"Diagonal offsets must all be >= 0. Got {offsets}")
        object.__setattr__(self, 'offsets', tuple(int(o) for o in offsets))

    @classmethod
    def main(cls, ndim: int) -> 'DiagIndex':
        """Main diagonal on ``ndim`` consecutive axes."""
        return cls(*([0] * ndim))

    @property
    def ndim(self) -> int:
        """Number of consecutive axes spanned by the selector."""
        return len(self.offsets)

    def __repr__(self) -> str:
        return f"DiagIndex{self.offsets}"


class Diagonal:
    """
    Type of the unsized ``diagonal`` selector.

    There is exactly one instance, ``diagonal``. Calling it with offsets builds
    a :class:`DiagIndex`.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __call__(self, *offsets: int):
        if not offsets:
            return self
        return DiagIndex(*offsets)

    def __reduce__(self):
        return (Diagonal, ())

    def __repr__(self) -> str:
        return "diagonal"


diagonal = Diagonal()


def is_diagonal_selector(index) -> bool:
    """Check whether an index is ``diagonal`` or a :class:`DiagIndex`."""
    return index is diagonal or isinstance(index, DiagIndex)
