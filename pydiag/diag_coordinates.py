"""
Lazy sequence of diagonal coordinates.

Resolving a diagonal selector against an array without flat addressing needs a
collection of multi-axis coordinates. Building that collection explicitly costs
O(length) time and memory, so :class:`DiagCartesianIndices` computes each
coordinate on demand from the axis sub-ranges it was built from.
"""

from typing import Iterator, Optional, Tuple
from collections.abc import Sequence


class DiagCartesianIndices(Sequence):
    """
    Virtual sequence of coordinate tuples along a diagonal.

    Element ``i`` is ``(ax[0][i], ..., ax[K-1][i])``; the length is the minimum
    of the sub-range lengths. Instances are immutable and always in bounds for
    the array whose axes produced the sub-ranges.

    Attributes:
        ax: Axis sub-ranges, one per spanned axis, already offset-adjusted
        extent: Optional cap on the length from axes the array does not have
    """

    __slots__ = ('_ax', '_extent')

    def __init__(self, ax: Tuple[range, ...], extent: Optional[int] = None):
        """
        Initialize the coordinate sequence.

        Args:
            ax: Tuple of axis sub-ranges
            extent: Length cap for virtual axes beyond the array's own axes
                (1 when their offsets are all zero, 0 otherwise). Required when
                ``ax`` is empty.
        """
        if len(ax) == 0 and extent is None:
            raise ValueError("DiagCartesianIndices over no axes requires an extent")
        self._ax = tuple(ax)
        self._extent = extent

    @property
    def ax(self) -> Tuple[range, ...]:
        return self._ax

    @property
    def extent(self) -> Optional[int]:
        return self._extent

    def length(self) -> int:
        """Number of coordinates along the diagonal."""
        lengths = [len(r) for r in self._ax]
        if self._extent is not None:
            lengths.append(max(self._extent, 0))
        return min(lengths)

    def at(self, i: int) -> Tuple[int, ...]:
        """Coordinate tuple at position ``i`` (``0 <= i < length()``)."""
        n = self.length()
        if i < 0 or i >= n:
            raise IndexError(f"Diagonal position {i} out of range [0, {n})")
        return tuple(r[i] for r in self._ax)

    @property
    def shape(self) -> Tuple[int]:
        return (self.length(),)

    @property
    def index_ndims(self) -> int:
        """Number of index positions a single coordinate occupies."""
        return len(self._ax)

    def is_always_inbounds(self) -> bool:
        # The sub-ranges are taken from the array's own axes.
        return True

    def __len__(self) -> int:
        return self.length()

    def __getitem__(self, i: int) -> Tuple[int, ...]:
        if isinstance(i, slice):
            raise TypeError("DiagCartesianIndices does not support slicing")
        if i < 0:
            i += self.length()
        return self.at(i)

    def __iter__(self) -> Iterator[Tuple[int, ...]]:
        for i in range(self.length()):
            yield tuple(r[i] for r in self._ax)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DiagCartesianIndices):
            return NotImplemented
        return self._ax == other._ax and self._extent == other._extent

    def __hash__(self) -> int:
        return hash((self._ax, self._extent))

    def __repr__(self) -> str:
        return f"DiagCartesianIndices({self._ax}, length={self.length()})"
