"""
Range types used to describe axes and resolved flat index progressions.

Axes and axis sub-ranges are plain ``range`` objects running over valid axis
indices, which need not start at 0. A contiguous diagonal of a linearly
addressed array is described by a :class:`FlatRange`.
"""

from typing import Iterator
from dataclasses import dataclass


def axis_range(first: int, length: int) -> range:
    """Valid indices of an axis starting at ``first`` with ``length`` elements."""
    return range(first, first + max(length, 0))


def offset_axis_range(axis: range, offset: int) -> range:
    """Portion of ``axis`` from ``first + offset`` to the last valid index."""
    return range(axis.start + offset, axis.stop)


@dataclass(frozen=True)
class FlatRange:
    """
    Arithmetic progression of flat (linear) indices.

    Attributes:
        start: First flat index
        step: Distance between consecutive flat indices
        count: Number of elements (clamped to be non-negative)
    """
    start: int
    step: int
    count: int

    def __post_init__(self):
        if self.count < 0:
            object.__setattr__(self, 'count', 0)

    @property
    def stop(self) -> int:
        """Last flat index of the progression (``start - step`` when empty)."""
        return self.start + (self.count - 1) * self.step

    def is_empty(self) -> bool:
        return self.count == 0

    def to_range(self) -> range:
        """Equivalent Python ``range``."""
        return range(self.start, self.start + self.count * self.step, self.step)

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[int]:
        return iter(self.to_range())

    def __getitem__(self, i: int) -> int:
        if i < 0:
            i += self.count
        if i < 0 or i >= self.count:
            raise IndexError(f"FlatRange index {i} out of range [0, {self.count})")
        return self.start + i * self.step

    def __repr__(self) -> str:
        return f"FlatRange({self.start}:{self.step}:{self.stop})"
