"""
Tensor descriptors.

A tensor descriptor is the read-only shape of an array: per-axis lengths and
first valid indices, the strides mapping an axis coordinate to a storage
position, and whether the array supports flat (linear) addressing.
"""

from typing import List, Optional, Sequence, Tuple, Union
from enum import Enum, auto
import math

import numpy as np
import sympy as sp

from .index_ranges import axis_range


class IndexStyle(Enum):
    """Native addressing of an array."""
    LINEAR = auto()     # a single flat index addresses any element
    CARTESIAN = auto()  # elements need one coordinate per axis


class TensorDescriptor:
    """
    Strided layout of an N-dimensional array.

    The storage position of coordinate ``(c_0, ..., c_{N-1})`` is
    ``base_offset + sum((c_d - first_d) * stride_d)``. For LINEAR descriptors
    the flat index of that element is ``first_flat_index`` plus the same sum.
    """

    def __init__(self,
                 lengths: Sequence[int],
                 strides: Sequence[int],
                 first_indices: Optional[Sequence[int]] = None,
                 first_flat_index: int = 0,
                 index_style: IndexStyle = IndexStyle.CARTESIAN,
                 base_offset: int = 0):
        """
        Initialize tensor descriptor.

        Args:
            lengths: Axis lengths
            strides: Storage distance between neighbours along each axis
            first_indices: First valid index of each axis (defaults to zeros)
            first_flat_index: Flat index of the first element (LINEAR only)
            index_style: Native addressing of the described array
            base_offset: Storage position of the first element
        """
        if len(lengths) == 0:
            raise ValueError("Lengths cannot be empty")
        if len(lengths) != len(strides):
            raise ValueError(f"Lengths and strides must have same size: {len(lengths)} vs {len(strides)}")
        if first_indices is None:
            first_indices = [0] * len(lengths)
        if len(first_indices) != len(lengths):
            raise ValueError(f"Lengths and first indices must have same size: "
                             f"{len(lengths)} vs {len(first_indices)}")
        if any(length < 0 for length in lengths):
            raise ValueError(f"Lengths must be non-negative: {list(lengths)}")

        self.lengths = tuple(int(length) for length in lengths)
        self.strides = tuple(int(s) for s in strides)
        self.first_indices = tuple(int(f) for f in first_indices)
        self.first_flat_index = int(first_flat_index)
        self.index_style = index_style
        self.base_offset = int(base_offset)
        self.ndim = len(self.lengths)

    def get_num_of_dimension(self) -> int:
        """Get number of dimensions."""
        return self.ndim

    def get_length(self, dim: int) -> int:
        """Get length of a dimension."""
        if dim < 0 or dim >= self.ndim:
            raise IndexError(f"Dimension {dim} out of range")
        return self.lengths[dim]

    def get_lengths(self) -> List[int]:
        return list(self.lengths)

    def get_strides(self) -> List[int]:
        return list(self.strides)

    def get_axis(self, dim: int) -> range:
        """Valid indices along one dimension."""
        return axis_range(self.first_indices[dim], self.get_length(dim))

    def get_axes(self) -> Tuple[range, ...]:
        """Valid indices along every dimension."""
        return tuple(axis_range(f, n) for f, n in zip(self.first_indices, self.lengths))

    def get_element_size(self) -> int:
        """Number of addressable elements."""
        return math.prod(self.lengths)

    def get_element_space_size(self) -> int:
        """Number of storage positions spanned by the layout."""
        if self.get_element_size() == 0:
            return 0
        return int((np.array(self.lengths) - 1) @ np.abs(np.array(self.strides))) + 1

    def is_linear(self) -> bool:
        return self.index_style == IndexStyle.LINEAR

    def calculate_offset(self, idx: Sequence[int]) -> int:
        """Storage position of a coordinate tuple."""
        if len(idx) != self.ndim:
            raise ValueError(f"Index dimension {len(idx)} doesn't match descriptor dimension {self.ndim}")
        offset = self.base_offset
        for i in range(self.ndim):
            offset += (idx[i] - self.first_indices[i]) * self.strides[i]
        return offset

    def calculate_flat_index(self, idx: Sequence[int]) -> int:
        """Flat index of a coordinate tuple."""
        if not self.is_linear():
            raise TypeError("Flat indices are only defined for LINEAR descriptors")
        return self.calculate_offset(idx) - self.base_offset + self.first_flat_index

    def flat_index_to_offset(self, flat_index: int) -> int:
        """Storage position of a flat index."""
        if not self.is_linear():
            raise TypeError("Flat indices are only defined for LINEAR descriptors")
        return flat_index - self.first_flat_index + self.base_offset

    def is_valid_index(self, idx: Sequence[int]) -> bool:
        """Check if every coordinate lies within its axis."""
        return all(c in ax for c, ax in zip(idx, self.get_axes()))

    def permute(self, perm: Sequence[int]) -> 'TensorDescriptor':
        """
        Descriptor of the same storage with dimensions reordered.

        Dimension ``d`` of the result is dimension ``perm[d]`` of this
        descriptor. The result has CARTESIAN addressing.
        """
        if sorted(perm) != list(range(self.ndim)):
            raise ValueError(f"Permutation {list(perm)} must be a valid permutation of [0, {self.ndim})")
        return TensorDescriptor(
            lengths=[self.lengths[p] for p in perm],
            strides=[self.strides[p] for p in perm],
            first_indices=[self.first_indices[p] for p in perm],
            index_style=IndexStyle.CARTESIAN,
            base_offset=self.base_offset
        )

    def sympy_calculate_offset(self, upper_symbols: List[sp.Expr]) -> sp.Expr:
        """Flat index (storage position for CARTESIAN) as a function of coordinate symbols."""
        if len(upper_symbols) != self.ndim:
            raise ValueError(f"Upper symbols {len(upper_symbols)} doesn't match descriptor dimension {self.ndim}")
        base = self.first_flat_index if self.is_linear() else self.base_offset
        offset = sp.Integer(base)
        for i in range(self.ndim):
            offset += (upper_symbols[i] - self.first_indices[i]) * self.strides[i]
        return offset

    def __eq__(self, other) -> bool:
        if not isinstance(other, TensorDescriptor):
            return NotImplemented
        return (self.lengths == other.lengths and self.strides == other.strides
                and self.first_indices == other.first_indices
                and self.first_flat_index == other.first_flat_index
                and self.index_style == other.index_style
                and self.base_offset == other.base_offset)

    def __repr__(self) -> str:
        return (f"TensorDescriptor(lengths={list(self.lengths)}, strides={list(self.strides)}, "
                f"first_indices={list(self.first_indices)}, style={self.index_style.name})")


def packed_strides(lengths: Sequence[int], order: str = "C") -> List[int]:
    """Strides of a contiguous layout in row-major ("C") or column-major ("F") order."""
    ndim = len(lengths)
    strides = [1] * ndim
    if order == "C":
        for i in range(ndim - 2, -1, -1):
            strides[i] = strides[i + 1] * lengths[i + 1]
    elif order == "F":
        for i in range(1, ndim):
            strides[i] = strides[i - 1] * lengths[i - 1]
    else:
        raise ValueError(f"Order must be 'C' or 'F', got {order!r}")
    return strides


def make_naive_tensor_descriptor(lengths: List[int],
                                 strides: List[int],
                                 first_indices: Optional[List[int]] = None,
                                 base_offset: int = 0) -> TensorDescriptor:
    """
    Create a tensor descriptor with an arbitrary strided layout.

    Arbitrary strides do not give a contiguous flat numbering, so the
    descriptor uses CARTESIAN addressing.

    Args:
        lengths: Dimension lengths
        strides: Dimension strides
        first_indices: First valid index of each dimension
        base_offset: Storage position of the first element

    Returns:
        TensorDescriptor instance
    """
    return TensorDescriptor(
        lengths=lengths,
        strides=strides,
        first_indices=first_indices,
        index_style=IndexStyle.CARTESIAN,
        base_offset=base_offset
    )


def make_naive_tensor_descriptor_packed(lengths: List[int],
                                        order: str = "C",
                                        first_index: Union[int, List[int]] = 0,
                                        first_flat_index: Optional[int] = None) -> TensorDescriptor:
    """
    Create a tensor descriptor with packed layout (no padding).

    Args:
        lengths: Dimension lengths
        order: "C" for row-major, "F" for column-major storage
        first_index: First valid index of every dimension, or one per dimension
        first_flat_index: Flat index of the first element (defaults to the
            first index of dimension 0)

    Returns:
        TensorDescriptor instance with LINEAR addressing
    """
    if isinstance(first_index, int):
        first_indices = [first_index] * len(lengths)
    else:
        first_indices = list(first_index)
    if first_flat_index is None:
        first_flat_index = first_indices[0] if first_indices else 0

    return TensorDescriptor(
        lengths=lengths,
        strides=packed_strides(lengths, order),
        first_indices=first_indices,
        first_flat_index=first_flat_index,
        index_style=IndexStyle.LINEAR
    )
