"""
Tensor views.

A tensor view combines a buffer view with a tensor descriptor and is the array
that diagonal selectors index. Indexing goes through
:func:`pydiag.resolver.to_indices`, which turns every index into a flat range,
a coordinate sequence, an axis coordinate or a range of axis coordinates; the
view then reads or writes the storage positions those describe.
"""

from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np
from dataclasses import dataclass

from .buffer_view import BufferView, make_buffer_view
from .diag_coordinates import DiagCartesianIndices
from .exceptions import DimensionMismatchError
from .index_ranges import FlatRange
from .resolver import checkbounds, to_indices
from .tensor_descriptor import (
    IndexStyle, TensorDescriptor, make_naive_tensor_descriptor, make_naive_tensor_descriptor_packed
)


@dataclass
class TensorView:
    """
    N-dimensional array over a buffer view.

    Accepts ordinary indices (integers, slices and ranges of axis indices) as
    well as diagonal selectors, both for reading and for assignment::

        view[diagonal]
        view[2, diagonal]
        view[DiagIndex(1, 0), 1] = [-8, -9, -10]

    Attributes:
        buffer_view: The underlying buffer view
        tensor_desc: The tensor descriptor defining the layout
    """

    buffer_view: BufferView
    tensor_desc: TensorDescriptor

    def __post_init__(self):
        """Validate tensor view after initialization."""
        if self.buffer_view is None:
            raise ValueError("Buffer view cannot be None")
        if self.tensor_desc is None:
            raise ValueError("Tensor descriptor cannot be None")

    def get_tensor_descriptor(self) -> TensorDescriptor:
        return self.tensor_desc

    def get_buffer_view(self) -> BufferView:
        return self.buffer_view

    def get_num_of_dimension(self) -> int:
        return self.tensor_desc.get_num_of_dimension()

    @property
    def ndim(self) -> int:
        return self.tensor_desc.get_num_of_dimension()

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(self.tensor_desc.get_lengths())

    @property
    def axes(self) -> Tuple[range, ...]:
        return self.tensor_desc.get_axes()

    @property
    def index_style(self) -> IndexStyle:
        return self.tensor_desc.index_style

    @property
    def dtype(self):
        return self.buffer_view.dtype

    def _resolve(self, indices: Any) -> Tuple[Any, ...]:
        resolved = to_indices(self.tensor_desc, indices)
        if not checkbounds(self.tensor_desc, resolved):
            raise IndexError(f"Index {indices!r} out of bounds for array with axes {self.axes}")
        return resolved

    def _storage_positions(self, resolved: Sequence[Any]) -> np.ndarray:
        """
        Storage positions selected by a resolved index expression.

        Scalars drop their axis; every other representation contributes one
        axis to the result.
        """
        desc = self.tensor_desc
        firsts = desc.first_indices
        strides = desc.strides

        positions = np.asarray(desc.base_offset, dtype=np.intp)
        dim = 0
        for rep in resolved:
            if isinstance(rep, DiagCartesianIndices):
                f = firsts[dim:dim + rep.index_ndims]
                s = strides[dim:dim + rep.index_ndims]
                part = np.fromiter(
                    (sum((c - fi) * si for c, fi, si in zip(coord, f, s)) for coord in rep),
                    dtype=np.intp, count=len(rep))
                dim += rep.index_ndims
            elif isinstance(rep, range):
                part = (np.arange(rep.start, rep.stop, rep.step, dtype=np.intp) - firsts[dim]) * strides[dim]
                dim += 1
            else:
                part = np.intp((rep - firsts[dim]) * strides[dim])
                dim += 1
            positions = np.add.outer(positions, part)
        return positions

    def get_at(self, indices: Any) -> Any:
        """
        Read the elements selected by an index expression.

        Args:
            indices: A single index or a tuple of indices

        Returns:
            A scalar when every index is a scalar, otherwise a numpy array
        """
        resolved = self._resolve(indices)
        if len(resolved) == 1 and isinstance(resolved[0], FlatRange):
            flat = resolved[0]
            start = self.tensor_desc.flat_index_to_offset(flat.start)
            return self.buffer_view.get_strided(start, flat.step, flat.count)

        positions = self._storage_positions(resolved)
        if positions.ndim == 0:
            return self.buffer_view.get(int(positions))
        return self.buffer_view.gather(positions)

    def set_at(self, indices: Any, values: Any) -> None:
        """
        Write the elements selected by an index expression.

        Every storage position and the value shape are checked before the
        first element is written.

        Args:
            indices: A single index or a tuple of indices
            values: Scalar for a scalar selection, otherwise an array-like of
                exactly the selection's shape
        """
        resolved = self._resolve(indices)
        values = np.asarray(values)

        if len(resolved) == 1 and isinstance(resolved[0], FlatRange):
            flat = resolved[0]
            if values.shape != (flat.count,):
                raise DimensionMismatchError(
                    f"Cannot assign values of shape {values.shape} to a selection of shape {(flat.count,)}")
            start = self.tensor_desc.flat_index_to_offset(flat.start)
            self.buffer_view.set_strided(start, flat.step, flat.count, values)
            return

        positions = self._storage_positions(resolved)
        if values.shape != positions.shape:
            raise DimensionMismatchError(
                f"Cannot assign values of shape {values.shape} to a selection of shape {positions.shape}")
        if positions.ndim == 0:
            self.buffer_view.set(int(positions), values[()])
        else:
            self.buffer_view.scatter(positions, values)

    def __getitem__(self, indices: Any) -> Any:
        return self.get_at(indices)

    def __setitem__(self, indices: Any, value: Any) -> None:
        self.set_at(indices, value)

    def get_element(self, idx: Sequence[int]) -> Any:
        """Get a single element at a coordinate tuple."""
        if not self.tensor_desc.is_valid_index(idx):
            raise IndexError(f"Index {list(idx)} out of bounds for array with axes {self.axes}")
        return self.buffer_view.get(self.tensor_desc.calculate_offset(idx))

    def set_element(self, idx: Sequence[int], value: Any) -> None:
        """Set a single element at a coordinate tuple."""
        if not self.tensor_desc.is_valid_index(idx):
            raise IndexError(f"Index {list(idx)} out of bounds for array with axes {self.axes}")
        self.buffer_view.set(self.tensor_desc.calculate_offset(idx), value)

    def get_element_by_flat_index(self, flat_index: int) -> Any:
        """Get element by flat index (LINEAR views only)."""
        return self.buffer_view.get(self.tensor_desc.flat_index_to_offset(flat_index))

    def set_element_by_flat_index(self, flat_index: int, value: Any) -> None:
        """Set element by flat index (LINEAR views only)."""
        self.buffer_view.set(self.tensor_desc.flat_index_to_offset(flat_index), value)

    def to_ndarray(self) -> np.ndarray:
        """Copy of the viewed elements as a numpy array of shape ``self.shape``."""
        return self.buffer_view.gather(self._storage_positions(self.axes))

    def permute_dims(self, perm: Sequence[int]) -> 'TensorView':
        """
        View of the same buffer with dimensions reordered.

        Dimension ``d`` of the result is dimension ``perm[d]`` of this view.
        The result has CARTESIAN addressing.
        """
        return TensorView(
            buffer_view=self.buffer_view,
            tensor_desc=self.tensor_desc.permute(perm)
        )

    def transpose(self) -> 'TensorView':
        """View with the order of all dimensions reversed."""
        return self.permute_dims(list(reversed(range(self.ndim))))

    def __repr__(self) -> str:
        """String representation."""
        return (f"TensorView(shape={self.shape}, "
                f"style={self.index_style.name}, "
                f"buffer_size={self.buffer_view.buffer_size})")


def make_tensor_view(data: np.ndarray, tensor_desc: TensorDescriptor) -> TensorView:
    """
    Create a tensor view from data and tensor descriptor.

    Args:
        data: One-dimensional numpy array containing the data
        tensor_desc: Tensor descriptor defining the layout

    Returns:
        TensorView instance
    """
    return TensorView(
        buffer_view=make_buffer_view(data=data, buffer_size=data.size),
        tensor_desc=tensor_desc
    )


def make_naive_tensor_view(data: np.ndarray,
                           lengths: List[int],
                           strides: List[int],
                           first_indices: Optional[List[int]] = None,
                           base_offset: int = 0) -> TensorView:
    """
    Create a tensor view with strided layout and CARTESIAN addressing.

    Args:
        data: One-dimensional numpy array containing the data
        lengths: Dimension lengths
        strides: Dimension strides
        first_indices: First valid index of each dimension
        base_offset: Storage position of the first element

    Returns:
        TensorView instance
    """
    tensor_desc = make_naive_tensor_descriptor(lengths, strides, first_indices, base_offset)
    return make_tensor_view(data, tensor_desc)


def make_naive_tensor_view_packed(data: np.ndarray,
                                  lengths: List[int],
                                  order: str = "C",
                                  first_index: Union[int, List[int]] = 0,
                                  first_flat_index: Optional[int] = None) -> TensorView:
    """
    Create a tensor view with packed layout and LINEAR addressing.

    Args:
        data: One-dimensional numpy array containing the data
        lengths: Dimension lengths
        order: "C" for row-major, "F" for column-major storage
        first_index: First valid index of every dimension, or one per dimension
        first_flat_index: Flat index of the first element

    Returns:
        TensorView instance
    """
    tensor_desc = make_naive_tensor_descriptor_packed(lengths, order, first_index, first_flat_index)
    return make_tensor_view(data, tensor_desc)


def make_tensor_view_from_ndarray(array: Any,
                                  order: str = "C",
                                  first_index: Union[int, List[int]] = 0,
                                  first_flat_index: Optional[int] = None) -> TensorView:
    """
    Create a packed tensor view holding the elements of an array.

    The elements are stored in ``order``; the storage shares memory with
    ``array`` when it is already contiguous in that order.

    Args:
        array: Array-like with at least one dimension
        order: "C" for row-major, "F" for column-major storage
        first_index: First valid index of every dimension, or one per dimension
        first_flat_index: Flat index of the first element

    Returns:
        TensorView instance
    """
    array = np.asarray(array)
    data = np.ravel(array, order=order)
    return make_naive_tensor_view_packed(data, list(array.shape), order, first_index, first_flat_index)
