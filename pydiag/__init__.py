"""
pydiag - Diagonal indexing for N-dimensional arrays

This package provides diagonal selectors that can be used as indices of
N-dimensional tensor views, together with the translation of those selectors
into flat index progressions or lazily generated coordinate sequences.
"""

# Errors
from .exceptions import (
    DiagonalIndexError,
    InvalidSelectorError,
    MisplacedSelectorError,
    DimensionMismatchError
)

# Diagonal selectors
from .diag_index import (
    DiagIndex,
    Diagonal,
    diagonal,
    is_diagonal_selector
)

# Index representations
from .index_ranges import (
    FlatRange,
    axis_range,
    offset_axis_range
)
from .diag_coordinates import DiagCartesianIndices

# Tensor descriptors
from .tensor_descriptor import (
    IndexStyle,
    TensorDescriptor,
    packed_strides,
    make_naive_tensor_descriptor,
    make_naive_tensor_descriptor_packed
)

# Selector resolution
from .resolver import (
    resolve,
    to_indices,
    to_flat_range,
    diagonal_coordinates,
    checkbounds,
    checkbounds_indices,
    symbolic_diagonal_flat_index
)

# Buffer and tensor views
from .buffer_view import (
    BufferView,
    make_buffer_view
)
from .tensor_view import (
    TensorView,
    make_tensor_view,
    make_naive_tensor_view,
    make_naive_tensor_view_packed,
    make_tensor_view_from_ndarray
)

__all__ = [
    # Errors
    'DiagonalIndexError',
    'InvalidSelectorError',
    'MisplacedSelectorError',
    'DimensionMismatchError',

    # Diagonal selectors
    'DiagIndex',
    'Diagonal',
    'diagonal',
    'is_diagonal_selector',

    # Index representations
    'FlatRange',
    'axis_range',
    'offset_axis_range',
    'DiagCartesianIndices',

    # Tensor descriptors
    'IndexStyle',
    'TensorDescriptor',
    'packed_strides',
    'make_naive_tensor_descriptor',
    'make_naive_tensor_descriptor_packed',

    # Selector resolution
    'resolve',
    'to_indices',
    'to_flat_range',
    'diagonal_coordinates',
    'checkbounds',
    'checkbounds_indices',
    'symbolic_diagonal_flat_index',

    # Buffer and tensor views
    'BufferView',
    'make_buffer_view',
    'TensorView',
    'make_tensor_view',
    'make_naive_tensor_view',
    'make_naive_tensor_view_packed',
    'make_tensor_view_from_ndarray',
]

__version__ = '0.1.0'
