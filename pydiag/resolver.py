"""
Translation of index expressions containing diagonal selectors.

``to_indices`` turns an index expression into the representations a
:class:`~pydiag.tensor_view.TensorView` reads and writes with:

- a :class:`FlatRange` when a diagonal selector is the only index of an array
  with LINEAR addressing,
- a :class:`DiagCartesianIndices` for a diagonal selector anywhere else,
- an axis coordinate (``int``) or a ``range`` of axis coordinates for ordinary
  scalar and range indices.

Every function here is pure: the result only depends on the selector and the
descriptor.
"""

from typing import Any, Optional, Sequence, Tuple
import numbers

import sympy as sp

from .diag_index import DiagIndex, diagonal
from .diag_coordinates import DiagCartesianIndices
from .exceptions import DimensionMismatchError, MisplacedSelectorError
from .index_ranges import FlatRange, offset_axis_range
from .tensor_descriptor import TensorDescriptor


def to_flat_range(desc: TensorDescriptor, dind: DiagIndex) -> FlatRange:
    """
    Flat indices of a diagonal used as the only index of a LINEAR array.

    Axes the selector spans beyond the array's dimensions are treated as having
    length 1: the diagonal is a single element when their offsets are all zero
    and empty otherwise.
    """
    n = dind.ndim
    na = desc.get_num_of_dimension()
    if n < na:
        raise DimensionMismatchError(
            f"DiagIndex has fewer dimensions ({n}) than the targeted array does ({na})")

    lengths = desc.get_lengths()
    strides = desc.get_strides()
    step = 0
    offset = 0
    length = max(lengths)

    for i in range(na):
        o = dind.offsets[i]
        step += strides[i]
        length = min(length, lengths[i] - o)
        offset += o * strides[i]

    # Extra axes continue the packed numbering past the last real axis.
    stride = desc.get_element_size()
    for i in range(na, n):
        o = dind.offsets[i]
        step += stride
        length = min(length, 1 - o)
        offset += o * stride

    return FlatRange(desc.first_flat_index + offset, step, max(length, 0))


def diagonal_coordinates(dind: DiagIndex, axes: Sequence[range]) -> DiagCartesianIndices:
    """
    Coordinates of a diagonal over the leading axes of ``axes``.

    When fewer axes remain than the selector spans, the diagonal is reduced to
    the single coordinate ``first + offset`` on each remaining axis, and is
    empty if any offset on a missing axis is non-zero.
    """
    n = dind.ndim
    o = dind.offsets
    if len(axes) >= n:
        return DiagCartesianIndices(tuple(offset_axis_range(axes[i], o[i]) for i in range(n)))

    m = len(axes)
    extent = 1 if all(x == 0 for x in o[m:]) else 0
    return DiagCartesianIndices(
        tuple(range(axes[i].start + o[i], min(axes[i].stop, axes[i].start + o[i] + extent))
              for i in range(m)),
        extent=extent
    )


def _to_axis_index(index: Any, axis: range) -> Any:
    """Resolve an ordinary scalar or range index against one axis."""
    if isinstance(index, numbers.Integral) and not isinstance(index, bool):
        return int(index)
    if isinstance(index, slice):
        start = axis.start if index.start is None else index.start
        stop = axis.stop if index.stop is None else index.stop
        step = 1 if index.step is None else index.step
        if step <= 0:
            raise IndexError(f"Slice step must be positive, got {step}")
        return range(start, stop, step)
    if isinstance(index, range):
        return index
    raise TypeError(f"Unsupported index type: {type(index).__name__}")


def resolve(selector: Any,
            desc: TensorDescriptor,
            remaining: Sequence[Any] = (),
            axes: Optional[Sequence[range]] = None) -> Tuple[Any, int]:
    """
    Resolve one index of an index expression.

    Args:
        selector: The index to resolve
        desc: Descriptor of the indexed array
        remaining: Indices following ``selector`` in the expression
        axes: Axes not consumed by earlier indices; None when ``selector`` is
            the first index

    Returns:
        Tuple of (representation, number of axes consumed)
    """
    sole = axes is None and len(remaining) == 0
    if axes is None:
        axes = desc.get_axes()

    if selector is diagonal:
        if remaining:
            raise MisplacedSelectorError("'diagonal' without arguments may only be used as the last index.")
        if sole and desc.is_linear():
            return to_flat_range(desc, DiagIndex.main(desc.get_num_of_dimension())), len(axes)
        if len(axes) == 0:
            return DiagCartesianIndices((), extent=1), 0
        return DiagCartesianIndices(tuple(axes)), len(axes)

    if isinstance(selector, DiagIndex):
        if sole:
            na = desc.get_num_of_dimension()
            if selector.ndim < na:
                raise DimensionMismatchError(
                    f"DiagIndex has fewer dimensions ({selector.ndim}) than the targeted array does ({na})")
            if desc.is_linear():
                return to_flat_range(desc, selector), na
        return diagonal_coordinates(selector, axes), min(selector.ndim, len(axes))

    if isinstance(selector, FlatRange):
        if not (sole and desc.is_linear()):
            raise TypeError("FlatRange is only valid as the sole index of a LINEAR array")
        return selector, len(axes)

    if isinstance(selector, DiagCartesianIndices):
        if selector.index_ndims > len(axes):
            raise IndexError(f"DiagCartesianIndices spans {selector.index_ndims} axes "
                             f"but only {len(axes)} remain")
        for sub, axis in zip(selector.ax, axes):
            if len(sub) > 0 and (sub[0] not in axis or sub[-1] not in axis):
                raise IndexError(f"Coordinate range {sub} leaves axis {axis}")
        return selector, selector.index_ndims

    if len(axes) == 0:
        raise IndexError(f"Too many indices for array with {desc.get_num_of_dimension()} dimensions")
    return _to_axis_index(selector, axes[0]), 1


def to_indices(desc: TensorDescriptor, indices: Any) -> Tuple[Any, ...]:
    """
    Resolve a complete index expression.

    Args:
        desc: Descriptor of the indexed array
        indices: A single index or a tuple of indices

    Returns:
        Tuple of representations, one per index, in index order
    """
    if not isinstance(indices, tuple):
        indices = (indices,)

    axes = desc.get_axes()
    resolved = []
    for k, index in enumerate(indices):
        rep, consumed = resolve(index, desc, indices[k + 1:], axes=None if k == 0 else axes)
        resolved.append(rep)
        axes = axes[consumed:]

    if len(axes) > 0:
        raise IndexError(f"Too few indices for array with {desc.get_num_of_dimension()} dimensions: "
                         f"{len(axes)} dimension(s) left unindexed")
    return tuple(resolved)


def checkbounds_indices(axes: Sequence[range], resolved: Sequence[Any]) -> bool:
    """
    Check resolved per-axis indices against ``axes``.

    Coordinate sequences are checked against their axes when resolved, so
    only the axes not covered by them are checked here.
    """
    if not resolved:
        return len(axes) == 0
    first, rest = resolved[0], resolved[1:]
    if isinstance(first, DiagCartesianIndices) and first.is_always_inbounds():
        return checkbounds_indices(axes[first.index_ndims:], rest)
    if len(axes) == 0:
        return False
    axis = axes[0]
    if isinstance(first, range):
        if len(first) > 0 and (first[0] not in axis or first[-1] not in axis):
            return False
    elif first not in axis:
        return False
    return checkbounds_indices(axes[1:], rest)


def checkbounds(desc: TensorDescriptor, resolved: Sequence[Any]) -> bool:
    """Check a resolved index expression against an array's descriptor."""
    if len(resolved) == 1 and isinstance(resolved[0], FlatRange):
        flat = resolved[0]
        if flat.is_empty():
            return True
        lo = desc.first_flat_index
        hi = lo + desc.get_element_size()
        return lo <= flat.start < hi and lo <= flat.stop < hi
    return checkbounds_indices(desc.get_axes(), resolved)


def symbolic_diagonal_flat_index(desc: TensorDescriptor, dind: DiagIndex,
                                 i: Optional[sp.Symbol] = None) -> sp.Expr:
    """
    Flat index of the ``i``-th diagonal element as a sympy expression.

    Only the selector's offsets on the array's own axes contribute. Raises
    ``ValueError`` when the diagonal has no elements.
    """
    if i is None:
        i = sp.Symbol('i', integer=True, nonnegative=True)
    na = desc.get_num_of_dimension()
    if any(o != 0 for o in dind.offsets[na:]) or any(
            n - o <= 0 for n, o in zip(desc.get_lengths(), dind.offsets)):
        raise ValueError(f"{dind!r} selects no elements of an array of shape {tuple(desc.get_lengths())}")
    offsets = list(dind.offsets[:na]) + [0] * max(na - dind.ndim, 0)
    coords = [desc.first_indices[d] + offsets[d] + i for d in range(na)]
    return sp.expand(desc.sympy_calculate_offset(coords))
