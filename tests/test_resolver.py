"""
Tests for resolver module.
"""

import pytest
import sympy as sp
import sys
sys.path.append('..')

from pydiag.diag_index import DiagIndex, diagonal
from pydiag.diag_coordinates import DiagCartesianIndices
from pydiag.exceptions import DimensionMismatchError, MisplacedSelectorError
from pydiag.index_ranges import FlatRange
from pydiag.resolver import (
    resolve, to_indices, to_flat_range, diagonal_coordinates,
    checkbounds, checkbounds_indices, symbolic_diagonal_flat_index
)
from pydiag.tensor_descriptor import (
    make_naive_tensor_descriptor, make_naive_tensor_descriptor_packed
)


@pytest.fixture
def matrix_desc():
    """4x3 column-major descriptor with 1-based indices."""
    return make_naive_tensor_descriptor_packed([4, 3], order="F", first_index=1)


@pytest.fixture
def tensor_desc():
    """4x3x3 row-major descriptor with 0-based indices."""
    return make_naive_tensor_descriptor_packed([4, 3, 3])


class TestLinearResolution:
    """Test cases for the flat-range fast path."""

    def test_unsized_alone(self, matrix_desc):
        """Test the main diagonal as sole index."""
        rep, consumed = resolve(diagonal, matrix_desc)
        assert rep == FlatRange(1, 5, 3)
        assert consumed == 2

    def test_sized_alone(self, matrix_desc):
        """Test offset diagonals as sole index."""
        assert to_indices(matrix_desc, DiagIndex(0, 0)) == (FlatRange(1, 5, 3),)
        assert to_indices(matrix_desc, DiagIndex(1, 0)) == (FlatRange(2, 5, 3),)
        assert to_indices(matrix_desc, DiagIndex(0, 1)) == (FlatRange(5, 5, 2),)

    def test_three_dimensional(self):
        """Test the main diagonal of a 3x4x5 column-major tensor."""
        desc = make_naive_tensor_descriptor_packed([3, 4, 5], order="F", first_index=1)
        assert to_flat_range(desc, DiagIndex.main(3)) == FlatRange(1, 16, 3)

    def test_row_major(self, tensor_desc):
        """Test that row-major strides give the matching progression."""
        # strides (9, 3, 1)
        assert to_flat_range(tensor_desc, DiagIndex(0, 0, 0)) == FlatRange(0, 13, 3)
        assert to_flat_range(tensor_desc, DiagIndex(1, 0, 0)) == FlatRange(9, 13, 3)
        assert to_flat_range(tensor_desc, DiagIndex(0, 0, 2)) == FlatRange(2, 13, 1)

    def test_one_dimensional(self):
        """Test that a vector's diagonal is the whole vector."""
        desc = make_naive_tensor_descriptor_packed([5])
        assert to_indices(desc, diagonal) == (FlatRange(0, 1, 5),)

    def test_offset_past_axis_is_empty(self, matrix_desc):
        """Test that large offsets give an empty progression."""
        flat = to_flat_range(matrix_desc, DiagIndex(7, 0))
        assert flat.count == 0
        assert list(flat) == []

    def test_extra_axes_zero_offset(self, matrix_desc):
        """Test a selector with more axes than the array."""
        flat = to_flat_range(matrix_desc, DiagIndex(0, 0, 0))
        assert flat.count == 1
        assert flat.start == 1

    def test_extra_axes_nonzero_offset(self, matrix_desc):
        """Test that a non-zero offset on an extra axis empties the diagonal."""
        assert to_flat_range(matrix_desc, DiagIndex(0, 0, 1)).count == 0
        assert to_flat_range(matrix_desc, DiagIndex(0, 0, 0, 2)).count == 0

    def test_fewer_axes_than_array(self, matrix_desc):
        """Test that a selector spanning too few axes is rejected."""
        with pytest.raises(DimensionMismatchError, match="fewer dimensions"):
            to_indices(matrix_desc, DiagIndex(0))

    def test_flat_range_passthrough(self, matrix_desc):
        """Test that a FlatRange is accepted as sole index."""
        flat = FlatRange(1, 5, 3)
        assert to_indices(matrix_desc, flat) == (flat,)

    def test_idempotent(self, matrix_desc):
        """Test that resolving twice gives the same result."""
        assert resolve(DiagIndex(1, 0), matrix_desc) == resolve(DiagIndex(1, 0), matrix_desc)


class TestCartesianResolution:
    """Test cases for coordinate-sequence resolution."""

    def test_unsized_alone_cartesian(self, matrix_desc):
        """Test the main diagonal of a CARTESIAN array."""
        desc = matrix_desc.permute([1, 0])
        rep, consumed = resolve(diagonal, desc)
        assert rep == DiagCartesianIndices((range(1, 4), range(1, 5)))
        assert consumed == 2
        assert len(rep) == 3

    def test_sized_alone_cartesian(self, matrix_desc):
        """Test an offset diagonal of a CARTESIAN array."""
        desc = matrix_desc.permute([1, 0])
        (rep,) = to_indices(desc, DiagIndex(0, 1))
        assert list(rep) == [(1, 2), (2, 3), (3, 4)]

    def test_fewer_axes_than_array_cartesian(self, matrix_desc):
        """Test that the axis-count check applies to CARTESIAN arrays too."""
        desc = matrix_desc.permute([1, 0])
        with pytest.raises(DimensionMismatchError):
            to_indices(desc, DiagIndex(0))

    def test_flat_range_rejected_for_cartesian(self, matrix_desc):
        """Test that FlatRange needs flat addressing."""
        with pytest.raises(TypeError):
            to_indices(matrix_desc.permute([1, 0]), FlatRange(1, 5, 3))

    def test_trailing_unsized(self, tensor_desc):
        """Test diagonal after a scalar index."""
        resolved = to_indices(tensor_desc, (2, diagonal))
        assert resolved == (2, DiagCartesianIndices((range(0, 3), range(0, 3))))

    def test_leading_sized(self, tensor_desc):
        """Test a sized selector followed by a scalar index."""
        resolved = to_indices(tensor_desc, (DiagIndex(1, 0), 1))
        assert resolved == (DiagCartesianIndices((range(1, 4), range(0, 3))), 1)
        assert list(resolved[0]) == [(1, 0), (2, 1), (3, 2)]

    def test_two_selectors(self):
        """Test two sized selectors in one expression."""
        desc = make_naive_tensor_descriptor_packed([3, 3, 2, 4])
        first, second = to_indices(desc, (DiagIndex(0, 1), DiagIndex(0, 0)))
        assert list(first) == [(0, 1), (1, 2)]
        assert list(second) == [(0, 0), (1, 1)]

    def test_misplaced_unsized(self, tensor_desc):
        """Test that the unsized selector must be last."""
        with pytest.raises(MisplacedSelectorError, match="last index"):
            to_indices(tensor_desc, (diagonal, 0))
        with pytest.raises(IndexError):
            to_indices(tensor_desc, (0, diagonal, 1))

    def test_fewer_axes_remaining(self, tensor_desc):
        """Test a selector spanning more axes than remain."""
        (_, _, rep) = to_indices(tensor_desc, (0, 0, DiagIndex(1, 0)))
        assert rep == DiagCartesianIndices((range(1, 2),), extent=1)
        assert list(rep) == [(1,)]

    def test_fewer_axes_remaining_nonzero_offset(self, tensor_desc):
        """Test that a non-zero offset on a missing axis empties the selection."""
        (_, _, rep) = to_indices(tensor_desc, (0, 0, DiagIndex(1, 2)))
        assert len(rep) == 0

    def test_offset_past_remaining_axis(self, tensor_desc):
        """Test a degenerate selector whose offset leaves its axis."""
        (_, _, rep) = to_indices(tensor_desc, (0, 0, DiagIndex(5, 0)))
        assert len(rep) == 0

    def test_no_axes_remaining(self, tensor_desc):
        """Test a selector after every axis is consumed."""
        resolved = to_indices(tensor_desc, (0, 0, 0, DiagIndex(0)))
        assert resolved[3] == DiagCartesianIndices((), extent=1)

    def test_diagonal_coordinates(self):
        """Test sub-range construction."""
        axes = (range(1, 5), range(0, 3), range(2, 4))
        assert diagonal_coordinates(DiagIndex(1, 0), axes).ax == (range(2, 5), range(0, 3))
        assert diagonal_coordinates(DiagIndex(0, 0, 1), axes).ax == (range(1, 5), range(0, 3), range(3, 4))


class TestOrdinaryIndices:
    """Test cases for scalar and range indices."""

    def test_scalars(self, tensor_desc):
        """Test all-scalar expressions."""
        assert to_indices(tensor_desc, (1, 2, 0)) == (1, 2, 0)

    def test_slices(self, tensor_desc):
        """Test slice resolution."""
        resolved = to_indices(tensor_desc, (slice(1, 3), slice(None), slice(None, None, 2)))
        assert resolved == (range(1, 3), range(0, 3), range(0, 3, 2))

    def test_slice_non_positive_step(self, tensor_desc):
        """Test that reversed slices are rejected."""
        with pytest.raises(IndexError, match="step"):
            to_indices(tensor_desc, (slice(None, None, -1), 0, 0))

    def test_ranges(self, tensor_desc):
        """Test range indices."""
        assert to_indices(tensor_desc, (range(2), 0, 1)) == (range(2), 0, 1)

    def test_too_few_indices(self, tensor_desc):
        """Test expressions leaving axes unindexed."""
        with pytest.raises(IndexError, match="Too few"):
            to_indices(tensor_desc, (0, 0))

    def test_too_many_indices(self, tensor_desc):
        """Test expressions with more indices than axes."""
        with pytest.raises(IndexError, match="Too many"):
            to_indices(tensor_desc, (0, 0, 0, 0))

    def test_unsupported_index(self, tensor_desc):
        """Test unsupported index objects."""
        with pytest.raises(TypeError, match="Unsupported index"):
            to_indices(tensor_desc, ("a", 0, 0))


class TestCheckbounds:
    """Test cases for bounds checking of resolved indices."""

    def test_in_bounds(self, tensor_desc):
        """Test valid expressions."""
        assert checkbounds(tensor_desc, to_indices(tensor_desc, (3, diagonal)))
        assert checkbounds(tensor_desc, to_indices(tensor_desc, (slice(0, 4), 2, 2)))

    def test_scalar_out_of_bounds(self, tensor_desc):
        """Test a scalar outside its axis."""
        assert not checkbounds(tensor_desc, to_indices(tensor_desc, (4, diagonal)))
        assert not checkbounds(tensor_desc, to_indices(tensor_desc, (-1, 0, 0)))

    def test_range_out_of_bounds(self, tensor_desc):
        """Test a range leaving its axis."""
        assert not checkbounds(tensor_desc, to_indices(tensor_desc, (slice(0, 5), 0, 0)))

    def test_coordinate_sequence_skips_axes(self):
        """Test that coordinate sequences are not checked."""
        axes = (range(0, 2), range(0, 2), range(0, 3))
        ind = DiagCartesianIndices((range(0, 2), range(0, 2)))
        assert checkbounds_indices(axes, (ind, 2))
        assert not checkbounds_indices(axes, (ind, 3))

    def test_direct_coordinate_sequence_checked(self):
        """Test that a coordinate sequence passed as an index must lie within its axes."""
        desc = make_naive_tensor_descriptor_packed([3, 3])
        inside = DiagCartesianIndices((range(0, 3), range(0, 3)))
        assert resolve(inside, desc) == (inside, 2)
        with pytest.raises(IndexError):
            resolve(DiagCartesianIndices((range(0, 3), range(2, 5))), desc)
        with pytest.raises(IndexError):
            to_indices(desc, (DiagCartesianIndices((range(-1, 2),)), 0))

    def test_flat_range(self, matrix_desc):
        """Test flat range bounds."""
        assert checkbounds(matrix_desc, (FlatRange(1, 5, 3),))
        assert checkbounds(matrix_desc, (FlatRange(40, 5, 0),))
        assert not checkbounds(matrix_desc, (FlatRange(1, 5, 4),))
        assert not checkbounds(matrix_desc, (FlatRange(0, 5, 2),))


class TestSymbolicFlatIndex:
    """Test cases for the symbolic diagonal formula."""

    def test_matches_flat_range(self, matrix_desc):
        """Test that the formula is start + i*step."""
        i = sp.Symbol('i', integer=True, nonnegative=True)
        for dind in [DiagIndex(0, 0), DiagIndex(1, 0), DiagIndex(0, 1)]:
            flat = to_flat_range(matrix_desc, dind)
            expr = symbolic_diagonal_flat_index(matrix_desc, dind, i)
            assert sp.simplify(expr - (flat.start + i * flat.step)) == 0

    def test_default_symbol(self, tensor_desc):
        """Test evaluation with the default symbol."""
        expr = symbolic_diagonal_flat_index(tensor_desc, DiagIndex(1, 0, 0))
        (i,) = expr.free_symbols
        assert [expr.subs(i, k) for k in range(3)] == list(to_flat_range(tensor_desc, DiagIndex(1, 0, 0)))

    def test_empty_diagonal_rejected(self, matrix_desc):
        """Test that an empty diagonal has no formula."""
        for dind in [DiagIndex(0, 0, 1), DiagIndex(0, 3), DiagIndex(4, 0)]:
            assert to_flat_range(matrix_desc, dind).count == 0
            with pytest.raises(ValueError):
                symbolic_diagonal_flat_index(matrix_desc, dind)
