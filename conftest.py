"""
Common test fixtures and configuration for pydiag tests.
"""

import pytest
import sys
from pathlib import Path

import numpy as np

# Add the project root to Python path for imports
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from pydiag import make_tensor_view_from_ndarray


@pytest.fixture
def matrix_values():
    """4x3 integer matrix used by the matrix tests."""
    return np.array([[1, 2, 3],
                     [4, 5, 6],
                     [7, 8, 9],
                     [10, 11, 12]])


@pytest.fixture
def column_major_matrix(matrix_values):
    """4x3 matrix stored column-major with 1-based indices."""
    return make_tensor_view_from_ndarray(matrix_values, order="F", first_index=1)


@pytest.fixture
def column_major_tensor():
    """3x4x5 tensor holding 0.1, 0.2, ..., 6.0 in column-major order."""
    data = np.arange(1, 61) / 10
    return make_tensor_view_from_ndarray(data.reshape((3, 4, 5), order="F"), order="F", first_index=1)


@pytest.fixture
def sample_tensor_shapes():
    """Common tensor shapes for testing."""
    return {
        'vector_1d': [7],
        'small_2d': [4, 3],
        'wide_2d': [2, 6],
        'small_3d': [3, 4, 5],
        'cube_3d': [4, 4, 4],
        'small_4d': [2, 3, 2, 4],
    }
