"""
Flat storage buffer behind a tensor view.

A buffer view wraps a one-dimensional numpy array and reads or writes it by
storage position: one position at a time, an arithmetic progression of
positions, or an arbitrary array of positions.
"""

from typing import Any, Optional, Union
import warnings

import numpy as np
from dataclasses import dataclass


@dataclass
class BufferView:
    """
    Buffer view over contiguous element storage.

    Attributes:
        data: One-dimensional numpy array holding the elements
        buffer_size: Number of addressable positions
        invalid_element_value: Value read from out-of-bounds positions
    """
    data: Optional[np.ndarray] = None
    buffer_size: int = 0
    invalid_element_value: Any = 0

    def __post_init__(self):
        """Initialize buffer view after dataclass initialization."""
        if self.data is not None:
            if self.data.ndim != 1:
                raise ValueError(f"Buffer data must be one-dimensional, got shape {self.data.shape}")
            if self.buffer_size == 0:
                self.buffer_size = self.data.size

    def _require_data(self) -> np.ndarray:
        if self.data is None:
            raise ValueError("Buffer data is None")
        return self.data

    def _in_bounds(self, positions: np.ndarray) -> np.ndarray:
        limit = min(self.buffer_size, self._require_data().size)
        return (positions >= 0) & (positions < limit)

    def __getitem__(self, index: int) -> Any:
        """Get element at index (without validity check)."""
        return self._require_data()[index]

    def get(self, index: int, oob_conditional_check: bool = True) -> Any:
        """
        Get a single element.

        Args:
            index: Storage position
            oob_conditional_check: Whether to check out-of-bounds

        Returns:
            The element, or ``invalid_element_value`` when out of bounds
        """
        data = self._require_data()
        if oob_conditional_check and not self._in_bounds(np.asarray(index)):
            warnings.warn(f"Out of bounds access at index {index}")
            return self.invalid_element_value
        return data[index]

    def set(self, index: int, value: Any, oob_conditional_check: bool = True) -> None:
        """
        Set a single element.

        Args:
            index: Storage position
            value: Value to set
            oob_conditional_check: Whether to check out-of-bounds
        """
        data = self._require_data()
        if oob_conditional_check and not self._in_bounds(np.asarray(index)):
            warnings.warn(f"Out of bounds write at index {index}")
            return
        data[index] = value

    def gather(self, positions: np.ndarray, oob_conditional_check: bool = True) -> np.ndarray:
        """
        Read the elements at an array of storage positions.

        The result has the shape of ``positions``.
        """
        data = self._require_data()
        positions = np.asarray(positions, dtype=np.intp)
        if not oob_conditional_check:
            return data[positions]

        valid = self._in_bounds(positions)
        if valid.all():
            return data[positions]
        warnings.warn(f"Out of bounds access at {int((~valid).sum())} position(s)")
        result = np.full(positions.shape, self.invalid_element_value, dtype=data.dtype)
        result[valid] = data[positions[valid]]
        return result

    def scatter(self, positions: np.ndarray, values: Union[Any, np.ndarray],
                oob_conditional_check: bool = True) -> None:
        """
        Write values to an array of storage positions.

        ``values`` must have the shape of ``positions``. Out-of-bounds
        positions are skipped when checking is enabled.
        """
        data = self._require_data()
        positions = np.asarray(positions, dtype=np.intp)
        values = np.asarray(values)
        if not oob_conditional_check:
            data[positions] = values
            return

        valid = self._in_bounds(positions)
        if not valid.all():
            warnings.warn(f"Out of bounds write at {int((~valid).sum())} position(s)")
            data[positions[valid]] = np.broadcast_to(values, positions.shape)[valid]
            return
        data[positions] = values

    def get_strided(self, start: int, step: int, count: int,
                    oob_conditional_check: bool = True) -> np.ndarray:
        """Read ``count`` elements at ``start, start + step, ...``."""
        if count <= 0:
            return np.empty(0, dtype=self.dtype)
        if self._strided_in_bounds(start, step, count):
            return self._require_data()[start:start + (count - 1) * step + 1:step].copy()
        return self.gather(start + step * np.arange(count), oob_conditional_check)

    def set_strided(self, start: int, step: int, count: int, values: Union[Any, np.ndarray],
                    oob_conditional_check: bool = True) -> None:
        """Write ``count`` elements at ``start, start + step, ...``."""
        if count <= 0:
            return
        if self._strided_in_bounds(start, step, count):
            self._require_data()[start:start + (count - 1) * step + 1:step] = values
            return
        self.scatter(start + step * np.arange(count), values, oob_conditional_check)

    def _strided_in_bounds(self, start: int, step: int, count: int) -> bool:
        last = start + (count - 1) * step
        return step > 0 and bool(self._in_bounds(np.array([start, last])).all())

    @property
    def dtype(self):
        """Get the data type of the buffer."""
        return self._require_data().dtype

    def __repr__(self) -> str:
        """String representation of buffer view."""
        return (f"BufferView(buffer_size={self.buffer_size}, "
                f"data_ptr={'None' if self.data is None else hex(id(self.data))}, "
                f"invalid_element_value={self.invalid_element_value})")


def make_buffer_view(data: Optional[np.ndarray],
                     buffer_size: int = 0,
                     invalid_element_value: Any = 0) -> BufferView:
    """
    Factory function to create a buffer view.

    Args:
        data: One-dimensional numpy array containing the data
        buffer_size: Size of the buffer (defaults to ``data.size``)
        invalid_element_value: Value for invalid elements

    Returns:
        BufferView instance
    """
    return BufferView(
        data=data,
        buffer_size=buffer_size,
        invalid_element_value=invalid_element_value
    )
