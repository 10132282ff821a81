"""Square pixel matrix for 2D barcodes.

A barcode is handed around as a flat, row-major sequence of cells whose
length is a perfect square. The side length is derived from that length,
so a matrix never carries a separate width that could drift out of sync
with its pixels.

The container is generic: the renderer works on ``Matrix[Color]``, but the
padding and indexing logic is the same for any element type.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Generic, TypeVar

import structlog

from .util import usize_sqrt

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Color(Enum):
    """Binary module color of a barcode."""

    DARK = "dark"
    LIGHT = "light"


class Matrix(Generic[T]):
    """A square 2D matrix stored as a flat row-major sequence.

    Attributes:
        size: Width and height in cells.
        pixels: Read-only snapshot of the cells, ``index = row * size + col``.
    """

    def __init__(self, pixels: Iterable[T]) -> None:
        cells = list(pixels)
        # Fails before any state is assigned
        self._size = usize_sqrt(len(cells))
        self._pixels = cells

    @property
    def size(self) -> int:
        """Width and height of the matrix in cells."""
        return self._size

    @property
    def pixels(self) -> tuple[T, ...]:
        """Cells in row-major order."""
        return tuple(self._pixels)

    def __getitem__(self, position: tuple[int, int]) -> T:
        row, col = position
        if not (0 <= row < self._size and 0 <= col < self._size):
            raise IndexError(f"Cell ({row}, {col}) outside {self._size}x{self._size} matrix")
        return self._pixels[row * self._size + col]

    def rows(self) -> Iterator[tuple[T, ...]]:
        """Yield each row of the matrix as a tuple, top to bottom."""
        for start in range(0, self._size * self._size, self._size or 1):
            yield tuple(self._pixels[start : start + self._size])

    def __repr__(self) -> str:
        return f"Matrix(size={self._size})"

    def surround(self, thickness: int, fill: T) -> None:
        """Surround this matrix with ``fill`` cells ``thickness`` cells wide.

        The current cells end up centered at offset ``(thickness, thickness)``
        of a grid with side ``size + 2 * thickness``. An empty matrix becomes
        a ``(2 * thickness)`` square grid of ``fill``.

        Args:
            thickness: Border width in cells on every side.
            fill: Value for every border cell.

        Raises:
            ValueError: If thickness is negative.
        """
        if thickness < 0:
            raise ValueError(f"Border thickness must be non-negative, got {thickness}")

        width = self._size
        out_width = width + thickness * 2

        # Build the new cell list and copy the current matrix into its center
        out = [fill] * (out_width * out_width)
        for row in range(width):
            src = row * width
            dst = (row + thickness) * out_width + thickness
            out[dst : dst + width] = self._pixels[src : src + width]

        self._pixels = out
        self._size = out_width

        logger.debug("matrix_surrounded", thickness=thickness, size=out_width)
