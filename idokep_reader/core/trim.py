"""Remove uniform (white) rows and columns from a pixel grid.

trim() drops only the border: leading and trailing rows/columns made entirely
of the reference colour. Removing a blank row never changes whether a column
is blank (and vice versa), so repeating until nothing changes is the same as
cropping to the bounding box of the non-blank pixels.

strip_blank_lines() drops every blank row and column, interior ones included.
Glyphs drawn with blank columns between them come out packed edge to edge,
which is what the greedy matcher expects.

A result that is entirely one colour, whatever that colour is, becomes the
empty grid. The rule is checked on the cropped result, so trim(trim(g)) ==
trim(g) holds for every grid.
"""

import numpy as np

from idokep_reader.core.types import WHITE, Colour, PixelGrid


def _blank_mask(grid: PixelGrid, colour: Colour) -> np.ndarray:
    """(h, w) bool array, True where the pixel equals colour."""
    ref = np.array(colour.as_tuple(), dtype=np.uint8)
    return np.all(grid.pixels == ref, axis=2)


def _non_uniform(pixels: np.ndarray) -> PixelGrid:
    if pixels.size == 0 or np.all(pixels == pixels[0, 0]):
        return PixelGrid.empty()
    return PixelGrid(pixels)


def trim(grid: PixelGrid, colour: Colour = WHITE) -> PixelGrid:
    """Crop away uniform border rows and columns."""
    if grid.is_empty:
        return grid
    ink = ~_blank_mask(grid, colour)
    rows = np.flatnonzero(ink.any(axis=1))
    cols = np.flatnonzero(ink.any(axis=0))
    if rows.size == 0:
        return PixelGrid.empty()
    return _non_uniform(grid.pixels[rows[0] : rows[-1] + 1, cols[0] : cols[-1] + 1])


def strip_blank_lines(grid: PixelGrid, colour: Colour = WHITE) -> PixelGrid:
    """Remove every uniform row and column, wherever it is."""
    if grid.is_empty:
        return grid
    ink = ~_blank_mask(grid, colour)
    keep_rows = ink.any(axis=1)
    keep_cols = ink.any(axis=0)
    return _non_uniform(grid.pixels[keep_rows][:, keep_cols])
