"""Shared types for idokep-reader: Colour, PixelGrid, ImageHeader, DecodedPng, Reading."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum

import numpy as np
from PIL import Image


@dataclass(frozen=True)
class Colour:
    """One RGB pixel. No alpha."""

    red: int
    green: int
    blue: int

    def is_white(self) -> bool:
        return self.red == 255 and self.green == 255 and self.blue == 255

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)


WHITE = Colour(255, 255, 255)


class PixelGrid:
    """Rectangular grid of RGB pixels, backed by a read-only (h, w, 3) uint8 array.

    Row 0 is the top of the image, column 0 the left edge. The empty grid has
    shape (0, 0, 3). Grids are never mutated; every transformation returns a
    new grid.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, pixels: np.ndarray):
        arr = np.asarray(pixels, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f'pixel array must have shape (height, width, 3), got {arr.shape}')
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            arr = np.zeros((0, 0, 3), dtype=np.uint8)
        arr = arr.copy()
        arr.flags.writeable = False
        self._pixels = arr

    @classmethod
    def empty(cls) -> PixelGrid:
        return cls(np.zeros((0, 0, 3), dtype=np.uint8))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Colour]]) -> PixelGrid:
        """Build a grid from rows of Colour. All rows must have the same length."""
        if not rows:
            return cls.empty()
        width = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f'row {i} has {len(row)} pixels, expected {width}')
        return cls(np.array([[c.as_tuple() for c in row] for row in rows], dtype=np.uint8).reshape(len(rows), width, 3))

    @classmethod
    def hstack(cls, grids: Iterable[PixelGrid]) -> PixelGrid:
        """Place grids side by side with no gap. Heights must match."""
        parts = [g.pixels for g in grids]
        if not parts:
            return cls.empty()
        heights = {p.shape[0] for p in parts}
        if len(heights) != 1:
            raise ValueError(f'cannot join grids of different heights: {sorted(heights)}')
        return cls(np.concatenate(parts, axis=1))

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def is_empty(self) -> bool:
        return self._pixels.size == 0

    def pixel(self, row: int, col: int) -> Colour:
        r, g, b = self._pixels[row, col]
        return Colour(int(r), int(g), int(b))

    def row(self, n: int) -> list[Colour]:
        return [self.pixel(n, c) for c in range(self.width)]

    def col(self, n: int) -> list[Colour]:
        return [self.pixel(r, n) for r in range(self.height)]

    def to_image(self) -> Image.Image:
        """Convert to a Pillow RGB image (for saving or viewing)."""
        if self.is_empty:
            raise ValueError('cannot convert an empty grid to an image')
        return Image.fromarray(np.ascontiguousarray(self._pixels))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self._pixels.shape == other._pixels.shape and bool(np.array_equal(self._pixels, other._pixels))

    def __repr__(self) -> str:
        return f'PixelGrid({self.width}x{self.height})'


class ColourType(IntEnum):
    """PNG IHDR colour type codes."""

    GREYSCALE = 0
    TRUECOLOUR = 2
    INDEXED = 3
    GREYSCALE_ALPHA = 4
    TRUECOLOUR_ALPHA = 6


class ChunkType(Enum):
    IHDR = b'IHDR'
    PLTE = b'PLTE'
    IDAT = b'IDAT'
    IEND = b'IEND'
    OTHER = b''

    @classmethod
    def classify(cls, tag: bytes) -> ChunkType:
        for kind in (cls.IHDR, cls.PLTE, cls.IDAT, cls.IEND):
            if kind.value == tag:
                return kind
        return cls.OTHER


@dataclass(frozen=True)
class ChunkHeader:
    length: int  # payload length, excludes the 4-byte CRC
    kind: ChunkType
    tag: bytes  # raw 4-byte type tag


@dataclass(frozen=True)
class ImageHeader:
    """Parsed IHDR chunk."""

    width: int
    height: int
    bit_depth: int
    colour_type: ColourType
    compression_method: int
    filter_method: int
    interlace_method: int


@dataclass
class DecodedPng:
    """Everything the decoder learned about one image."""

    header: ImageHeader
    palette: tuple[Colour, ...]
    grid: PixelGrid
    skipped: list[str] = field(default_factory=list)  # tags of chunks skipped unread


@dataclass(frozen=True)
class GlyphMatch:
    """One greedy matching step: which symbol won at which column."""

    symbol: str
    offset: int
    width: int
    score: int  # sum of squared channel differences, 0 = exact


@dataclass
class Reading:
    """A recognised number."""

    text: str
    value: float
    matches: list[GlyphMatch] = field(default_factory=list)
