"""Shared fixtures: hand-built PNG byte strings and small pixel grids."""

import struct
import zlib
from collections.abc import Callable, Sequence

import numpy as np
import pytest
from idokep_reader.core.types import PixelGrid

SIGNATURE = b'\x89PNG\r\n\x1a\n'

INK = (51, 51, 51)
WHITE_RGB = (255, 255, 255)

# '.' white, '#' ink, 'r' red, 'b' blue
_GRID_COLOURS = {'.': WHITE_RGB, '#': INK, 'r': (255, 0, 0), 'b': (0, 0, 255)}


def png_chunk(tag: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(tag + payload) & 0xFFFFFFFF
    return struct.pack('>I', len(payload)) + tag + payload + struct.pack('>I', crc)


def ihdr(width: int, height: int, bit_depth: int = 4, colour_type: int = 3, interlace: int = 0) -> bytes:
    return png_chunk(b'IHDR', struct.pack('>IIBBBBB', width, height, bit_depth, colour_type, 0, 0, interlace))


def pack_rows(rows: Sequence[Sequence[int]], filter_byte: int = 0) -> bytes:
    """Filter byte + 4-bit samples, high nibble first, odd widths padded with 0."""
    raw = b''
    for row in rows:
        samples = list(row) + ([0] if len(row) % 2 else [])
        raw += bytes([filter_byte])
        raw += bytes((samples[i] << 4) | samples[i + 1] for i in range(0, len(samples), 2))
    return raw


def build_png(
    rows: Sequence[Sequence[int]],
    palette: Sequence[tuple[int, int, int]] | None,
    *,
    width: int | None = None,
    height: int | None = None,
    bit_depth: int = 4,
    colour_type: int = 3,
    interlace: int = 0,
    filter_byte: int = 0,
    idat_parts: int = 1,
    before_idat: Sequence[bytes] = (),
) -> bytes:
    """Assemble a PNG from palette indices. `palette=None` leaves out PLTE."""
    if width is None:
        width = len(rows[0])
    if height is None:
        height = len(rows)
    out = SIGNATURE + ihdr(width, height, bit_depth, colour_type, interlace)
    if palette is not None:
        out += png_chunk(b'PLTE', bytes(v for rgb in palette for v in rgb))
    for extra in before_idat:
        out += extra
    stream = zlib.compress(pack_rows(rows, filter_byte))
    step = -(-len(stream) // idat_parts)
    for i in range(0, len(stream), step):
        out += png_chunk(b'IDAT', stream[i : i + step])
    return out + png_chunk(b'IEND', b'')


def make_grid(*rows: str) -> PixelGrid:
    """Grid from strings: '.' white, '#' ink, 'r' red, 'b' blue."""
    return PixelGrid(np.array([[_GRID_COLOURS[ch] for ch in row] for row in rows], dtype=np.uint8))


def grid_to_png(grid: PixelGrid) -> bytes:
    """Encode a white/ink grid as a 4-bit indexed PNG (white = 0, ink = 1)."""
    indices = np.where(np.all(grid.pixels == 255, axis=2), 0, 1)
    return build_png(indices.tolist(), [WHITE_RGB, INK])


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    return build_png


@pytest.fixture(autouse=True)
def _clean_reader_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep IDOKEP_* variables from the host environment out of every test."""
    monkeypatch.delenv('IDOKEP_GLYPH_DIR', raising=False)
    monkeypatch.delenv('IDOKEP_STRIP_GAPS', raising=False)
