"""Minimal PNG decoder for 4-bit indexed-colour glyph images.

Walks the chunk stream with a ByteCursor:

  IHDR  width, height, bit depth, colour type, compression/filter/interlace bytes
  PLTE  RGB triplets, in file order (index 0 is the first triplet)
  IDAT  zlib-compressed scanlines; consecutive IDAT payloads form one stream
  IEND  stop and assemble the pixel grid

The IDAT stream is inflated only up to height * (ceil(width / 2) + 1) bytes,
so a small file cannot expand into a large allocation.

Any other chunk is skipped unread (payload + CRC). CRCs are never checked.

Only the encoding the idokep.hu readout images and the bundled glyphs use is
supported: bit depth 4, colour type 3 (indexed), no interlacing, filter type 0
(None) on every scanline. Each scanline is one filter byte followed by
ceil(width / 2) bytes, two samples per byte, high nibble first.

Anything outside that raises FormatError (or PaletteError for an index the
palette does not cover). There is no partial result.

Example:
    grid = decode_png(Path('glyph.png').read_bytes())
"""

import zlib

import numpy as np

from idokep_reader.core.cursor import ByteCursor
from idokep_reader.core.errors import FormatError, PaletteError
from idokep_reader.core.types import (
    ChunkHeader,
    ChunkType,
    Colour,
    ColourType,
    DecodedPng,
    ImageHeader,
    PixelGrid,
)

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
IHDR_LENGTH = 13
CRC_LENGTH = 4

SUPPORTED_BIT_DEPTH = 4
FILTER_NONE = 0


def _unpack_nibbles(scanline: bytes, width: int) -> np.ndarray:
    """Split each byte into two 4-bit samples (high nibble first), keep `width` of them."""
    packed = np.frombuffer(scanline, dtype=np.uint8)
    samples = np.empty(packed.size * 2, dtype=np.uint8)
    samples[0::2] = packed >> 4
    samples[1::2] = packed & 0x0F
    return samples[:width]


def _row_bytes(width: int) -> int:
    return (width + 1) // 2


class _Parser:
    def __init__(self, data: bytes):
        self.cursor = ByteCursor(data)
        self.header: ImageHeader | None = None
        self.palette: list[Colour] = []
        self.idat_parts: list[bytes] = []
        self.skipped: list[str] = []

    def parse(self) -> DecodedPng:
        self._parse_signature()
        while True:
            chunk = self._read_chunk_header()
            if chunk.kind is ChunkType.IEND:
                break
            if chunk.kind is ChunkType.IHDR:
                self.header = self._parse_ihdr(chunk)
            elif chunk.kind is ChunkType.PLTE:
                self.palette = self._parse_plte(chunk)
            elif chunk.kind is ChunkType.IDAT:
                self.idat_parts.append(self.cursor.read_exact(chunk.length))
                self._skip_crc()
            else:
                self._skip_chunk(chunk)

        if self.header is None:
            raise FormatError('missing IHDR chunk')
        if not self.idat_parts:
            raise FormatError('no IDAT chunk before IEND')

        grid = self._decode_pixels(self.header)
        return DecodedPng(
            header=self.header,
            palette=tuple(self.palette),
            grid=grid,
            skipped=self.skipped,
        )

    def _parse_signature(self) -> None:
        if self.cursor.remaining < len(PNG_SIGNATURE):
            raise FormatError('not a PNG: data shorter than the signature')
        if self.cursor.read_exact(len(PNG_SIGNATURE)) != PNG_SIGNATURE:
            raise FormatError('not a PNG: bad signature')

    def _read_chunk_header(self) -> ChunkHeader:
        length = self.cursor.read_uint32_be()
        tag = self.cursor.read_exact(4)
        return ChunkHeader(length=length, kind=ChunkType.classify(tag), tag=tag)

    def _parse_ihdr(self, chunk: ChunkHeader) -> ImageHeader:
        if chunk.length != IHDR_LENGTH:
            raise FormatError(f'IHDR length must be {IHDR_LENGTH}, got {chunk.length}')
        width = self.cursor.read_uint32_be()
        height = self.cursor.read_uint32_be()
        bit_depth = self.cursor.read_byte()
        code = self.cursor.read_byte()
        try:
            colour_type = ColourType(code)
        except ValueError:
            raise FormatError(f'unknown colour type {code}') from None
        header = ImageHeader(
            width=width,
            height=height,
            bit_depth=bit_depth,
            colour_type=colour_type,
            compression_method=self.cursor.read_byte(),
            filter_method=self.cursor.read_byte(),
            interlace_method=self.cursor.read_byte(),
        )
        self._skip_crc()
        if width == 0 or height == 0:
            raise FormatError(f'image has no pixels ({width}x{height})')
        return header

    def _parse_plte(self, chunk: ChunkHeader) -> list[Colour]:
        if chunk.length % 3 != 0:
            raise FormatError(f'PLTE length {chunk.length} is not a multiple of 3')
        raw = self.cursor.read_exact(chunk.length)
        self._skip_crc()
        return [Colour(raw[i], raw[i + 1], raw[i + 2]) for i in range(0, len(raw), 3)]

    def _skip_chunk(self, chunk: ChunkHeader) -> None:
        self.cursor.skip(chunk.length + CRC_LENGTH)
        self.skipped.append(chunk.tag.decode('latin-1'))

    def _skip_crc(self) -> None:
        self.cursor.skip(CRC_LENGTH)

    def _decode_pixels(self, header: ImageHeader) -> PixelGrid:
        if header.bit_depth != SUPPORTED_BIT_DEPTH or header.colour_type is not ColourType.INDEXED:
            raise FormatError(
                f'unsupported bit depth/colour type: {header.bit_depth}-bit {header.colour_type.name.lower()}'
                f' (only {SUPPORTED_BIT_DEPTH}-bit indexed is supported)'
            )
        if header.interlace_method != 0:
            raise FormatError(f'unsupported interlace method {header.interlace_method}')

        # never inflate past the scanlines the header describes; short output fails in the cursor
        expected = header.height * (_row_bytes(header.width) + 1)
        try:
            raw = zlib.decompressobj().decompress(b''.join(self.idat_parts), expected)
        except zlib.error as e:
            raise FormatError(f'cannot inflate image data: {e}') from e

        if self.palette:
            lookup = np.array([c.as_tuple() for c in self.palette], dtype=np.uint8)
        else:
            lookup = np.zeros((0, 3), dtype=np.uint8)

        scanlines = ByteCursor(raw)
        row_bytes = _row_bytes(header.width)
        rows = []
        for y in range(header.height):
            filter_type = scanlines.read_byte()
            if filter_type != FILTER_NONE:
                raise FormatError(f'unsupported filter {filter_type} on scanline {y}')
            indices = _unpack_nibbles(scanlines.read_exact(row_bytes), header.width)
            top = int(indices.max())
            if top >= len(lookup):
                raise PaletteError(f'pixel index {top} on scanline {y} has no palette entry ({len(lookup)} colours)')
            rows.append(lookup[indices])

        return PixelGrid(np.stack(rows))


def parse_png(data: bytes) -> DecodedPng:
    """Decode PNG bytes, returning the header and palette alongside the pixel grid."""
    return _Parser(data).parse()


def decode_png(data: bytes) -> PixelGrid:
    """Decode PNG bytes into a pixel grid."""
    return parse_png(data).grid
