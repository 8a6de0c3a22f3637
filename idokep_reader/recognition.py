"""Greedy template matching: glyph strip -> number.

Starting at column 0, every template that fits in the remaining width (and
the grid height) is scored against the grid at the current column:

    score = sum over template pixels of (dr^2 + dg^2 + db^2)

The lowest score wins and the column advances by the winner's width. There is
no backtracking and no gap detection: glyphs are assumed to sit edge to edge,
which is what trim() leaves for a zero-gap strip and what strip_blank_lines()
produces for a spaced one.

Ties keep the first template in GlyphTemplateSet order (0-9, then '-', '.').

The collected text must look like a decimal literal (optional leading '-',
digits, at most one '.') and is converted with float().

Example:
    reading = read_png(png_bytes)
    reading.value   # -3.2
"""

import re

import numpy as np

from idokep_reader.core.errors import RecognitionError
from idokep_reader.core.png import decode_png
from idokep_reader.core.trim import strip_blank_lines, trim
from idokep_reader.core.types import GlyphMatch, PixelGrid, Reading
from idokep_reader.glyphs import GlyphTemplate, GlyphTemplateSet, default_templates

_NUMBER = re.compile(r'-?(\d+\.?\d*|\.\d+)')


def _score(template: GlyphTemplate, grid: PixelGrid, offset: int) -> int:
    """Sum of squared channel differences between the template and the grid at offset."""
    region = grid.pixels[: template.height, offset : offset + template.width].astype(np.int64)
    diff = template.grid.pixels.astype(np.int64) - region
    return int(np.sum(diff * diff))


def best_match(grid: PixelGrid, templates: GlyphTemplateSet, offset: int) -> GlyphMatch | None:
    """Lowest-scoring template at offset, or None if no template fits there."""
    best: GlyphMatch | None = None
    remaining = grid.width - offset
    for template in templates:
        if template.width > remaining or template.height > grid.height:
            continue
        score = _score(template, grid, offset)
        if best is None or score < best.score:
            best = GlyphMatch(symbol=template.symbol, offset=offset, width=template.width, score=score)
    return best


def match_glyphs(grid: PixelGrid, templates: GlyphTemplateSet) -> list[GlyphMatch]:
    """Segment a trimmed grid into glyphs, left to right."""
    if grid.is_empty:
        raise RecognitionError('nothing to recognise: the image is blank')

    matches: list[GlyphMatch] = []
    offset = 0
    while offset < grid.width:
        match = best_match(grid, templates, offset)
        if match is None:
            text = ''.join(m.symbol for m in matches)
            raise RecognitionError(
                f'no glyph fits at column {offset} of {grid.width}x{grid.height} image (read so far: {text!r})',
                text=text,
                offset=offset,
            )
        matches.append(match)
        offset += match.width
    return matches


def parse_number(text: str) -> float:
    if not _NUMBER.fullmatch(text):
        raise RecognitionError(f'recognised text is not a number: {text!r}', text=text)
    return float(text)


def recognise(grid: PixelGrid, templates: GlyphTemplateSet) -> Reading:
    """Match glyphs in an already-trimmed grid and parse the result."""
    matches = match_glyphs(grid, templates)
    text = ''.join(m.symbol for m in matches)
    return Reading(text=text, value=parse_number(text), matches=matches)


def read_number(grid: PixelGrid, templates: GlyphTemplateSet | None = None, *, strip_gaps: bool = False) -> Reading:
    """Trim a decoded grid and recognise the number in it."""
    if templates is None:
        templates = default_templates()
    cleaned = strip_blank_lines(grid) if strip_gaps else trim(grid)
    return recognise(cleaned, templates)


def read_png(data: bytes, templates: GlyphTemplateSet | None = None, *, strip_gaps: bool = False) -> Reading:
    """Decode PNG bytes and recognise the number they show."""
    return read_number(decode_png(data), templates, strip_gaps=strip_gaps)
