"""Report builder — text and JSON output for idokep-reader results."""

import json
from collections.abc import Iterable
from typing import Any

from idokep_reader.core.types import DecodedPng, GlyphMatch, Reading


def _hex(rgb: tuple[int, int, int]) -> str:
    return '#{:02x}{:02x}{:02x}'.format(*rgb)


def _match_obj(m: GlyphMatch) -> dict[str, Any]:
    return {'symbol': m.symbol, 'offset': m.offset, 'width': m.width, 'score': m.score}


def format_text(reading: Reading, source: str | None = None) -> str:
    """Format a reading as human-readable text."""
    lines = []
    header = f'idokep-reader: {reading.text} = {reading.value:g}'
    if source:
        header += f'  ({source})'
    lines.append(header)
    lines.append('')
    for m in reading.matches:
        mark = '✓' if m.score == 0 else f'Δ={m.score}'
        lines.append(f'  [{m.offset:>3}+{m.width}] {m.symbol!r}  {mark}')
    return '\n'.join(lines)


def format_json(reading: Reading, source: str | None = None) -> str:
    """Format a reading as JSON."""
    obj: dict[str, Any] = {}
    if source:
        obj['source'] = source
    obj['text'] = reading.text
    obj['value'] = reading.value
    obj['matches'] = [_match_obj(m) for m in reading.matches]
    return json.dumps(obj, indent=2)


def format_decode_text(decoded: DecodedPng, source: str | None = None) -> str:
    """Summarise a decoded image: header, palette, grid size."""
    h = decoded.header
    lines = [f'idokep-reader: {source}' if source else 'idokep-reader:']
    lines.append(f'  size: {h.width}×{h.height}')
    lines.append(f'  format: {h.bit_depth}-bit {h.colour_type.name.lower()}, interlace={h.interlace_method}')
    colours = ', '.join(_hex(c.as_tuple()) for c in decoded.palette)
    lines.append(f'  palette: {len(decoded.palette)} colours [{colours}]')
    if decoded.skipped:
        lines.append(f'  skipped chunks: {", ".join(decoded.skipped)}')
    lines.append(f'  grid: {decoded.grid.width}×{decoded.grid.height}')
    return '\n'.join(lines)


def format_decode_json(decoded: DecodedPng, source: str | None = None) -> str:
    h = decoded.header
    obj: dict[str, Any] = {}
    if source:
        obj['source'] = source
    obj['header'] = {
        'width': h.width,
        'height': h.height,
        'bit_depth': h.bit_depth,
        'colour_type': h.colour_type.name.lower(),
        'compression_method': h.compression_method,
        'filter_method': h.filter_method,
        'interlace_method': h.interlace_method,
    }
    obj['palette'] = [_hex(c.as_tuple()) for c in decoded.palette]
    obj['skipped'] = list(decoded.skipped)
    obj['grid'] = {'width': decoded.grid.width, 'height': decoded.grid.height}
    return json.dumps(obj, indent=2)


def format_glyphs_text(templates: Iterable) -> str:
    """One line per template: symbol and size."""
    lines = []
    for t in templates:
        lines.append(f'  {t.symbol!r:<5} {t.width}×{t.height}')
    return '\n'.join(lines)


def format_glyphs_json(templates: Iterable) -> str:
    return json.dumps([{'symbol': t.symbol, 'width': t.width, 'height': t.height} for t in templates], indent=2)
