"""Reference glyphs for number recognition.

One template per symbol the readout images use: the digits 0-9, minus and the
decimal point. The bundled templates live in assets/ as 4-bit indexed PNGs
(7 px tall, ink in the first and last column of every glyph) and are decoded
with the package's own PNG decoder the first time they are needed.

A GlyphTemplateSet always iterates in SYMBOLS order. The matcher relies on
that order to break exact score ties, so the earlier symbol wins.

Set IDOKEP_GLYPH_DIR (or pass a directory) to use a different set of images
with the same file names: 0.png .. 9.png, minus.png, point.png.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from idokep_reader.core.env import Settings
from idokep_reader.core.errors import ReaderError
from idokep_reader.core.png import decode_png
from idokep_reader.core.types import PixelGrid

SYMBOLS = ('0', '1', '2', '3', '4', '5', '6', '7', '8', '9', '-', '.')

_FILE_STEMS = {'-': 'minus', '.': 'point'}

_cache: dict[str, GlyphTemplateSet] = {}


def asset_name(symbol: str) -> str:
    """File name of the image for a symbol, e.g. '7' -> '7.png', '.' -> 'point.png'."""
    if symbol not in SYMBOLS:
        raise KeyError(f'Unknown glyph symbol: {symbol!r}')
    return f'{_FILE_STEMS.get(symbol, symbol)}.png'


@dataclass(frozen=True)
class GlyphTemplate:
    symbol: str
    grid: PixelGrid

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height


class GlyphTemplateSet:
    """Immutable, ordered collection of glyph templates keyed by symbol."""

    def __init__(self, templates: Iterable[GlyphTemplate]):
        by_symbol: dict[str, GlyphTemplate] = {}
        for t in templates:
            if t.symbol not in SYMBOLS:
                raise ValueError(f'Unknown glyph symbol: {t.symbol!r}. Allowed: {" ".join(SYMBOLS)}')
            if t.symbol in by_symbol:
                raise ValueError(f'Duplicate template for {t.symbol!r}')
            if t.grid.is_empty:
                raise ValueError(f'Template for {t.symbol!r} is empty')
            by_symbol[t.symbol] = t
        if not by_symbol:
            raise ValueError('A template set needs at least one glyph')
        self._templates = tuple(by_symbol[s] for s in SYMBOLS if s in by_symbol)

    @classmethod
    def from_grids(cls, grids: Mapping[str, PixelGrid]) -> GlyphTemplateSet:
        return cls(GlyphTemplate(symbol, grid) for symbol, grid in grids.items())

    @classmethod
    def from_directory(cls, directory: str | Path) -> GlyphTemplateSet:
        """Decode every glyph image in a directory. All twelve must be present."""
        root = Path(directory)
        templates = []
        for symbol in SYMBOLS:
            path = root / asset_name(symbol)
            if not path.is_file():
                raise ReaderError(f'missing glyph image: {path}')
            templates.append(GlyphTemplate(symbol, decode_png(path.read_bytes())))
        return cls(templates)

    @classmethod
    def bundled(cls) -> GlyphTemplateSet:
        assets = resources.files(__name__) / 'assets'
        return cls(GlyphTemplate(s, decode_png((assets / asset_name(s)).read_bytes())) for s in SYMBOLS)

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(t.symbol for t in self._templates)

    @property
    def min_width(self) -> int:
        return min(t.width for t in self._templates)

    def get(self, symbol: str) -> GlyphTemplate:
        for t in self._templates:
            if t.symbol == symbol:
                return t
        raise KeyError(f'No template for {symbol!r}')

    def grid_for(self, text: str) -> PixelGrid:
        """Render text by placing the templates for its symbols side by side."""
        return PixelGrid.hstack(self.get(ch).grid for ch in text)

    def __iter__(self) -> Iterator[GlyphTemplate]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, symbol: object) -> bool:
        return any(t.symbol == symbol for t in self._templates)

    def __repr__(self) -> str:
        return f'GlyphTemplateSet({"".join(self.symbols)!r})'


def default_templates(directory: str | Path | None = None) -> GlyphTemplateSet:
    """Return the template set, decoding it on first use.

    Uses `directory`, else IDOKEP_GLYPH_DIR, else the bundled assets.
    Each source is decoded once per process.
    """
    if directory is None:
        directory = Settings.from_environ().glyph_dir
    key = str(Path(directory).resolve()) if directory else ''
    if key not in _cache:
        _cache[key] = GlyphTemplateSet.from_directory(directory) if directory else GlyphTemplateSet.bundled()
    return _cache[key]
