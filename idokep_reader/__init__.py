"""idokep-reader — read the numbers idokep.hu renders as embedded PNG images.

Decodes the 4-bit indexed PNGs, trims the white border and matches the glyph
strip against bundled digit templates.

Example:
    from idokep_reader import read_png
    read_png(png_bytes).value
"""

from idokep_reader.core.errors import FormatError, PaletteError, ReaderError, RecognitionError
from idokep_reader.core.png import decode_png, parse_png
from idokep_reader.core.trim import strip_blank_lines, trim
from idokep_reader.core.types import Colour, PixelGrid, Reading
from idokep_reader.glyphs import GlyphTemplate, GlyphTemplateSet, default_templates
from idokep_reader.recognition import match_glyphs, read_number, read_png, recognise

__all__ = [
    'Colour',
    'FormatError',
    'GlyphTemplate',
    'GlyphTemplateSet',
    'PaletteError',
    'PixelGrid',
    'Reading',
    'ReaderError',
    'RecognitionError',
    'decode_png',
    'default_templates',
    'match_glyphs',
    'parse_png',
    'read_number',
    'read_png',
    'recognise',
    'strip_blank_lines',
    'trim',
]
