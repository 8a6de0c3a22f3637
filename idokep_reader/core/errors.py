"""Error types raised by the decoder and the recogniser.

Every failure is fatal for the current decode/recognition attempt. Callers
catch ReaderError at their own boundary and decide what a missing reading means.
"""


class ReaderError(Exception):
    """Base class for all idokep-reader failures."""


class FormatError(ReaderError, ValueError):
    """Raised when the input bytes are not a PNG this decoder supports."""


class PaletteError(ReaderError):
    """Raised when a pixel index has no corresponding palette entry."""


class RecognitionError(ReaderError):
    """Raised when a glyph strip cannot be turned into a number.

    `text` holds the characters recognised so far (or the full unparseable
    text), `offset` the column where matching stopped, if any.
    """

    def __init__(self, message: str, text: str = '', offset: int | None = None):
        super().__init__(message)
        self.text = text
        self.offset = offset
