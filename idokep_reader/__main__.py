"""idokep-reader — decode idokep.hu readout PNGs and recognise the number they show.

Usage: idokep-reader <command> <image> [options]

Commands:
  read     decode, trim and recognise the number in an image
  decode   print the PNG header/palette summary, optionally save the pixels
  glyphs   list the glyph templates in use

<image> is a file path, '-' for stdin, or with --base64 the base64 payload
itself (a leading 'data:image/png;base64,' is accepted).

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, idokep-reader looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.

  IDOKEP_GLYPH_DIR    glyph image directory (same as --glyphs)
  IDOKEP_STRIP_GAPS   strip interior blank columns (same as --strip-gaps)
"""

import argparse
import base64
import binascii
import os
import sys

from idokep_reader.core.env import Settings, load_env
from idokep_reader.core.errors import FormatError, ReaderError
from idokep_reader.core.png import parse_png
from idokep_reader.core.report import (
    format_decode_json,
    format_decode_text,
    format_glyphs_json,
    format_glyphs_text,
    format_json,
    format_text,
)
from idokep_reader.core.trim import trim
from idokep_reader.glyphs import default_templates
from idokep_reader.recognition import read_png

DATA_URI_PREFIX = 'data:image/png;base64,'


def _build_parser() -> argparse.ArgumentParser:
    epilog = (
        'Examples:\n'
        '  idokep-reader read temperature.png\n'
        '  idokep-reader read --json --strip-gaps temperature.png\n'
        '  idokep-reader read --base64 "iVBORw0KGgo..."\n'
        '  idokep-reader decode temperature.png --trim --out /tmp/trimmed.png\n'
        '  idokep-reader glyphs --glyphs ./my-glyphs\n'
    )
    parser = argparse.ArgumentParser(
        prog='idokep-reader',
        description='Recognise numbers in idokep.hu readout images.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    sub = parser.add_subparsers(dest='command', help='Command to run')

    read = sub.add_parser('read', help='Recognise the number in an image')
    read.add_argument('image', help="PNG path, '-' for stdin, or base64 text with --base64")
    read.add_argument('-b', '--base64', action='store_true', help='Treat <image> as a base64 payload')
    read.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')
    read.add_argument('-s', '--strip-gaps', action='store_true', help='Remove interior blank columns before matching')
    read.add_argument('-g', '--glyphs', metavar='DIR', help='Directory of glyph PNGs (default: bundled set)')

    decode = sub.add_parser('decode', help='Decode an image and summarise its header and palette')
    decode.add_argument('image', help="PNG path, '-' for stdin, or base64 text with --base64")
    decode.add_argument('-b', '--base64', action='store_true', help='Treat <image> as a base64 payload')
    decode.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')
    decode.add_argument('-t', '--trim', action='store_true', help='Trim the white border before saving')
    decode.add_argument('-o', '--out', metavar='PATH', help='Save the decoded pixels as an RGB PNG')

    glyphs = sub.add_parser('glyphs', help='List the glyph templates')
    glyphs.add_argument('-g', '--glyphs', metavar='DIR', help='Directory of glyph PNGs (default: bundled set)')
    glyphs.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')

    return parser


def _read_input(image: str, as_base64: bool) -> tuple[bytes, str]:
    """Return (png bytes, label for reports)."""
    if as_base64:
        text = sys.stdin.read() if image == '-' else image
        text = text.strip()
        if text.startswith(DATA_URI_PREFIX):
            text = text[len(DATA_URI_PREFIX) :]
        try:
            return base64.b64decode(text, validate=True), '<base64>'
        except (binascii.Error, ValueError) as e:
            raise FormatError(f'payload is not valid base64: {e}') from e

    if image == '-':
        return sys.stdin.buffer.read(), '<stdin>'
    if not os.path.isfile(image):
        raise ReaderError(f'image not found: {image}')
    with open(image, 'rb') as f:
        return f.read(), image


def _run_read(args: argparse.Namespace, settings: Settings) -> None:
    data, source = _read_input(args.image, args.base64)
    templates = default_templates(args.glyphs or settings.glyph_dir)
    reading = read_png(data, templates, strip_gaps=args.strip_gaps or settings.strip_gaps)
    if args.json:
        print(format_json(reading, source=source))
    else:
        print(format_text(reading, source=source))


def _run_decode(args: argparse.Namespace) -> None:
    data, source = _read_input(args.image, args.base64)
    decoded = parse_png(data)
    if args.json:
        print(format_decode_json(decoded, source=source))
    else:
        print(format_decode_text(decoded, source=source))

    if args.out:
        grid = trim(decoded.grid) if args.trim else decoded.grid
        if grid.is_empty:
            raise ReaderError('nothing to save: the trimmed image is blank')
        grid.to_image().save(args.out)
        print(f'idokep-reader: wrote {args.out} ({grid.width}×{grid.height})', file=sys.stderr)


def _run_glyphs(args: argparse.Namespace, settings: Settings) -> None:
    templates = default_templates(args.glyphs or settings.glyph_dir)
    if args.json:
        print(format_glyphs_json(templates))
    else:
        print(f'Glyph templates ({len(templates)}):')
        print(format_glyphs_text(templates))


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Load .env before anything else; OS env vars always win
    env_path = load_env(env_file=args.env_file)
    if env_path:
        print(f'idokep-reader: loaded {env_path}', file=sys.stderr)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = Settings.from_environ()
    try:
        if args.command == 'read':
            _run_read(args, settings)
        elif args.command == 'decode':
            _run_decode(args)
        elif args.command == 'glyphs':
            _run_glyphs(args, settings)
    except (ReaderError, OSError, ValueError) as e:
        print(f'idokep-reader: error: {e}', file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
