"""Configuration for idokep-reader: .env loading and Settings.

Lookup order for every setting (first wins):
  1. Command-line flags (handled by the CLI).
  2. Variables already present in the OS environment.
  3. The .env file named by --env-file, or else the nearest .env found
     walking up from the working directory. The walk stops at the first
     directory holding .git, so a .env outside the repository is never read.

Recognised variables:
  IDOKEP_GLYPH_DIR    directory of glyph PNGs to use instead of the bundled set
  IDOKEP_STRIP_GAPS   1/true/yes/on to strip interior blank columns before matching
"""

import os
from dataclasses import dataclass
from pathlib import Path

_TRUTHY = {'1', 'true', 'yes', 'on'}


def _find_dotenv(start: Path) -> Path | None:
    """Return the closest .env at or above start, without crossing a .git boundary."""
    directory = start.resolve()
    while True:
        candidate = directory / '.env'
        if candidate.is_file():
            return candidate
        # .git is a directory in a clone and a file in a worktree
        if (directory / '.git').exists() or directory.parent == directory:
            return None
        directory = directory.parent


def _parse_dotenv(path: Path) -> dict[str, str]:
    """Read KEY=value lines. Quotes around the value are dropped; comments and junk lines skipped."""
    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding='utf-8').splitlines():
        line = raw_line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, _, value = line.partition('=')
        key = key.strip()
        if key:
            values[key] = value.strip().strip('"').strip("'")
    return values


def load_env(env_file: str | None = None) -> Path | None:
    """Copy .env entries into os.environ without overriding existing ones.

    Returns the file that was read, or None when there was nothing to read.
    """
    if env_file:
        path: Path | None = Path(env_file)
        if not path.is_file():
            return None
    else:
        path = _find_dotenv(Path.cwd())
        if path is None:
            return None

    for key, value in _parse_dotenv(path).items():
        os.environ.setdefault(key, value)
    return path


@dataclass(frozen=True)
class Settings:
    glyph_dir: str | None = None
    strip_gaps: bool = False

    @classmethod
    def from_environ(cls) -> 'Settings':
        return cls(
            glyph_dir=os.environ.get('IDOKEP_GLYPH_DIR') or None,
            strip_gaps=os.environ.get('IDOKEP_STRIP_GAPS', '').strip().lower() in _TRUTHY,
        )
