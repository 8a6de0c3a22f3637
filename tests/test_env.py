"""Tests for idokep_reader.core.env — .env loading, walk-up logic and Settings."""

import os
from pathlib import Path

import pytest
from idokep_reader.core.env import Settings, _find_dotenv, _parse_dotenv, load_env


class TestParseDotenv:
    def test_simple_key_value(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('IDOKEP_GLYPH_DIR=/srv/glyphs\n')
        assert _parse_dotenv(f) == {'IDOKEP_GLYPH_DIR': '/srv/glyphs'}

    def test_quotes_stripped(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('A="two words"\nB=\'single\'\n')
        assert _parse_dotenv(f) == {'A': 'two words', 'B': 'single'}

    def test_comments_blank_and_junk_lines_skipped(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('# comment\n\nNOEQUALS\n=novalue\nX=1\n')
        assert _parse_dotenv(f) == {'X': '1'}


class TestFindDotenv:
    def test_finds_in_start_dir(self, tmp_path: Path) -> None:
        dotenv = tmp_path / '.env'
        dotenv.write_text('X=1\n')
        assert _find_dotenv(tmp_path) == dotenv

    def test_finds_in_parent(self, tmp_path: Path) -> None:
        dotenv = tmp_path / '.env'
        dotenv.write_text('X=1\n')
        sub = tmp_path / 'a' / 'b'
        sub.mkdir(parents=True)
        assert _find_dotenv(sub) == dotenv

    @pytest.mark.parametrize('git_is_dir', [True, False])
    def test_stops_at_git_boundary(self, tmp_path: Path, git_is_dir: bool) -> None:
        (tmp_path / '.env').write_text('X=1\n')
        repo = tmp_path / 'repo'
        repo.mkdir()
        if git_is_dir:
            (repo / '.git').mkdir()
        else:
            (repo / '.git').write_text('gitdir: ../elsewhere\n')
        src = repo / 'src'
        src.mkdir()
        assert _find_dotenv(src) is None


class TestLoadEnv:
    def test_sets_missing_vars(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('IDOKEP_TEST_VAR', raising=False)
        (tmp_path / '.git').mkdir()
        (tmp_path / '.env').write_text('IDOKEP_TEST_VAR=from-file\n')
        monkeypatch.chdir(tmp_path)
        assert load_env() == tmp_path / '.env'
        assert os.environ['IDOKEP_TEST_VAR'] == 'from-file'
        monkeypatch.delenv('IDOKEP_TEST_VAR')

    def test_os_environment_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('IDOKEP_TEST_VAR', 'from-os')
        (tmp_path / '.git').mkdir()
        (tmp_path / '.env').write_text('IDOKEP_TEST_VAR=from-file\n')
        monkeypatch.chdir(tmp_path)
        load_env()
        assert os.environ['IDOKEP_TEST_VAR'] == 'from-os'

    def test_explicit_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('IDOKEP_TEST_VAR', raising=False)
        custom = tmp_path / 'custom.env'
        custom.write_text('IDOKEP_TEST_VAR=custom\n')
        assert load_env(env_file=str(custom)) == custom
        assert os.environ['IDOKEP_TEST_VAR'] == 'custom'
        monkeypatch.delenv('IDOKEP_TEST_VAR')

    def test_explicit_missing_file(self, tmp_path: Path) -> None:
        assert load_env(env_file=str(tmp_path / 'nope.env')) is None

    def test_none_when_no_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / '.git').mkdir()
        monkeypatch.chdir(tmp_path)
        assert load_env() is None


class TestSettings:
    def test_defaults(self) -> None:
        assert Settings.from_environ() == Settings(glyph_dir=None, strip_gaps=False)

    def test_glyph_dir(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('IDOKEP_GLYPH_DIR', '/srv/glyphs')
        assert Settings.from_environ().glyph_dir == '/srv/glyphs'

    def test_empty_glyph_dir_is_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('IDOKEP_GLYPH_DIR', '')
        assert Settings.from_environ().glyph_dir is None

    @pytest.mark.parametrize(('raw', 'expected'), [('1', True), ('TRUE', True), (' on ', True), ('0', False), ('no', False)])
    def test_strip_gaps(self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
        monkeypatch.setenv('IDOKEP_STRIP_GAPS', raw)
        assert Settings.from_environ().strip_gaps is expected
