from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from main import cli
from tui.mode import TextualMode


@pytest.fixture(autouse=True)
def _isolated_home(monkeypatch, tmp_path):
    monkeypatch.setenv('HOME', str(tmp_path / 'home'))


@pytest.fixture
def started(monkeypatch):
    calls = []

    def fake_start(self):
        calls.append(self)
        return 0

    monkeypatch.setattr(TextualMode, 'start', fake_start)
    return calls


def _quotes(tmp_path: Path, text: str) -> str:
    path = tmp_path / 'quotes.ini'
    path.write_text(text, encoding='utf-8')
    return str(path)


def test_empty_quote_file_exits_non_zero_before_tui(tmp_path, started):
    res = CliRunner().invoke(cli, ['-q', _quotes(tmp_path, '')])
    assert res.exit_code == 1
    assert 'Error:' in res.output
    assert 'quotes.ini' in res.output
    assert started == []


def test_missing_field_is_reported_with_file_and_field(tmp_path, started):
    res = CliRunner().invoke(cli, ['-q', _quotes(tmp_path, '[a]\ntext = hi\n')])
    assert res.exit_code == 1
    assert '[a].image' in res.output
    assert started == []


def test_missing_custom_config(tmp_path, started):
    res = CliRunner().invoke(cli, ['-c', str(tmp_path / 'nope.ini')])
    assert res.exit_code == 1
    assert 'configuration file not found' in res.output


def test_valid_config_starts_the_tui(tmp_path, started):
    quotes = _quotes(tmp_path, '[a]\ntext = hi\nimage = a.png\n\n[b]\ntext = yo\nimage = b.png\n')
    res = CliRunner().invoke(cli, ['-q', quotes, '--wrap'])
    assert res.exit_code == 0, res.output
    (mode,) = started
    assert mode.navigator.total == 2
    assert mode.navigator.wrap is True
    assert mode.settings.assets_dir == str(tmp_path / 'assets')


def test_verbose_prints_settings_and_warnings(tmp_path, started):
    conf = tmp_path / 'custom.ini'
    conf.write_text('[COLORS]\nborder = plaid\n', encoding='utf-8')
    quotes = _quotes(tmp_path, '[a]\ntext = hi\nimage = a.png\n')
    res = CliRunner().invoke(cli, ['-c', str(conf), '-q', quotes, '-a', str(tmp_path / 'pics'), '-v'])
    assert res.exit_code == 0, res.output
    assert 'target_width = 30' in res.output
    assert f"assets_dir = {tmp_path / 'pics'}" in res.output
    assert 'invalid color' in res.output
    assert 'border' in res.output


def test_bundled_sample_deck_loads(started, monkeypatch):
    monkeypatch.chdir(ROOT)
    res = CliRunner().invoke(cli, [])
    assert res.exit_code == 0, res.output
    (mode,) = started
    assert mode.navigator.total == 4
    assert mode.navigator.wrap is False
