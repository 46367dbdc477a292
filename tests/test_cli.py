"""Tests for the command-line entry point."""

import sys

import pytest
from rich.console import Console

from scrimmage.__main__ import build_play_table, main
from scrimmage.config import reset_config
from scrimmage.core.variance import PlayRandom
from scrimmage.orchestrator import Orchestrator
from scrimmage.roster import generate_formation


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    monkeypatch.delenv("SCRIMMAGE_SEED", raising=False)
    reset_config()
    yield
    reset_config()


def _render(table) -> str:
    console = Console(width=160, record=True)
    console.print(table)
    return console.export_text()


class TestPlayTable:
    """Tests for build_play_table."""

    def test_one_row_per_play(self, config):
        rng = PlayRandom(4)
        outcomes = Orchestrator(generate_formation(rng), config=config, rng=rng).run_plays(3)

        table = build_play_table(outcomes)
        assert table.row_count == 3
        text = _render(table)
        assert "1st & 10 at the 25" in text
        for outcome in outcomes:
            assert outcome.play_name in text


class TestMain:
    """Tests for main()."""

    def test_runs_a_drive(self, monkeypatch, capsys):
        monkeypatch.setenv("COLUMNS", "200")
        monkeypatch.setattr(sys, "argv", ["scrimmage", "--plays", "2", "--seed", "3", "--play", "inside_zone"])
        main()
        out = capsys.readouterr().out
        assert "Inside Zone" in out

    def test_unknown_play_exits(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["scrimmage", "--play", "hail_mary"])
        with pytest.raises(SystemExit):
            main()

    @pytest.mark.parametrize("los", ["0", "100", "-5"])
    def test_line_of_scrimmage_off_the_field_is_a_usage_error(self, monkeypatch, capsys, los):
        monkeypatch.setattr(sys, "argv", ["scrimmage", "--plays", "1", f"--los={los}"])
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 2
        assert "los_yards must be inside the field" in capsys.readouterr().err
