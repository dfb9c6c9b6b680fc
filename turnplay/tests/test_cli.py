"""
Tests for the command-line interface.
"""

import asyncio

import pytest

from ..cli import main, simulate
from ..config import Settings
from ..engine_core.state import GameStatus


class TestCLI:
    """Tests for the turnplay command."""

    def test_games_lists_variants(self, capsys):
        main(["games"])
        out = capsys.readouterr().out
        assert "tic_tac_toe" in out
        assert "guess_the_spy" in out
        assert "no bots" in out

    def test_simulate_hard_bots_draw(self):
        state = asyncio.run(simulate("tic_tac_toe", "hard", "hard", seed=1, settings=Settings()))
        assert state.status == GameStatus.FINISHED
        assert state.winner is None

    def test_simulate_rps_finishes(self):
        state = asyncio.run(simulate(
            "rock_paper_scissors", "hard", "easy", seed=3, mode="best-of-5", settings=Settings(),
        ))
        assert state.status == GameStatus.FINISHED
        assert state.data["mode"] == "best-of-5"

    def test_simulate_without_bots_fails(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["simulate", "guess_the_spy"])
        assert exc_info.value.code == 1
        assert "Bots are not supported" in capsys.readouterr().out

    def test_no_command_prints_help(self):
        with pytest.raises(SystemExit):
            main([])
