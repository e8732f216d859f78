"""
Tests for the command line.
"""

import pytest

from ..cli import main, render_board


class TestCli:
    """Tests for the gammon subcommands."""

    def test_propose(self, capsys):
        main(["propose", "--dice", "6", "5", "--budget-ms", "0", "--seed", "1"])
        out = capsys.readouterr().out

        assert "Chosen action: " in out
        assert "depth 1:" in out
        assert "Expanded nodes:" in out

    def test_propose_bad_dice(self, capsys):
        with pytest.raises(SystemExit):
            main(["propose", "--dice", "7", "1"])
        assert "Error:" in capsys.readouterr().out

    def test_selfplay_stops_at_turn_limit(self, capsys):
        main(["selfplay", "--games", "1", "--budget-ms", "0", "--seed", "2",
              "--max-turns", "2", "--quiet"])
        out = capsys.readouterr().out

        assert "Game 1: abandoned after 2 turns" in out
        assert "Black 0 - White 0" in out

    def test_selfplay_against_first_legal(self, capsys):
        main(["selfplay", "--games", "1", "--budget-ms", "0", "--seed", "2",
              "--max-turns", "2", "--quiet", "--opponent", "first"])
        out = capsys.readouterr().out

        assert "Game 1: abandoned after 2 turns" in out
        assert "Black 0 - White 0" in out

    def test_unknown_opponent(self):
        with pytest.raises(SystemExit):
            main(["selfplay", "--opponent", "nobody"])

    def test_no_command(self):
        with pytest.raises(SystemExit):
            main([])

    def test_render_board(self, opening_state):
        text = render_board(opening_state)

        assert "B2" in text
        assert "W5" in text
        assert "dice 6-5" in text
        assert "Black (Clockwise) to move" in text
