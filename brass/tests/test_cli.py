"""
Tests for the command-line interface.
"""

import pytest

from ..cli import main


class TestCLI:
    """Tests for brass subcommands."""

    def test_new_prints_summary(self, capsys):
        """`new` prints the game with its turn order."""
        main(["new", "--players", "alice", "bob", "--seed", "4"])

        out = capsys.readouterr().out
        assert "Turn order:" in out
        assert "alice" in out and "bob" in out
        assert "Era: canal" in out

    def test_new_rejects_bad_player_count(self, capsys):
        """Too many players exits with an error."""
        with pytest.raises(SystemExit) as exc:
            main(["new", "--players", "a", "b", "c", "d", "e"])

        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().out

    def test_simulate_reports_winner(self, capsys):
        """`simulate` plays to the end and prints the standings."""
        main(["simulate", "--players", "3", "--seed", "2"])

        out = capsys.readouterr().out
        assert "finished after" in out
        assert "Winner: player-" in out
        assert "  3. player-" in out

    def test_no_command(self, capsys):
        """Without a subcommand the help is shown."""
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1
