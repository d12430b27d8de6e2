"""Tests for the command-line interface."""

import json

import pytest

from ..cli import main


class TestCLI:
    """Tests for the roshambo command."""

    def test_decks(self, capsys):
        main(["decks", "--seed", "1"])
        out = capsys.readouterr().out

        assert "Advantage deck (19 cards):" in out
        assert "Disadvantage deck (19 cards):" in out
        assert out.count("Composition:") == 2

    def test_decks_are_reproducible(self, capsys):
        main(["decks", "--seed", "5"])
        first = capsys.readouterr().out
        main(["decks", "--seed", "5"])
        assert capsys.readouterr().out == first

    def test_progress(self, tmp_path, capsys):
        (tmp_path / "setup_player_index.json").write_text(json.dumps({"index": 2}))

        main(["progress", "--state-dir", str(tmp_path)])
        assert "Setup player index: 2" in capsys.readouterr().out

        main(["progress", "--clear", "--state-dir", str(tmp_path)])
        assert not (tmp_path / "setup_player_index.json").exists()

    def test_no_command(self):
        with pytest.raises(SystemExit):
            main([])
