"""
Tests for the interaction resolver.

Tests:
- Dominance relation and duel outcomes
- Board token and player decision tables
- Board tokens taking precedence over players
"""

import pytest

from ..engine_core.interaction import (
    beats,
    board_token_interaction,
    determine_rps_winner,
    player_interaction,
    resolve_landing,
)
from ..engine_core.state import DuelOutcome, InteractionType, TokenType
from .conftest import make_board_token, make_player

ROCK, PAPER, SCISSORS = TokenType.ROCK, TokenType.PAPER, TokenType.SCISSORS


class TestDominance:
    """Tests for beats() and determine_rps_winner()."""

    @pytest.mark.parametrize("winner, loser", [
        (ROCK, SCISSORS),
        (SCISSORS, PAPER),
        (PAPER, ROCK),
    ])
    def test_beats(self, winner, loser):
        assert beats(winner, loser)
        assert not beats(loser, winner)

    def test_nothing_beats_itself(self):
        assert not any(beats(t, t) for t in TokenType)

    @pytest.mark.parametrize("v1, v2, outcome", [
        (ROCK, SCISSORS, DuelOutcome.PLAYER1),
        (PAPER, PAPER, DuelOutcome.DRAW),
        (SCISSORS, ROCK, DuelOutcome.PLAYER2),
        (PAPER, ROCK, DuelOutcome.PLAYER1),
    ])
    def test_winner(self, v1, v2, outcome):
        assert determine_rps_winner(v1, v2) == outcome


class TestBoardTokenInteraction:
    """Tests for landing on a board token."""

    @pytest.mark.parametrize("mover, token, expected, options", [
        (ROCK, SCISSORS, InteractionType.MOVE_FORWARD_OR_DRAW_CARD,
         ["Move forward 2 spaces", "Draw advantage card"]),
        (PAPER, SCISSORS, InteractionType.MOVE_BACK_OR_DRAW_CARD,
         ["Move back 2 spaces", "Draw disadvantage card"]),
        (SCISSORS, SCISSORS, InteractionType.CALL_DUEL_OR_SKIP,
         ["Call for duel", "Skip"]),
    ])
    def test_decision_table(self, mover, token, expected, options):
        moved = make_player("ann", mover, 5)
        others = [moved, make_player("bob", PAPER if mover != PAPER else ROCK, 3)]

        interaction = board_token_interaction(moved, others, make_board_token("t", token, 5))

        assert interaction.interaction_type == expected
        assert interaction.options == options
        assert interaction.board_token.token_id == "t"

    def test_same_type_needs_an_opponent_off_start(self):
        moved = make_player("ann", ROCK, 5)
        others = [moved, make_player("bob", PAPER, 0)]
        assert board_token_interaction(moved, others, make_board_token("t", ROCK, 5)) is None


class TestPlayerInteraction:
    """Tests for landing on another player."""

    @pytest.mark.parametrize("mover, other, expected, options", [
        (SCISSORS, PAPER, InteractionType.DRAW_ADVANTAGE_OR_GIVE_DISADVANTAGE,
         ["Draw advantage card", "Give disadvantage card"]),
        (SCISSORS, ROCK, InteractionType.DRAW_DISADVANTAGE_OR_GIVE_ADVANTAGE,
         ["Draw disadvantage card", "Give advantage card"]),
        (ROCK, ROCK, InteractionType.CALL_DUEL, ["Call for duel"]),
    ])
    def test_decision_table(self, mover, other, expected, options):
        interaction = player_interaction(make_player("ann", mover, 7), make_player("bob", other, 7))

        assert interaction.interaction_type == expected
        assert interaction.options == options
        assert interaction.source_player.player_id == "ann"
        assert interaction.target_player.player_id == "bob"

    def test_options_are_copies(self):
        """Mutating one interaction's options leaves the table alone."""
        first = player_interaction(make_player("ann", ROCK, 7), make_player("bob", ROCK, 7))
        first.options.append("Extra")
        second = player_interaction(make_player("ann", ROCK, 7), make_player("bob", ROCK, 7))
        assert second.options == ["Call for duel"]


class TestResolveLanding:
    """Tests for resolve_landing()."""

    def test_empty_space(self):
        moved = make_player("ann", ROCK, 9)
        assert resolve_landing(moved, [moved], [], []) is None

    def test_board_token_wins_over_player(self):
        moved = make_player("ann", ROCK, 9)
        bob = make_player("bob", PAPER, 9)
        interaction = resolve_landing(
            moved, [moved, bob], [make_board_token("t", SCISSORS, 9)], [bob]
        )
        assert interaction.interaction_type == InteractionType.MOVE_FORWARD_OR_DRAW_CARD
        assert interaction.target_player is None

    def test_only_first_player_counts(self):
        moved = make_player("ann", ROCK, 9)
        bob = make_player("bob", SCISSORS, 9)
        cat = make_player("cat", PAPER, 9)
        interaction = resolve_landing(moved, [moved, bob, cat], [], [bob, cat])
        assert interaction.target_player.player_id == "bob"
        assert interaction.interaction_type == InteractionType.DRAW_ADVANTAGE_OR_GIVE_DISADVANTAGE

    def test_only_first_board_token_counts(self):
        moved = make_player("ann", ROCK, 9)
        others = [moved, make_player("bob", PAPER, 4)]
        tokens = [make_board_token("t1", PAPER, 9), make_board_token("t2", SCISSORS, 9)]
        interaction = resolve_landing(moved, others, tokens, [])
        assert interaction.interaction_type == InteractionType.MOVE_BACK_OR_DRAW_CARD
