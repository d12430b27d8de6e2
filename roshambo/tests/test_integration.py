"""
Integration tests - End-to-end workflow tests.

Tests the complete flow:
1. Create session
2. Select tokens and place the board
3. Play turns until someone wins
4. Reset and play again
"""

from ..engine_core.action import Action
from ..engine_core.state import DiceType, GamePhase, SetupStep, TokenColor, TokenType
from ..session import GameLoop, SessionManager, SessionState


def _set_up(session, choices):
    for player, (token_type, color) in zip(session.game_state.players, choices):
        assert session.dispatch(Action.select_token(player.player_id, token_type, color)).success
    assert session.dispatch(Action.place_all_tokens_randomly()).success
    assert session.dispatch(Action.start_game()).success


def _play_turn(session, loop):
    """Roll, settle whatever the landing raises, and pass the turn."""
    loop.roll_and_move()
    while session.game_state.phase in (GamePhase.INTERACTION, GamePhase.DUEL):
        if session.game_state.phase == GamePhase.INTERACTION:
            loop.choose(session.game_state.current_interaction.options[0])
        else:
            session.dispatch(Action.duel_result(TokenType.ROCK, TokenType.SCISSORS))
    if session.game_state.phase != GamePhase.GAME_OVER:
        assert session.dispatch(Action.end_turn()).success


def _play_to_the_end(session, max_turns=1000):
    loop = GameLoop(session)
    for _ in range(max_turns):
        if session.game_state.phase == GamePhase.GAME_OVER:
            break
        _play_turn(session, loop)
    return session.game_state


class TestFullGameFlow:
    """Tests for complete game flow."""

    def test_game_reaches_a_winner(self, session_manager):
        """A seeded three-player game is played out to the final space."""
        session = session_manager.create_session(seed=7, player_count=3)
        _set_up(session, [
            (TokenType.SCISSORS, TokenColor.WHITE),
            (TokenType.ROCK, TokenColor.GREEN),
            (TokenType.PAPER, TokenColor.BLUE),
        ])

        assert [p.token_type for p in session.game_state.players] == [
            TokenType.ROCK, TokenType.PAPER, TokenType.SCISSORS,
        ]

        state = _play_to_the_end(session)

        assert state.phase == GamePhase.GAME_OVER
        assert state.winner is not None
        assert state.winner.position == state.board_size
        assert session.state == SessionState.GAME_OVER
        assert not session.is_active()

    def test_game_over_is_final(self, session_manager):
        session = session_manager.create_session(seed=11, player_count=2)
        _set_up(session, [
            (TokenType.ROCK, TokenColor.ORANGE),
            (TokenType.PAPER, TokenColor.RED),
        ])
        state = _play_to_the_end(session)

        result = session.dispatch(Action.roll_dice(DiceType.REGULAR))

        assert not result.success
        assert session.game_state is state

    def test_reset_starts_over(self, session_manager, progress_store):
        """After a reset the game is back at the first setup step."""
        progress_store.put(1)
        session = session_manager.create_session(seed=3, player_count=2)
        _set_up(session, [
            (TokenType.ROCK, TokenColor.ORANGE),
            (TokenType.SCISSORS, TokenColor.YELLOW),
        ])
        _play_to_the_end(session)

        assert session.dispatch(Action.reset_game()).success

        state = session.game_state
        assert state.phase == GamePhase.SETUP
        assert state.setup_step == SetupStep.PLAYER_COUNT
        assert state.players == []
        assert state.winner is None
        assert state.setup_player_idx == 1
        assert session.state == SessionState.ACTIVE

    def test_seeded_games_replay(self):
        """The same seed and the same inputs give the same game."""
        winners = []
        for _ in range(2):
            session = SessionManager().create_session(seed=21, player_count=2)
            _set_up(session, [
                (TokenType.PAPER, TokenColor.BLUE),
                (TokenType.SCISSORS, TokenColor.WHITE),
            ])
            state = _play_to_the_end(session)
            winners.append((state.winner.name, session.action_count))

        assert winners[0] == winners[1]
