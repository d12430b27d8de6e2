"""
Tests for sessions, the setup progress store and the game loop.

Tests:
- Progress store persistence
- Session lifecycle and dispatch
- Setup index mirroring and reload on reset
- Game loop follow-up actions
"""

import json
import time

import pytest

from ..engine_core.action import Action, ErrorCode
from ..engine_core.interaction import (
    CALL_FOR_DUEL,
    DRAW_DISADVANTAGE,
    GIVE_ADVANTAGE,
    MOVE_BACK,
)
from ..engine_core.state import CardType, GamePhase, SetupStep, TokenColor, TokenType
from ..session import GameLoop, MemoryProgressStore, SessionManager, SessionState, SetupProgressStore
from .conftest import make_board_token, make_player, make_playing_state


class TestSetupProgressStore:
    """Tests for the file-based progress store."""

    def test_missing_file_reads_zero(self, tmp_path):
        store = SetupProgressStore(state_dir=tmp_path / "state")
        assert store.get() == 0

    def test_put_and_get(self, tmp_path):
        store = SetupProgressStore(state_dir=tmp_path / "state")
        store.put(3)

        assert store.get() == 3
        assert SetupProgressStore(state_dir=tmp_path / "state").get() == 3

    def test_clear(self, tmp_path):
        store = SetupProgressStore(state_dir=tmp_path)
        store.put(2)
        store.clear()
        assert store.get() == 0
        assert not store.path.exists()

    def test_damaged_file_reads_zero(self, tmp_path):
        store = SetupProgressStore(state_dir=tmp_path)
        store.path.write_text("not json")
        assert store.get() == 0

    def test_file_format(self, tmp_path):
        store = SetupProgressStore(state_dir=tmp_path)
        store.put(1)
        with open(store.path) as f:
            assert json.load(f)["index"] == 1


class TestSessionManager:
    """Tests for SessionManager and Session.dispatch()."""

    def test_create_session(self, session_manager):
        session = session_manager.create_session(seed=1)

        assert session.is_active()
        assert session.game_state.phase == GamePhase.SETUP
        assert session.game_state.setup_step == SetupStep.PLAYER_COUNT
        assert session_manager.get_session(session.session_id) is session

    def test_create_with_player_count(self, session_manager):
        session = session_manager.create_session(player_count=3)
        assert session.game_state.num_players == 3
        assert session.action_count == 1

    def test_invalid_player_count(self, session_manager):
        with pytest.raises(ValueError):
            session_manager.create_session(player_count=9)

    def test_seeded_sessions_match(self, session_manager):
        a = session_manager.create_session(seed=11, player_count=2)
        b = session_manager.create_session(seed=11, player_count=2)
        assert a.game_state == b.game_state

    def test_rejected_dispatch_keeps_state(self, session_manager):
        session = session_manager.create_session()
        before = session.game_state

        result = session.dispatch(Action.start_game())

        assert not result.success
        assert session.game_state is before
        assert session.action_count == 0
        assert session.last_result is result

    def test_setup_index_is_mirrored(self, session_manager, progress_store):
        session = session_manager.create_session(player_count=2)
        session.dispatch(Action.set_setup_player_index(1))
        assert progress_store.get() == 1

    def test_new_session_resumes_setup_index(self):
        manager = SessionManager(store=MemoryProgressStore(2))
        session = manager.create_session()
        assert session.game_state.setup_player_idx == 2

    def test_reset_reloads_setup_index(self, session_manager, progress_store):
        session = session_manager.create_session(player_count=2)
        session.dispatch(Action.set_setup_player_index(1))

        result = session.dispatch(Action.reset_game())

        assert result.success
        assert session.game_state.setup_step == SetupStep.PLAYER_COUNT
        assert session.game_state.setup_player_idx == 1

    def test_game_over_marks_session(self, session_manager):
        session = session_manager.create_session()
        session.game_state = make_playing_state([
            make_player("ann", TokenType.ROCK, 62),
            make_player("bob", TokenType.PAPER, 0),
        ])

        session.dispatch(Action.move_player("ann", 2))

        assert session.state == SessionState.GAME_OVER
        assert session.session_id not in session_manager.list_active_sessions()

    def test_end_session(self, session_manager):
        session = session_manager.create_session()
        ended = session_manager.end_session(session.session_id, reason="user_ended")

        assert ended is session
        assert ended.state == SessionState.ABANDONED
        assert session_manager.get_session(session.session_id) is None
        assert session_manager.end_session(session.session_id) is None

    def test_end_finished_session(self, session_manager):
        """A won game keeps its GAME_OVER state when ended."""
        session = session_manager.create_session()
        session.game_state = make_playing_state([
            make_player("ann", TokenType.ROCK, 62),
            make_player("bob", TokenType.PAPER, 3),
        ])
        session.dispatch(Action.move_player("ann", 2))

        ended = session_manager.end_session(session.session_id)

        assert ended.state == SessionState.GAME_OVER

    def test_cleanup_stale_sessions(self, session_manager):
        old = session_manager.create_session()
        fresh = session_manager.create_session()
        old.last_active_at = time.time() - 7200

        removed = session_manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert removed == 1
        assert session_manager.get_session(old.session_id) is None
        assert session_manager.get_session(fresh.session_id) is fresh


class TestGameLoopSetup:
    """Tests for GameLoop.place_board_token()."""

    @pytest.fixture
    def loop(self, session_manager):
        """Two players: rock in seat 0, paper in seat 1, rock placement open."""
        session = session_manager.create_session(seed=5, player_count=2)
        first, second = session.game_state.players
        session.dispatch(Action.select_token(first.player_id, TokenType.ROCK, TokenColor.GREEN))
        session.dispatch(Action.select_token(second.player_id, TokenType.PAPER, TokenColor.RED))
        return GameLoop(session)

    def test_hands_setup_to_next_player(self, loop):
        token = loop.state.unplaced_tokens(TokenType.ROCK)[0]

        result = loop.place_board_token(token.token_id, 1)

        assert result.success
        assert loop.state.setup_player_idx == 1
        assert loop.state.setup_step == SetupStep.ROCK_TOKEN_PLACEMENT

    def test_rejected_placement_changes_nothing(self, loop):
        token = loop.state.unplaced_tokens(TokenType.PAPER)[0]
        before = loop.state

        result = loop.place_board_token(token.token_id, 1)

        assert not result.success
        assert loop.state is before

    def test_full_manual_setup(self, loop, progress_store):
        """Placing every token reaches ready with the index back at 0."""
        position = 1
        while loop.state.unplaced_tokens():
            placement_type = loop.state.current_token_placement_type
            token = loop.state.unplaced_tokens(placement_type)[0]
            result = loop.place_board_token(token.token_id, position)
            assert result.success, result.errors
            position += 1

        assert loop.state.setup_step == SetupStep.READY
        assert loop.state.setup_player_idx == 0
        assert progress_store.get() == 0
        assert loop.session.dispatch(Action.start_game()).success


class TestGameLoopPlay:
    """Tests for GameLoop.choose() and roll_and_move()."""

    @pytest.fixture
    def session(self, session_manager):
        session = session_manager.create_session(seed=8)
        session.game_state = make_playing_state([
            make_player("ann", TokenType.ROCK, 10),
            make_player("bob", TokenType.PAPER, 14),
            make_player("cat", TokenType.ROCK, 20, color=TokenColor.ORANGE),
        ])
        return session

    def test_give_card_goes_to_target(self, session):
        loop = GameLoop(session)
        session.dispatch(Action.move_player("ann", 4))

        result = loop.choose(GIVE_ADVANTAGE)

        assert result.success
        assert len(session.game_state.get_player("bob").advantage_cards) == 1
        assert session.game_state.get_player("ann").advantage_cards == []
        assert session.game_state.current_interaction is None
        assert result.phase == GamePhase.PLAYING

    def test_draw_goes_to_current_player(self, session):
        loop = GameLoop(session)
        session.dispatch(Action.move_player("ann", 4))

        result = loop.choose(DRAW_DISADVANTAGE)

        assert result.success
        assert len(session.game_state.get_player("ann").disadvantage_cards) == 1
        assert result.phase == GamePhase.CARD_EFFECT

    def test_call_for_duel(self, session):
        loop = GameLoop(session)
        session.dispatch(Action.move_player("ann", 10))

        result = loop.choose(CALL_FOR_DUEL)

        duel = session.game_state.duel
        assert result.phase == GamePhase.DUEL
        assert duel.player1.player_id == "ann"
        assert duel.player2.player_id == "cat"

    def test_board_token_duel_picks_first_eligible_opponent(self, session):
        """A duel called on a board token goes to the first player off the start."""
        session.game_state = session.game_state._copy_with(
            board_tokens=[make_board_token("t1", TokenType.ROCK, 12)]
        )
        loop = GameLoop(session)
        session.dispatch(Action.move_player("ann", 2))
        assert session.game_state.current_interaction.target_player is None

        result = loop.choose(CALL_FOR_DUEL)

        duel = session.game_state.duel
        assert result.success
        assert result.phase == GamePhase.DUEL
        assert duel.player1.player_id == "ann"
        assert duel.player2.player_id == "bob"

    def test_board_token_duel_with_chosen_opponent(self, session):
        session.game_state = session.game_state._copy_with(
            board_tokens=[make_board_token("t1", TokenType.ROCK, 12)]
        )
        loop = GameLoop(session)
        session.dispatch(Action.move_player("ann", 2))

        result = loop.choose(CALL_FOR_DUEL, opponent_id="cat")

        assert result.phase == GamePhase.DUEL
        assert session.game_state.duel.player2.player_id == "cat"

    def test_duel_without_opponent_fails(self, session):
        """Nobody to duel leaves the interaction pending."""
        session.game_state = session.game_state._copy_with(
            board_tokens=[make_board_token("t1", TokenType.ROCK, 12)]
        )
        loop = GameLoop(session)
        session.dispatch(Action.move_player("ann", 2))

        result = loop.choose(CALL_FOR_DUEL, opponent_id="ann")

        assert not result.success
        assert result.error_code == ErrorCode.UNKNOWN_ENTITY
        assert result.phase == GamePhase.INTERACTION
        assert session.game_state.current_interaction is not None

        result = loop.choose(CALL_FOR_DUEL, opponent_id="zed")
        assert not result.success
        assert session.game_state.duel.player1 is None

    def test_movement_choice_has_no_follow_up(self, session):
        session.game_state = session.game_state._copy_with(
            board_tokens=[make_board_token("t1", TokenType.PAPER, 12)]
        )
        loop = GameLoop(session)
        session.dispatch(Action.move_player("ann", 2))

        result = loop.choose(MOVE_BACK)

        assert result.success
        assert session.game_state.get_player("ann").position == 10
        assert session.game_state.card_count(CardType.ADVANTAGE) == 19

    def test_illegal_option(self, session):
        loop = GameLoop(session)
        session.dispatch(Action.move_player("ann", 4))

        result = loop.choose("Dance")

        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_CHOICE
        assert session.game_state.current_interaction is not None

    def test_roll_and_move(self, session):
        loop = GameLoop(session)

        result = loop.roll_and_move(value=3)

        assert result.success
        assert session.game_state.dice.regular.value == 3
        assert session.game_state.get_player("ann").position == 13

    def test_roll_and_move_random(self, session):
        loop = GameLoop(session)
        loop.roll_and_move()

        rolled = session.game_state.dice.regular.value
        assert 1 <= rolled <= 6
        assert session.game_state.get_player("ann").position == 10 + rolled

    def test_roll_and_move_needs_playing_phase(self, session):
        loop = GameLoop(session)
        session.dispatch(Action.move_player("ann", 4))

        result = loop.roll_and_move(value=2)

        assert not result.success
        assert result.error_code == ErrorCode.INVALID_TRANSITION

    def test_roll_and_move_reports_winner(self, session):
        session.game_state = session.game_state.with_player(
            session.game_state.get_player("ann").with_position(61)
        )
        loop = GameLoop(session)

        result = loop.roll_and_move(value=5)

        assert result.winner == "Ann"
        assert result.phase == GamePhase.GAME_OVER
