"""
Pytest fixtures for Roshambo tests.
"""

import random

import pytest

from ..engine_core.action import Action
from ..engine_core.cards import generate_advantage_cards, generate_disadvantage_cards
from ..engine_core.reducer import Reducer, create_initial_state
from ..engine_core.rules import GameRules
from ..engine_core.state import (
    BoardToken,
    Card,
    CardEffect,
    CardType,
    GamePhase,
    GameState,
    Player,
    PlayerToken,
    SetupStep,
    TOKEN_COLORS,
    TokenColor,
    TokenType,
)
from ..session import MemoryProgressStore, SessionManager


def make_player(
    player_id: str,
    token_type: TokenType = TokenType.ROCK,
    position: int = 0,
    color: TokenColor | None = None,
) -> Player:
    """A player who has already chosen a token."""
    return Player(
        player_id=player_id,
        name=player_id.title(),
        token=PlayerToken(
            token_id=f"{player_id}_token",
            token_type=token_type,
            color=color or TOKEN_COLORS[token_type][0],
            position=position,
            owner=player_id,
        ),
        token_selected=True,
    )


def make_board_token(token_id: str, token_type: TokenType, position: int) -> BoardToken:
    return BoardToken(
        token_id=token_id,
        token_type=token_type,
        color=TOKEN_COLORS[token_type][0],
        position=position,
    )


def make_card(card_id: str, effect: CardEffect, card_type: CardType = CardType.ADVANTAGE) -> Card:
    return Card(
        card_id=card_id,
        card_type=card_type,
        title=card_id.replace("_", " ").title(),
        description="Test card",
        effect=effect,
    )


def make_playing_state(players, board_tokens=(), **kwargs) -> GameState:
    """A game in the playing phase with full decks and the given board."""
    rng = random.Random(99)
    fields = dict(
        players=list(players),
        board_tokens=list(board_tokens),
        advantage_deck=generate_advantage_cards(rng),
        disadvantage_deck=generate_disadvantage_cards(rng),
        phase=GamePhase.PLAYING,
        setup_step=SetupStep.READY,
    )
    fields.update(kwargs)
    return GameState(**fields)


@pytest.fixture
def rules() -> GameRules:
    """Standard rules."""
    return GameRules()


@pytest.fixture
def reducer(rules: GameRules) -> Reducer:
    """Reducer with a seeded random source."""
    return Reducer(rules=rules, rng=random.Random(1234))


@pytest.fixture
def initial_state(rules: GameRules) -> GameState:
    """Fresh game waiting for a player count."""
    return create_initial_state(rules)


@pytest.fixture
def two_player_setup(reducer: Reducer, initial_state: GameState) -> GameState:
    """Two players created, nobody has chosen a token yet."""
    result = reducer.apply(initial_state, Action.set_player_count(2))
    assert result.success
    return result.new_state


@pytest.fixture
def placement_state(reducer: Reducer, two_player_setup: GameState) -> GameState:
    """
    Two players past token selection.

    Player 1 picked scissors and Player 2 picked rock, so starting the
    game has to reorder them.
    """
    state = two_player_setup
    first, second = state.players
    state = reducer.apply(
        state, Action.select_token(first.player_id, TokenType.SCISSORS, TokenColor.YELLOW)
    ).new_state
    state = reducer.apply(
        state, Action.select_token(second.player_id, TokenType.ROCK, TokenColor.GREEN)
    ).new_state
    return state


@pytest.fixture
def playing_state(reducer: Reducer, placement_state: GameState) -> GameState:
    """Two-player game started after random token placement."""
    state = reducer.apply(placement_state, Action.place_all_tokens_randomly()).new_state
    return reducer.apply(state, Action.start_game()).new_state


@pytest.fixture
def open_board_state() -> GameState:
    """Three players on an empty board: rock at 10, paper at 20, scissors at 30."""
    return make_playing_state([
        make_player("ann", TokenType.ROCK, 10),
        make_player("bob", TokenType.PAPER, 20),
        make_player("cat", TokenType.SCISSORS, 30),
    ])


@pytest.fixture
def progress_store() -> MemoryProgressStore:
    return MemoryProgressStore()


@pytest.fixture
def session_manager(progress_store: MemoryProgressStore) -> SessionManager:
    """Session manager backed by an in-memory progress store."""
    return SessionManager(store=progress_store)
