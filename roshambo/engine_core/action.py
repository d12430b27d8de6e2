"""
Action System - Actions, payloads, and results.

Actions represent every intent the outside world can send the engine:
1. Setup actions (player count, token selection, board token placement)
2. Turn actions (dice, movement, cards, duels, interactions)
3. Housekeeping (setup player index, reset)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import (
    CardType,
    DiceType,
    Interaction,
    TokenColor,
    TokenType,
)


class ActionType(Enum):
    """Closed set of action kinds. Every member must have a reducer handler."""
    # Setup
    SET_PLAYER_COUNT = "set_player_count"
    SELECT_TOKEN = "select_token"
    PLACE_BOARD_TOKEN = "place_board_token"
    PLACE_ALL_TOKENS_RANDOMLY = "place_all_tokens_randomly"
    NEXT_TOKEN_PLACEMENT_PHASE = "next_token_placement_phase"
    START_GAME = "start_game"

    # Turn
    ROLL_DICE = "roll_dice"
    MOVE_PLAYER = "move_player"
    DRAW_CARD = "draw_card"
    GIVE_CARD = "give_card"
    PLAY_CARD = "play_card"
    INITIATE_DUEL = "initiate_duel"
    DUEL_RESULT = "duel_result"
    SET_INTERACTION = "set_interaction"
    RESOLVE_INTERACTION = "resolve_interaction"
    END_TURN = "end_turn"

    # Housekeeping
    SET_SETUP_PLAYER_INDEX = "set_setup_player_index"
    RESET_GAME = "reset_game"


class ErrorCode(str, Enum):
    """Why an action was not applied."""
    INVALID_TRANSITION = "INVALID_TRANSITION"
    UNKNOWN_ENTITY = "UNKNOWN_ENTITY"
    ILLEGAL_CHOICE = "ILLEGAL_CHOICE"
    DECK_EXHAUSTED = "DECK_EXHAUSTED"
    DUPLICATE_SELECTION = "DUPLICATE_SELECTION"
    NO_HANDLER = "NO_HANDLER"
    HANDLER_ERROR = "HANDLER_ERROR"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    This is a generic container; validation happens in the reducer.
    """
    # Entity references
    player_id: str | None = None
    target_player_id: str | None = None
    card_id: str | None = None
    token_id: str | None = None

    # Setup parameters
    count: int | None = None
    token_type: TokenType | None = None
    token_color: TokenColor | None = None
    position: int | None = None
    index: int | None = None

    # Turn parameters
    dice_type: DiceType | None = None
    value: int | None = None
    spaces: int | None = None
    card_type: CardType | None = None
    player1_value: TokenType | None = None
    player2_value: TokenType | None = None
    choice: str | None = None
    interaction: Interaction | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are:
    - Validated before application
    - Applied atomically by the reducer
    - Plain values, so they can be logged and replayed
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def set_player_count(cls, count: int) -> Action:
        return cls(ActionType.SET_PLAYER_COUNT, ActionPayload(count=count))

    @classmethod
    def select_token(
        cls, player_id: str, token_type: TokenType, token_color: TokenColor
    ) -> Action:
        return cls(
            ActionType.SELECT_TOKEN,
            ActionPayload(player_id=player_id, token_type=token_type, token_color=token_color),
        )

    @classmethod
    def place_board_token(cls, token_id: str, position: int) -> Action:
        return cls(ActionType.PLACE_BOARD_TOKEN, ActionPayload(token_id=token_id, position=position))

    @classmethod
    def place_all_tokens_randomly(cls) -> Action:
        return cls(ActionType.PLACE_ALL_TOKENS_RANDOMLY)

    @classmethod
    def next_token_placement_phase(cls) -> Action:
        return cls(ActionType.NEXT_TOKEN_PLACEMENT_PHASE)

    @classmethod
    def start_game(cls) -> Action:
        return cls(ActionType.START_GAME)

    @classmethod
    def roll_dice(cls, dice_type: DiceType, value: int | None = None) -> Action:
        """Roll a die. A supplied value is used as the regular die's result."""
        return cls(ActionType.ROLL_DICE, ActionPayload(dice_type=dice_type, value=value))

    @classmethod
    def move_player(cls, player_id: str, spaces: int) -> Action:
        return cls(ActionType.MOVE_PLAYER, ActionPayload(player_id=player_id, spaces=spaces))

    @classmethod
    def draw_card(cls, card_type: CardType) -> Action:
        return cls(ActionType.DRAW_CARD, ActionPayload(card_type=card_type))

    @classmethod
    def give_card(cls, from_player_id: str, to_player_id: str, card_type: CardType) -> Action:
        return cls(
            ActionType.GIVE_CARD,
            ActionPayload(
                player_id=from_player_id,
                target_player_id=to_player_id,
                card_type=card_type,
            ),
        )

    @classmethod
    def play_card(cls, card_id: str) -> Action:
        return cls(ActionType.PLAY_CARD, ActionPayload(card_id=card_id))

    @classmethod
    def initiate_duel(cls, player1_id: str, player2_id: str) -> Action:
        return cls(
            ActionType.INITIATE_DUEL,
            ActionPayload(player_id=player1_id, target_player_id=player2_id),
        )

    @classmethod
    def duel_result(cls, player1_value: TokenType, player2_value: TokenType) -> Action:
        return cls(
            ActionType.DUEL_RESULT,
            ActionPayload(player1_value=player1_value, player2_value=player2_value),
        )

    @classmethod
    def set_interaction(cls, interaction: Interaction) -> Action:
        return cls(ActionType.SET_INTERACTION, ActionPayload(interaction=interaction))

    @classmethod
    def resolve_interaction(cls, choice: str) -> Action:
        return cls(ActionType.RESOLVE_INTERACTION, ActionPayload(choice=choice))

    @classmethod
    def end_turn(cls) -> Action:
        return cls(ActionType.END_TURN)

    @classmethod
    def set_setup_player_index(cls, index: int) -> Action:
        return cls(ActionType.SET_SETUP_PLAYER_INDEX, ActionPayload(index=index))

    @classmethod
    def reset_game(cls) -> Action:
        return cls(ActionType.RESET_GAME)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Error and error code (if rejected)
    - Human-readable changes (for UI/logging)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: ErrorCode | None = None

    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode = ErrorCode.INVALID_TRANSITION) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
        )
