"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a front end and the engine.
Enum-valued engine fields travel as their string values ("rock",
"advantage", "moveForwardOrDrawCard", ...).

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- VALIDATION_ERROR: Request could not be turned into an engine action
- ACTION_REJECTED: The engine refused the action in the current state
- INTERNAL_ERROR: Unexpected failure
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ACTION_REJECTED = "ACTION_REJECTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display."""
    card_id: str
    card_type: str = Field(description="advantage or disadvantage")
    title: str
    description: str
    effect: dict[str, Any] = Field(
        default_factory=dict, description='e.g. {"kind": "move", "spaces": 5}'
    )

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    name: str
    token_type: str
    token_color: str
    position: int = 0
    has_skipped_turn: bool = False
    is_current_turn: bool = False
    advantage_cards: list[CardInfo] = Field(default_factory=list)
    disadvantage_cards: list[CardInfo] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class BoardTokenInfo(BaseModel):
    """A board token. Position -1 means not placed yet."""
    token_id: str
    token_type: str
    color: str
    position: int = -1


class DiceInfo(BaseModel):
    """Current dice values."""
    regular: Optional[int] = None
    rps: list[Optional[str]] = Field(default_factory=list)


class DuelInfo(BaseModel):
    """Duel in progress, or the last one settled this turn."""
    player1_id: Optional[str] = None
    player2_id: Optional[str] = None
    result: Optional[str] = Field(None, description="player1, player2 or draw")


class InteractionInfo(BaseModel):
    """A pending interaction. Send one of `options` back verbatim."""
    interaction_type: str
    source_player_id: Optional[str] = None
    target_player_id: Optional[str] = None
    board_token: Optional[BoardTokenInfo] = None
    options: list[str] = Field(default_factory=list)


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    player_count: Optional[int] = Field(
        None, ge=2, le=6, description="Apply SET_PLAYER_COUNT right away"
    )
    random_seed: Optional[int] = Field(None, description="Seed for reproducible games")


class ActionRequest(BaseModel):
    """
    One engine action.

    `action_type` is the action kind in snake case (e.g. "move_player").
    Only the fields that kind uses need to be set.
    """
    action_type: str = Field(..., description="e.g. set_player_count, roll_dice, end_turn")

    player_id: Optional[str] = None
    target_player_id: Optional[str] = None
    card_id: Optional[str] = None
    token_id: Optional[str] = None

    count: Optional[int] = None
    token_type: Optional[str] = Field(None, description="rock, paper or scissors")
    token_color: Optional[str] = None
    position: Optional[int] = None
    index: Optional[int] = None

    dice_type: Optional[str] = Field(None, description="regular or rps")
    value: Optional[int] = None
    spaces: Optional[int] = None
    card_type: Optional[str] = Field(None, description="advantage or disadvantage")
    player1_value: Optional[str] = None
    player2_value: Optional[str] = None
    choice: Optional[str] = None

    interaction_type: Optional[str] = Field(
        None, description="For set_interaction: source is player_id, target is target_player_id"
    )


class ChoiceRequest(BaseModel):
    """Answer to the pending interaction."""
    option: str = Field(..., description="One of the interaction's options, verbatim")
    opponent_id: Optional[str] = Field(
        None, description="Who to duel on \"Call for duel\"; defaults to the first eligible player"
    )


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    phase: str
    setup_step: str
    board_size: int
    current_player_id: Optional[str] = None
    setup_player_index: int = 0
    current_token_placement_type: Optional[str] = None
    players: list[PlayerInfo] = Field(default_factory=list)
    board_tokens: list[BoardTokenInfo] = Field(default_factory=list)
    deck_sizes: dict[str, int] = Field(default_factory=dict)
    discard_sizes: dict[str, int] = Field(default_factory=dict)
    dice: DiceInfo = Field(default_factory=DiceInfo)
    duel: Optional[DuelInfo] = None
    card_in_play: Optional[CardInfo] = None
    current_interaction: Optional[InteractionInfo] = None
    winner: Optional[PlayerInfo] = None
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    phase: str
    setup_step: str
    player_count: int = 0
    action_count: int = 0
    random_seed: Optional[int] = None
    created_at: float = 0.0
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """
    Result of one action.

    A rejected action is not an HTTP error: `applied` is false and the
    game state is returned unchanged.
    """
    session_id: str
    applied: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    changes: list[str] = Field(default_factory=list)
    game_state: GameStateResponse
    api_version: str = "v1"


class ChoiceResponse(BaseModel):
    """Result of answering an interaction."""
    session_id: str
    success: bool
    changes: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    error_code: Optional[str] = None
    game_state: GameStateResponse
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
