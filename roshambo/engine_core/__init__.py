"""
Engine Core - Deterministic game state management.

The engine is the runtime that:
1. Builds the card decks and board tokens
2. Manages GameState
3. Decides landing interactions
4. Applies actions via the reducer
"""

from .state import (
    GameState,
    Player,
    PlayerToken,
    BoardToken,
    Card,
    CardEffect,
    Interaction,
    DuelState,
    TokenType,
    TokenColor,
    CardType,
    EffectKind,
    GamePhase,
    SetupStep,
    DiceType,
    InteractionType,
    DuelOutcome,
)
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .reducer import Reducer, apply_action, create_initial_state
from .rules import GameRules
from .cards import generate_advantage_cards, generate_disadvantage_cards
from .interaction import resolve_landing, determine_rps_winner

__all__ = [
    "GameState",
    "Player",
    "PlayerToken",
    "BoardToken",
    "Card",
    "CardEffect",
    "Interaction",
    "DuelState",
    "TokenType",
    "TokenColor",
    "CardType",
    "EffectKind",
    "GamePhase",
    "SetupStep",
    "DiceType",
    "InteractionType",
    "DuelOutcome",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "Reducer",
    "apply_action",
    "create_initial_state",
    "GameRules",
    "generate_advantage_cards",
    "generate_disadvantage_cards",
    "resolve_landing",
    "determine_rps_winner",
]
