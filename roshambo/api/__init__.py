"""
API Module - HTTP interface to the engine.

Exposes the engine via REST API. A front end:
1. Creates a game session
2. Sends setup and turn actions
3. Answers interactions
4. Reads back the game state after every step

All game state is session-scoped. No user accounts.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    ActionRequest,
    ChoiceRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    ActionResponse,
    ChoiceResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    CardInfo,
    BoardTokenInfo,
    InteractionInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "ActionRequest",
    "ChoiceRequest",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "ActionResponse",
    "ChoiceResponse",
    "ErrorResponse",
    # Shared
    "PlayerInfo",
    "CardInfo",
    "BoardTokenInfo",
    "InteractionInfo",
    # Service
    "APIService",
    "create_app",
]
