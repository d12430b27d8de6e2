"""
Session Module - Manages game sessions.

A session represents one play-through:
- Created when a caller starts a game
- Holds the current game state and its reducer
- Destroyed when the game ends or the caller quits

Only the setup player index outlives a session, through the
setup progress store.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, TurnResult
from .store import SetupProgressStore, MemoryProgressStore

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "TurnResult",
    "SetupProgressStore",
    "MemoryProgressStore",
]
