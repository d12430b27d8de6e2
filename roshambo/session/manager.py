"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Caller creates a session -> fresh game in the setup phase
2. During the game every action goes through Session.dispatch()
3. Game ends or caller quits -> session destroyed

PERSISTENCE RULES:
- Game state is in-memory only (session-scoped)
- The setup player index is mirrored to a progress store on every
  SET_SETUP_PLAYER_INDEX and read back when a game starts or resets
"""

from __future__ import annotations
import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..engine_core.action import Action, ActionResult, ActionType
from ..engine_core.reducer import Reducer, create_initial_state
from ..engine_core.rules import GameRules
from ..engine_core.state import GamePhase, GameState
from .store import MemoryProgressStore, SetupProgressStore

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Setup or play in progress
    GAME_OVER = "game_over"  # Someone won
    ABANDONED = "abandoned"  # Ended before a winner


@dataclass
class Session:
    """
    A game session.

    Contains:
    - The current canonical game state
    - The reducer (rules plus this session's random source)
    - The setup progress store
    """
    session_id: str
    reducer: Reducer
    store: SetupProgressStore | MemoryProgressStore
    created_at: float
    game_state: GameState = field(default_factory=GameState)

    state: SessionState = SessionState.ACTIVE
    seed: int | None = None
    action_count: int = 0
    last_active_at: float = 0.0
    last_result: ActionResult | None = None

    @property
    def rules(self) -> GameRules:
        return self.reducer.rules

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state == SessionState.ACTIVE

    def dispatch(self, action: Action) -> ActionResult:
        """
        Apply an action to this session's game.

        The new state is kept only if the action succeeded; a rejected
        action leaves the game exactly as it was.
        """
        result = self.reducer.apply(self.game_state, action)
        self.last_result = result
        self.last_active_at = time.time()
        if not result.success:
            return result

        new_state = result.new_state
        if action.action_type == ActionType.SET_SETUP_PLAYER_INDEX:
            self.store.put(new_state.setup_player_idx)
        elif action.action_type == ActionType.RESET_GAME:
            new_state = new_state._copy_with(setup_player_idx=self.store.get())
            result.new_state = new_state

        self.game_state = new_state
        self.action_count += 1

        if new_state.phase == GamePhase.GAME_OVER:
            self.state = SessionState.GAME_OVER
        else:
            self.state = SessionState.ACTIVE
        return result


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their rules, random source and progress store
    - Track active sessions
    - Clean up idle sessions

    Game state is in-memory only.
    """

    def __init__(
        self,
        rules: GameRules | None = None,
        store: SetupProgressStore | MemoryProgressStore | None = None,
    ):
        self.rules = rules or GameRules()
        self.store = store if store is not None else MemoryProgressStore()
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        seed: int | None = None,
        player_count: int | None = None,
        rules: GameRules | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            seed: Seed for the session's random source, for replayable games
            player_count: If given, SET_PLAYER_COUNT is applied straight away
            rules: Override the manager's rules for this session

        Returns:
            New Session in the setup phase

        Raises:
            ValueError: If player_count is outside the rules' bounds
        """
        rules = rules or self.rules
        if player_count is not None and not rules.min_players <= player_count <= rules.max_players:
            raise ValueError(
                f"player_count must be between {rules.min_players} and {rules.max_players}"
            )

        session_id = str(uuid.uuid4())
        now = time.time()
        session = Session(
            session_id=session_id,
            reducer=Reducer(rules=rules, rng=random.Random(seed)),
            store=self.store,
            created_at=now,
            last_active_at=now,
            game_state=create_initial_state(rules, setup_player_idx=self.store.get()),
            seed=seed,
        )
        if player_count is not None:
            session.dispatch(Action.set_player_count(player_count))

        self._sessions[session_id] = session
        logger.info("Created session %s (seed=%s)", session_id, seed)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> Session | None:
        """
        End a session and remove it from memory.

        Returns the ended session, marked ABANDONED unless someone had
        already won, or None if there was no such session. The progress
        store is left alone so the next game can resume setup.
        """
        session = self._sessions.get(session_id)
        if not session:
            return None

        if session.game_state.phase != GamePhase.GAME_OVER:
            session.state = SessionState.ABANDONED
        del self._sessions[session_id]
        logger.info("Ended session %s (%s)", session_id, reason)
        return session

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        End sessions idle for longer than max_age_seconds.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active_at > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
