"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine actions
2. Manages sessions and their game loops
3. Formats game state for the front end

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from .schemas import (
    # Requests
    ActionRequest,
    ChoiceRequest,
    CreateSessionRequest,
    # Responses
    ActionResponse,
    ChoiceResponse,
    GameStateResponse,
    SessionResponse,
    # Shared
    BoardTokenInfo,
    CardInfo,
    DiceInfo,
    DuelInfo,
    InteractionInfo,
    PlayerInfo,
    # Enums
    SessionStatus,
)
from ..engine_core.action import Action, ActionPayload, ActionType
from ..engine_core.interaction import OPTIONS
from ..engine_core.state import (
    BoardToken,
    Card,
    CardType,
    DiceType,
    GameState,
    Interaction,
    InteractionType,
    Player,
    TokenColor,
    TokenType,
)
from ..session import GameLoop, Session, SessionManager

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _enum(enum_cls: type[E], value: str | None, field_name: str) -> E | None:
    """Parse an enum value from a request field, None passes through."""
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"Invalid {field_name} '{value}' (expected one of: {allowed})")


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create session
        session_response = service.create_session(CreateSessionRequest(player_count=2))

        # Apply an action
        action_response = service.apply_action(session_id, ActionRequest(action_type="start_game"))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new game session.

        Raises:
            ValueError: If the player count is outside the rules' bounds
        """
        session = self.session_manager.create_session(
            seed=request.random_seed,
            player_count=request.player_count,
        )
        self._game_loops[session.session_id] = GameLoop(session)
        return self._session_response(session)

    def get_session(self, session_id: str) -> SessionResponse | None:
        """Get session status, None if it does not exist."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return None
        return self._session_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session. Returns False if it did not exist."""
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason) is not None

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def get_state(self, session_id: str) -> GameStateResponse | None:
        """Get the full game state, None if the session does not exist."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return None
        return self.state_response(session_id, session.game_state)

    def apply_action(self, session_id: str, request: ActionRequest) -> ActionResponse | None:
        """
        Apply one action to a session.

        Returns None if the session does not exist. A request that cannot
        be turned into an action raises ValueError; an action the engine
        refuses comes back with applied=False.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return None

        action = self.build_action(request, session.game_state)
        result = session.dispatch(action)
        return ActionResponse(
            session_id=session_id,
            applied=result.success,
            error=result.error,
            error_code=result.error_code.value if result.error_code else None,
            changes=result.state_changes,
            game_state=self.state_response(session_id, session.game_state),
        )

    def choose(self, session_id: str, request: ChoiceRequest) -> ChoiceResponse | None:
        """Answer the pending interaction through the session's game loop."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return None

        loop = self._game_loops.setdefault(session_id, GameLoop(session))
        result = loop.choose(request.option, opponent_id=request.opponent_id)
        return ChoiceResponse(
            session_id=session_id,
            success=result.success,
            changes=result.changes,
            errors=result.errors,
            error_code=result.error_code.value if result.error_code else None,
            game_state=self.state_response(session_id, session.game_state),
        )

    # =========================================================================
    # Request conversion
    # =========================================================================

    def build_action(self, request: ActionRequest, state: GameState) -> Action:
        """
        Turn an ActionRequest into an engine Action.

        Raises:
            ValueError: On an unknown action type or enum value
        """
        action_type = _enum(ActionType, request.action_type, "action_type")

        interaction = None
        if action_type == ActionType.SET_INTERACTION:
            interaction = self._build_interaction(request, state)

        payload = ActionPayload(
            player_id=request.player_id,
            target_player_id=request.target_player_id,
            card_id=request.card_id,
            token_id=request.token_id,
            count=request.count,
            token_type=_enum(TokenType, request.token_type, "token_type"),
            token_color=_enum(TokenColor, request.token_color, "token_color"),
            position=request.position,
            index=request.index,
            dice_type=_enum(DiceType, request.dice_type, "dice_type"),
            value=request.value,
            spaces=request.spaces,
            card_type=_enum(CardType, request.card_type, "card_type"),
            player1_value=_enum(TokenType, request.player1_value, "player1_value"),
            player2_value=_enum(TokenType, request.player2_value, "player2_value"),
            choice=request.choice,
            interaction=interaction,
        )
        return Action(action_type=action_type, payload=payload)

    def _build_interaction(self, request: ActionRequest, state: GameState) -> Interaction:
        interaction_type = _enum(InteractionType, request.interaction_type, "interaction_type")
        if interaction_type is None:
            raise ValueError("set_interaction needs an interaction_type")

        source = state.get_player(request.player_id) if request.player_id else None
        target = state.get_player(request.target_player_id) if request.target_player_id else None
        board_token = state.get_board_token(request.token_id) if request.token_id else None
        return Interaction(
            interaction_type=interaction_type,
            source_player=source,
            target_player=target,
            board_token=board_token,
            options=list(OPTIONS[interaction_type]),
        )

    # =========================================================================
    # Response conversion
    # =========================================================================

    def _session_response(self, session: Session) -> SessionResponse:
        state = session.game_state
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            phase=state.phase.value,
            setup_step=state.setup_step.value,
            player_count=state.num_players,
            action_count=session.action_count,
            random_seed=session.seed,
            created_at=session.created_at,
        )

    def state_response(self, session_id: str, state: GameState) -> GameStateResponse:
        current = state.current_player
        current_id = current.player_id if current else None
        duel = state.duel
        interaction = state.current_interaction

        return GameStateResponse(
            session_id=session_id,
            phase=state.phase.value,
            setup_step=state.setup_step.value,
            board_size=state.board_size,
            current_player_id=current_id,
            setup_player_index=state.setup_player_idx,
            current_token_placement_type=(
                state.current_token_placement_type.value
                if state.current_token_placement_type else None
            ),
            players=[_player_info(p, p.player_id == current_id) for p in state.players],
            board_tokens=[_board_token_info(t) for t in state.board_tokens],
            deck_sizes={ct.value: len(state.deck(ct)) for ct in CardType},
            discard_sizes={ct.value: len(state.discard(ct)) for ct in CardType},
            dice=DiceInfo(
                regular=state.dice.regular.value,
                rps=[d.value.value if d.value else None for d in state.dice.rps],
            ),
            duel=DuelInfo(
                player1_id=duel.player1.player_id,
                player2_id=duel.player2.player_id,
                result=duel.result.value if duel.result else None,
            ) if duel.is_active else None,
            card_in_play=_card_info(state.card_in_play) if state.card_in_play else None,
            current_interaction=InteractionInfo(
                interaction_type=interaction.interaction_type.value,
                source_player_id=(
                    interaction.source_player.player_id if interaction.source_player else None
                ),
                target_player_id=(
                    interaction.target_player.player_id if interaction.target_player else None
                ),
                board_token=(
                    _board_token_info(interaction.board_token) if interaction.board_token else None
                ),
                options=interaction.options,
            ) if interaction else None,
            winner=_player_info(state.winner) if state.winner else None,
        )


def _card_info(card: Card) -> CardInfo:
    effect: dict[str, Any] = {"kind": card.effect.kind.value}
    for name in ("spaces", "players", "count"):
        value = getattr(card.effect, name)
        if value is not None:
            effect[name] = value
    if card.effect.card_type is not None:
        effect["card_type"] = card.effect.card_type.value
    return CardInfo(
        card_id=card.card_id,
        card_type=card.card_type.value,
        title=card.title,
        description=card.description,
        effect=effect,
    )


def _board_token_info(token: BoardToken) -> BoardTokenInfo:
    return BoardTokenInfo(
        token_id=token.token_id,
        token_type=token.token_type.value,
        color=token.color.value,
        position=token.position,
    )


def _player_info(player: Player, is_current: bool = False) -> PlayerInfo:
    return PlayerInfo(
        player_id=player.player_id,
        name=player.name,
        token_type=player.token.token_type.value,
        token_color=player.token.color.value,
        position=player.position,
        has_skipped_turn=player.has_skipped_turn,
        is_current_turn=is_current,
        advantage_cards=[_card_info(c) for c in player.advantage_cards],
        disadvantage_cards=[_card_info(c) for c in player.disadvantage_cards],
    )
