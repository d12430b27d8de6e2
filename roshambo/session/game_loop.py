"""
Game Loop - Caller-side orchestration on top of the reducer.

The reducer keeps a narrow contract: some choices need a follow-up action
that only the caller can issue (who receives a card, who duels whom,
whose setup turn is next). The loop issues those follow-ups so an API or
CLI front end only has to send the player's intent:

1. choose(option) settles an interaction and performs what the option means
2. place_board_token() places a marker and hands setup to the next player
3. roll_and_move() rolls the die and moves the current player
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.action import Action, ActionResult, ErrorCode
from ..engine_core.interaction import (
    CALL_FOR_DUEL,
    DRAW_ADVANTAGE,
    DRAW_DISADVANTAGE,
    GIVE_ADVANTAGE,
    GIVE_DISADVANTAGE,
)
from ..engine_core.state import CardType, DiceType, GamePhase, GameState, Interaction, Player

if TYPE_CHECKING:
    from .manager import Session

logger = logging.getLogger(__name__)


DRAW_OPTIONS: dict[str, CardType] = {
    DRAW_ADVANTAGE: CardType.ADVANTAGE,
    DRAW_DISADVANTAGE: CardType.DISADVANTAGE,
}

GIVE_OPTIONS: dict[str, CardType] = {
    GIVE_ADVANTAGE: CardType.ADVANTAGE,
    GIVE_DISADVANTAGE: CardType.DISADVANTAGE,
}


@dataclass
class TurnResult:
    """
    Result of one loop step.

    A step may dispatch several actions; changes collects what each one
    did and errors what any of them refused.
    """
    success: bool
    phase: GamePhase
    changes: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    error_code: ErrorCode | None = None

    # Game over info
    winner: str | None = None


class GameLoop:
    """
    Drives a session the way a front end would.

    Usage:
        loop = GameLoop(session)

        result = loop.roll_and_move()
        if result.phase == GamePhase.INTERACTION:
            options = session.game_state.current_interaction.options
            result = loop.choose(options[0])
    """

    def __init__(self, session: Session):
        self.session = session

    @property
    def state(self) -> GameState:
        return self.session.game_state

    def _result(self, results: list[ActionResult]) -> TurnResult:
        failed = [r for r in results if not r.success]
        changes = [c for r in results for c in r.state_changes]
        winner = self.state.winner
        return TurnResult(
            success=bool(results) and not failed,
            phase=self.state.phase,
            changes=changes,
            errors=[r.error for r in failed],
            error_code=failed[0].error_code if failed else None,
            winner=winner.name if winner else None,
        )

    def choose(self, option: str, opponent_id: str | None = None) -> TurnResult:
        """
        Settle the pending interaction with option.

        The interaction is resolved first, then the follow-up the option
        calls for is dispatched: a draw for the current player, a card
        for the interaction's target, or a duel between the current
        player and an opponent.

        Args:
            option: One of the interaction's options, verbatim
            opponent_id: Who to duel when calling for a duel. Defaults to
                the interaction's target, or for a board-token duel the
                first other player who has left the start space.

        A duel call with nobody to duel fails before anything is resolved.
        """
        interaction = self.state.current_interaction
        current = self.state.current_player

        opponent: Player | None = None
        if interaction and option == CALL_FOR_DUEL:
            opponent = self._duel_opponent(interaction, opponent_id)
            if opponent is None:
                return self._result([ActionResult.failure(
                    f"No opponent to duel (opponent_id={opponent_id})",
                    ErrorCode.UNKNOWN_ENTITY,
                )])

        resolved = self.session.dispatch(Action.resolve_interaction(option))
        results = [resolved]
        if not resolved.success:
            return self._result(results)

        target = interaction.target_player
        follow_up: Action | None = None
        if option in DRAW_OPTIONS:
            follow_up = Action.draw_card(DRAW_OPTIONS[option])
        elif option in GIVE_OPTIONS and target:
            follow_up = Action.give_card(current.player_id, target.player_id, GIVE_OPTIONS[option])
        elif opponent:
            follow_up = Action.initiate_duel(current.player_id, opponent.player_id)

        if follow_up:
            results.append(self.session.dispatch(follow_up))
        return self._result(results)

    def _duel_opponent(self, interaction: Interaction, opponent_id: str | None) -> Player | None:
        """Player the current player duels, or None if there is nobody."""
        state = self.state
        current = state.current_player
        if opponent_id is not None:
            opponent = state.get_player(opponent_id)
            if opponent and opponent.player_id != current.player_id:
                return opponent
            return None

        if interaction.target_player:
            return state.get_player(interaction.target_player.player_id)

        for player in state.players:
            if player.player_id != current.player_id and player.position > 0:
                return player
        return None

    def place_board_token(self, token_id: str, position: int) -> TurnResult:
        """
        Place a board token during setup, then pass the setup turn on.

        The next setup player is the next one, in seat order, whose token
        type still has unplaced board tokens. Once every token is placed
        the index goes back to the first player.
        """
        placed = self.session.dispatch(Action.place_board_token(token_id, position))
        results = [placed]
        if not placed.success:
            return self._result(results)

        results.append(self.session.dispatch(Action.next_token_placement_phase()))

        state = self.state
        if not state.unplaced_tokens():
            results.append(self.session.dispatch(Action.set_setup_player_index(0)))
            return self._result(results)

        num_players = state.num_players
        next_idx = (state.setup_player_idx + 1) % num_players
        for offset in range(num_players):
            candidate = (state.setup_player_idx + 1 + offset) % num_players
            if state.unplaced_tokens(state.players[candidate].token_type):
                next_idx = candidate
                break

        results.append(self.session.dispatch(Action.set_setup_player_index(next_idx)))
        return self._result(results)

    def roll_and_move(self, value: int | None = None) -> TurnResult:
        """
        Roll the regular die and move the current player by the result.

        Only allowed while the game is in the plain playing phase.
        """
        if self.state.phase != GamePhase.PLAYING:
            return TurnResult(
                success=False,
                phase=self.state.phase,
                errors=[f"Cannot move during {self.state.phase.value}"],
                error_code=ErrorCode.INVALID_TRANSITION,
            )

        rolled = self.session.dispatch(Action.roll_dice(DiceType.REGULAR, value))
        results = [rolled]
        if not rolled.success:
            return self._result(results)

        player = self.state.current_player
        spaces = self.state.dice.regular.value
        results.append(self.session.dispatch(Action.move_player(player.player_id, spaces)))

        result = self._result(results)
        if result.winner:
            logger.info("Game over, %s wins", result.winner)
        return result
