"""
Reducer - Applies actions to game state.

The reducer is the single point of state change.
All state changes must go through Reducer.apply() or apply_action().

Design principles:
- Pure function: (state, action) -> new_state, no I/O
- Validates before applying
- Returns ActionResult with success/failure and an error code
- Rejected actions never raise; apply_action() hands back the prior state
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Callable

from .state import (
    Card,
    CardType,
    DiceType,
    Dice,
    DuelOutcome,
    DuelState,
    EffectKind,
    GamePhase,
    GameState,
    BoardToken,
    InteractionType,
    PLACEMENT_STEP_FOR_TYPE,
    PLACEMENT_STEPS,
    Player,
    PlayerToken,
    RegularDice,
    RPSDice,
    SetupStep,
    TOKEN_COLORS,
    TOKEN_ORDER,
    TokenType,
)
from .action import Action, ActionType, ActionResult, ErrorCode
from .cards import generate_advantage_cards, generate_disadvantage_cards
from .interaction import (
    LANDING_STEP,
    determine_rps_winner,
    resolve_landing,
)
from .randomness import new_id, roll_die, roll_rps, shuffle
from .rules import GameRules

logger = logging.getLogger(__name__)


SETUP_ACTIONS = frozenset({
    ActionType.SET_PLAYER_COUNT,
    ActionType.SELECT_TOKEN,
    ActionType.PLACE_BOARD_TOKEN,
    ActionType.PLACE_ALL_TOKENS_RANDOMLY,
    ActionType.NEXT_TOKEN_PLACEMENT_PHASE,
    ActionType.START_GAME,
})

TURN_ACTIONS = frozenset({
    ActionType.MOVE_PLAYER,
    ActionType.DRAW_CARD,
    ActionType.GIVE_CARD,
    ActionType.PLAY_CARD,
    ActionType.INITIATE_DUEL,
    ActionType.DUEL_RESULT,
    ActionType.SET_INTERACTION,
    ActionType.RESOLVE_INTERACTION,
    ActionType.END_TURN,
})

# Still accepted once the game is over
GAME_OVER_ACTIONS = frozenset({
    ActionType.SET_SETUP_PLAYER_INDEX,
    ActionType.RESET_GAME,
})


def create_initial_state(rules: GameRules | None = None, setup_player_idx: int = 0) -> GameState:
    """Fresh snapshot: no players, setup phase, waiting for a player count."""
    rules = rules or GameRules()
    return GameState(
        board_size=rules.board_size,
        setup_player_idx=setup_player_idx,
    )


def next_placement_step(board_tokens: list[BoardToken]) -> tuple[SetupStep, TokenType | None]:
    """
    Placement sub-step for the tokens still unplaced.

    Rock, then paper, then scissors; READY once everything is placed.
    """
    unplaced = [t for t in board_tokens if not t.is_placed]
    if not unplaced:
        return SetupStep.READY, None
    for token_type, step in PLACEMENT_STEP_FOR_TYPE.items():
        if any(t.token_type == token_type for t in unplaced):
            return step, token_type
    return SetupStep.REMAINING_TOKEN_PLACEMENT, None


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless apart from its random source - all game state is in GameState.
    Rules provide the board size and other constants.
    """
    rules: GameRules = field(default_factory=GameRules)
    rng: random.Random = field(default_factory=random.Random)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            logger.debug("Rejected %s: %s", action.action_type.value, validation_error)
            return ActionResult.failure(validation_error, ErrorCode.INVALID_TRANSITION)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                ErrorCode.NO_HANDLER,
            )

        try:
            result = handler(state, action)
        except Exception as e:
            logger.exception("Handler for %s failed", action.action_type.value)
            return ActionResult.failure(str(e), ErrorCode.HANDLER_ERROR)

        if not result.success:
            logger.debug(
                "Rejected %s: %s (%s)",
                action.action_type.value, result.error, result.error_code.value,
            )
        return result

    def handled_action_types(self) -> frozenset[ActionType]:
        """Action types this reducer can dispatch."""
        return frozenset(self._handlers())

    def _validate_action(self, state: GameState, action: Action) -> str | None:
        """
        Validate that an action is allowed in the current phase.

        Returns error message if invalid, None if valid.
        """
        if state.phase == GamePhase.GAME_OVER:
            if action.action_type not in GAME_OVER_ACTIONS:
                return "Game is over - no actions allowed"

        if action.action_type in SETUP_ACTIONS and state.phase != GamePhase.SETUP:
            return "Setup is finished - setup actions not allowed"

        if action.action_type in TURN_ACTIONS:
            if state.phase == GamePhase.SETUP:
                return "Game not started - only setup actions allowed"
            if not state.players:
                return "Game has no players"

        return None

    def _handlers(self) -> dict[ActionType, Callable[[GameState, Action], ActionResult]]:
        return {
            ActionType.SET_PLAYER_COUNT: self._handle_set_player_count,
            ActionType.SELECT_TOKEN: self._handle_select_token,
            ActionType.PLACE_BOARD_TOKEN: self._handle_place_board_token,
            ActionType.PLACE_ALL_TOKENS_RANDOMLY: self._handle_place_all_tokens_randomly,
            ActionType.NEXT_TOKEN_PLACEMENT_PHASE: self._handle_next_token_placement_phase,
            ActionType.START_GAME: self._handle_start_game,
            ActionType.ROLL_DICE: self._handle_roll_dice,
            ActionType.MOVE_PLAYER: self._handle_move_player,
            ActionType.DRAW_CARD: self._handle_draw_card,
            ActionType.GIVE_CARD: self._handle_give_card,
            ActionType.PLAY_CARD: self._handle_play_card,
            ActionType.INITIATE_DUEL: self._handle_initiate_duel,
            ActionType.DUEL_RESULT: self._handle_duel_result,
            ActionType.SET_INTERACTION: self._handle_set_interaction,
            ActionType.RESOLVE_INTERACTION: self._handle_resolve_interaction,
            ActionType.END_TURN: self._handle_end_turn,
            ActionType.SET_SETUP_PLAYER_INDEX: self._handle_set_setup_player_index,
            ActionType.RESET_GAME: self._handle_reset_game,
        }

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        return self._handlers().get(action_type)

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def _handle_set_player_count(self, state: GameState, action: Action) -> ActionResult:
        """Create players, board tokens and both decks."""
        if state.setup_step != SetupStep.PLAYER_COUNT:
            return ActionResult.failure("Player count is already set")

        count = action.payload.count
        if count is None or not self.rules.min_players <= count <= self.rules.max_players:
            return ActionResult.failure(
                f"Player count must be between {self.rules.min_players} "
                f"and {self.rules.max_players}"
            )

        players = [self._create_player(f"Player {i + 1}") for i in range(count)]
        board_tokens = [
            BoardToken(token_id=new_id(self.rng), token_type=token_type, color=color)
            for token_type, colors in TOKEN_COLORS.items()
            for color in colors
            for _ in range(self.rules.board_token_copies)
        ]

        new_state = state._copy_with(
            players=players,
            board_tokens=board_tokens,
            advantage_deck=generate_advantage_cards(self.rng),
            disadvantage_deck=generate_disadvantage_cards(self.rng),
            advantage_discard=[],
            disadvantage_discard=[],
            setup_step=SetupStep.TOKEN_SELECTION,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Created {count} players and {len(board_tokens)} board tokens"],
        )

    def _create_player(self, name: str) -> Player:
        player_id = new_id(self.rng)
        return Player(
            player_id=player_id,
            name=name,
            token=PlayerToken(token_id=new_id(self.rng), owner=player_id),
        )

    def _handle_select_token(self, state: GameState, action: Action) -> ActionResult:
        """Assign a token type and color to a player."""
        if state.setup_step != SetupStep.TOKEN_SELECTION:
            return ActionResult.failure("Not in token selection")

        payload = action.payload
        player = state.get_player(payload.player_id)
        if not player:
            return ActionResult.failure(
                f"Player {payload.player_id} not found", ErrorCode.UNKNOWN_ENTITY
            )

        token_type, color = payload.token_type, payload.token_color
        if token_type is None or color not in TOKEN_COLORS.get(token_type, ()):
            return ActionResult.failure(f"No {token_type} token comes in {color}")

        others = [
            p for p in state.players
            if p.player_id != player.player_id and p.token_selected
        ]
        if any(p.token.token_type == token_type and p.token.color == color for p in others):
            return ActionResult.failure(
                f"{token_type.value}/{color.value} is already taken",
                ErrorCode.DUPLICATE_SELECTION,
            )

        # Few players must all play different types
        if state.num_players < self.rules.type_diversity_threshold:
            if any(p.token.token_type == token_type for p in others):
                return ActionResult.failure(
                    f"{token_type.value} is already taken",
                    ErrorCode.DUPLICATE_SELECTION,
                )

        new_state = state.with_player(player.with_token_selection(token_type, color))
        all_selected = all(p.token_selected for p in new_state.players)
        new_state = new_state._copy_with(
            setup_step=SetupStep.ROCK_TOKEN_PLACEMENT if all_selected else SetupStep.TOKEN_SELECTION,
            current_token_placement_type=TokenType.ROCK if all_selected else None,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{player.name} chose the {color.value} {token_type.value} token"],
        )

    def _handle_place_board_token(self, state: GameState, action: Action) -> ActionResult:
        """
        Put a board token on a space.

        Only tokens of the current placement type may be placed. Does not
        advance the setup step; callers follow up with
        NEXT_TOKEN_PLACEMENT_PHASE.
        """
        if state.setup_step not in PLACEMENT_STEPS:
            return ActionResult.failure("Not in a token placement step")

        payload = action.payload
        token = state.get_board_token(payload.token_id)
        if not token:
            return ActionResult.failure(
                f"Board token {payload.token_id} not found", ErrorCode.UNKNOWN_ENTITY
            )

        placement_type = state.current_token_placement_type
        if placement_type is not None and token.token_type != placement_type:
            return ActionResult.failure(
                f"Cannot place a {token.token_type.value} token during "
                f"{placement_type.value} placement"
            )

        position = payload.position
        if position is None or not 1 <= position <= state.board_size - 1:
            return ActionResult.failure(
                f"Board tokens go on spaces 1 to {state.board_size - 1}"
            )

        if any(t.position == position and t.token_id != token.token_id for t in state.board_tokens):
            return ActionResult.failure(f"Space {position} is already occupied")

        new_state = state.with_board_token(token.with_position(position))
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Placed {token.token_type.value}/{token.color.value} token on space {position}"],
        )

    def _handle_place_all_tokens_randomly(self, state: GameState, action: Action) -> ActionResult:
        """Scatter every unplaced token over free spaces and finish placement."""
        if state.setup_step not in PLACEMENT_STEPS:
            return ActionResult.failure("Not in a token placement step")

        occupied = state.occupied_positions
        free = [p for p in range(1, state.board_size) if p not in occupied]
        unplaced = state.unplaced_tokens()
        if len(free) < len(unplaced):
            return ActionResult.failure("Not enough free spaces for the remaining tokens")

        positions = iter(shuffle(free, self.rng))
        new_tokens = [
            t if t.is_placed else t.with_position(next(positions))
            for t in state.board_tokens
        ]
        new_state = state._copy_with(
            board_tokens=new_tokens,
            setup_step=SetupStep.READY,
            current_token_placement_type=None,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Randomly placed {len(unplaced)} board tokens"],
        )

    def _handle_next_token_placement_phase(self, state: GameState, action: Action) -> ActionResult:
        """Recompute the placement step from the tokens still unplaced."""
        if state.setup_step not in PLACEMENT_STEPS and state.setup_step != SetupStep.READY:
            return ActionResult.failure("Not in a token placement step")

        step, token_type = next_placement_step(state.board_tokens)
        new_state = state._copy_with(
            setup_step=step,
            current_token_placement_type=token_type,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Setup step is now {step.value}"],
        )

    def _handle_start_game(self, state: GameState, action: Action) -> ActionResult:
        """Fix turn order (rock, paper, scissors; stable) and start playing."""
        if state.setup_step != SetupStep.READY:
            return ActionResult.failure("Board tokens are not all placed")

        ordered = sorted(state.players, key=lambda p: TOKEN_ORDER[p.token_type])
        new_state = state._copy_with(
            players=ordered,
            current_player_idx=0,
            phase=GamePhase.PLAYING,
        )
        logger.info("Game started with %d players", len(ordered))
        return ActionResult.success_with_state(
            new_state,
            changes=["Game started. Turn order: " + ", ".join(p.name for p in ordered)],
        )

    # -------------------------------------------------------------------------
    # Dice and movement
    # -------------------------------------------------------------------------

    def _handle_roll_dice(self, state: GameState, action: Action) -> ActionResult:
        """
        Roll dice.

        The regular die takes a caller-supplied value when given, so an
        animation and the state can agree on the result. RPS rolls always
        roll both RPS dice.
        """
        payload = action.payload
        if payload.dice_type == DiceType.REGULAR:
            value = payload.value
            if value is None:
                value = roll_die(self.rules.die_sides, self.rng)
            elif not 1 <= value <= self.rules.die_sides:
                return ActionResult.failure(f"Die value {value} is out of range")

            dice = Dice(regular=RegularDice(value=value, rolling=False), rps=state.dice.rps)
            return ActionResult.success_with_state(
                state._copy_with(dice=dice),
                changes=[f"Rolled {value}"],
            )

        if payload.dice_type == DiceType.RPS:
            rps = [RPSDice(value=roll_rps(self.rng), rolling=False) for _ in state.dice.rps]
            dice = Dice(regular=state.dice.regular, rps=rps)
            return ActionResult.success_with_state(
                state._copy_with(dice=dice),
                changes=["Rolled " + " and ".join(d.value.value for d in rps)],
            )

        return ActionResult.failure(f"Unknown dice type: {payload.dice_type}")

    def _clamp(self, state: GameState, position: int) -> int:
        return max(0, min(state.board_size, position))

    def _check_winner(self, state: GameState, player: Player) -> GameState:
        """Set winner and end the game if player has reached the final space."""
        if player.position >= state.board_size:
            logger.info("%s reached space %d and wins", player.name, player.position)
            return state._copy_with(phase=GamePhase.GAME_OVER, winner=player)
        return state

    def _handle_move_player(self, state: GameState, action: Action) -> ActionResult:
        """Move a player forward and raise whatever interaction the landing causes."""
        payload = action.payload
        player = state.get_player(payload.player_id)
        if not player:
            return ActionResult.failure(
                f"Player {payload.player_id} not found", ErrorCode.UNKNOWN_ENTITY
            )
        if payload.spaces is None:
            return ActionResult.failure("No number of spaces given")

        new_position = self._clamp(state, player.position + payload.spaces)
        moved = player.with_position(new_position)
        new_state = state.with_player(moved)
        changes = [f"{player.name} moved to space {new_position}"]

        if new_position >= state.board_size:
            return ActionResult.success_with_state(self._check_winner(new_state, moved), changes)

        interaction = resolve_landing(
            moved,
            new_state.players,
            new_state.board_tokens_at(new_position),
            new_state.players_at(new_position, exclude_id=moved.player_id),
        )
        if interaction:
            new_state = new_state._copy_with(
                phase=GamePhase.INTERACTION,
                current_interaction=interaction,
            )
            changes.append(f"Interaction: {interaction.interaction_type.value}")

        return ActionResult.success_with_state(new_state, changes)

    # -------------------------------------------------------------------------
    # Cards
    # -------------------------------------------------------------------------

    def _take_top_card(
        self, state: GameState, card_type: CardType
    ) -> tuple[Card, GameState] | None:
        """
        Remove the head card of a deck.

        An empty deck is refilled by turning the discard pile into the
        draw pile, in discard order. Returns None if both are empty.
        """
        deck = state.deck(card_type)
        discard = state.discard(card_type)
        if not deck:
            if discard:
                logger.info("Refilling %s deck from %d discarded cards", card_type.value, len(discard))
            deck, discard = discard, []
        if not deck:
            return None
        return deck[0], state.with_piles(card_type, deck[1:], discard)

    def _handle_draw_card(self, state: GameState, action: Action) -> ActionResult:
        """Current player draws a card; the card is shown, not yet applied."""
        card_type = action.payload.card_type
        if card_type is None:
            return ActionResult.failure("No card type given")

        player = state.current_player
        taken = self._take_top_card(state, card_type)
        if taken is None:
            return ActionResult.failure(
                f"No {card_type.value} cards left", ErrorCode.DECK_EXHAUSTED
            )

        card, new_state = taken
        new_state = new_state.with_player(
            player.with_hand(card_type, player.hand(card_type) + [card])
        )
        new_state = new_state._copy_with(card_in_play=card, phase=GamePhase.CARD_EFFECT)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{player.name} drew {card.title}"],
        )

    def _handle_give_card(self, state: GameState, action: Action) -> ActionResult:
        """
        Deal the head card of a deck to the recipient.

        The giver is named for the record only; nothing leaves their hand.
        """
        payload = action.payload
        giver = state.get_player(payload.player_id)
        recipient = state.get_player(payload.target_player_id)
        if not giver or not recipient:
            return ActionResult.failure("Giver or recipient not found", ErrorCode.UNKNOWN_ENTITY)
        if payload.card_type is None:
            return ActionResult.failure("No card type given")

        card_type = payload.card_type
        taken = self._take_top_card(state, card_type)
        if taken is None:
            return ActionResult.failure(
                f"No {card_type.value} cards left", ErrorCode.DECK_EXHAUSTED
            )

        card, new_state = taken
        new_state = new_state.with_player(
            recipient.with_hand(card_type, recipient.hand(card_type) + [card])
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{giver.name} gave {recipient.name} a {card_type.value} card"],
        )

    def _handle_play_card(self, state: GameState, action: Action) -> ActionResult:
        """
        Current player plays a card from hand.

        MOVE and SKIP_TURN are applied here. DUEL, MOVE_TOKEN, DRAW_CARDS
        and GIVE_CARD need parameters only the caller has, so they are
        only surfaced through card_in_play.
        """
        player = state.current_player
        card_id = action.payload.card_id

        card: Card | None = None
        for card_type in (CardType.ADVANTAGE, CardType.DISADVANTAGE):
            hand = player.hand(card_type)
            for c in hand:
                if c.card_id == card_id:
                    card = c
                    break
            if card:
                break

        if not card:
            return ActionResult.failure(
                f"Card {card_id} not in {player.name}'s hand", ErrorCode.UNKNOWN_ENTITY
            )

        card_type = card.card_type
        new_hand = [c for c in player.hand(card_type) if c.card_id != card.card_id]
        player = player.with_hand(card_type, new_hand)
        new_state = state.with_player(player)
        new_state = new_state.with_piles(
            card_type, new_state.deck(card_type), new_state.discard(card_type) + [card]
        )
        new_state = new_state._copy_with(card_in_play=card, phase=GamePhase.CARD_EFFECT)
        changes = [f"{player.name} played {card.title}"]

        effect = card.effect
        if effect.kind == EffectKind.MOVE:
            moved = player.with_position(self._clamp(state, player.position + effect.spaces))
            new_state = self._check_winner(new_state.with_player(moved), moved)
            changes.append(f"{player.name} moved to space {moved.position}")
        elif effect.kind == EffectKind.SKIP_TURN:
            next_idx = (state.current_player_idx + 1) % state.num_players
            skipped = new_state.players[next_idx]
            new_state = new_state.with_player(skipped.with_skipped_turn(True))
            changes.append(f"{skipped.name} will skip their next turn")
        else:
            logger.debug("Effect %s left to the caller", effect.kind.value)

        return ActionResult.success_with_state(new_state, changes)

    # -------------------------------------------------------------------------
    # Duels and interactions
    # -------------------------------------------------------------------------

    def _handle_initiate_duel(self, state: GameState, action: Action) -> ActionResult:
        payload = action.payload
        player1 = state.get_player(payload.player_id)
        player2 = state.get_player(payload.target_player_id)
        if not player1 or not player2:
            return ActionResult.failure("Duelling player not found", ErrorCode.UNKNOWN_ENTITY)

        new_state = state._copy_with(
            phase=GamePhase.DUEL,
            duel=DuelState(player1=player1, player2=player2, result=None),
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{player1.name} and {player2.name} duel"],
        )

    def _handle_duel_result(self, state: GameState, action: Action) -> ActionResult:
        """
        Settle a duel.

        A draw is recorded and the phase stays DUEL. Otherwise the loser
        moves back by the duel penalty and play resumes.
        """
        duel = state.duel
        if not duel.is_active:
            return ActionResult.failure("No duel in progress")
        if duel.result in (DuelOutcome.PLAYER1, DuelOutcome.PLAYER2):
            return ActionResult.failure("Duel is already decided")

        payload = action.payload
        if payload.player1_value is None or payload.player2_value is None:
            return ActionResult.failure("Both duel values are required")

        result = determine_rps_winner(payload.player1_value, payload.player2_value)
        if result == DuelOutcome.DRAW:
            new_state = state._copy_with(
                duel=DuelState(player1=duel.player1, player2=duel.player2, result=result)
            )
            return ActionResult.success_with_state(new_state, changes=["Duel is a draw"])

        loser_ref = duel.player2 if result == DuelOutcome.PLAYER1 else duel.player1
        loser = state.get_player(loser_ref.player_id)
        if not loser:
            return ActionResult.failure("Duel loser not found", ErrorCode.UNKNOWN_ENTITY)

        loser = loser.with_position(max(0, loser.position - self.rules.duel_penalty))
        new_state = state.with_player(loser)._copy_with(
            duel=DuelState(player1=duel.player1, player2=duel.player2, result=result),
            phase=GamePhase.PLAYING,
        )
        logger.info("Duel won by %s; %s drops to space %d", result.value, loser.name, loser.position)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{loser.name} lost the duel and moved back to space {loser.position}"],
        )

    def _handle_set_interaction(self, state: GameState, action: Action) -> ActionResult:
        interaction = action.payload.interaction
        if interaction is None:
            return ActionResult.failure("No interaction given")
        new_state = state._copy_with(
            phase=GamePhase.INTERACTION,
            current_interaction=interaction,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Interaction: {interaction.interaction_type.value}"],
        )

    def _handle_resolve_interaction(self, state: GameState, action: Action) -> ActionResult:
        """
        Resolve the pending interaction with one of its options.

        Only movement options change the board here. Draw, give and duel
        options are carried out by the caller's follow-up action.
        """
        interaction = state.current_interaction
        if not interaction:
            return ActionResult.failure("No interaction pending")
        if not interaction.source_player:
            return ActionResult.failure("Interaction has no source player")

        choice = action.payload.choice
        if choice not in interaction.options:
            return ActionResult.failure(
                f"'{choice}' is not one of {interaction.options}", ErrorCode.ILLEGAL_CHOICE
            )
        choice_idx = interaction.options.index(choice)

        new_state = state._copy_with(phase=GamePhase.PLAYING, current_interaction=None)
        changes = [f"Chose '{choice}'"]

        source = state.get_player(interaction.source_player.player_id)
        if source and choice_idx == 0:
            if interaction.interaction_type == InteractionType.MOVE_BACK_OR_DRAW_CARD:
                moved = source.with_position(self._clamp(state, source.position - LANDING_STEP))
                new_state = new_state.with_player(moved)
                changes.append(f"{source.name} moved back to space {moved.position}")
            elif interaction.interaction_type == InteractionType.MOVE_FORWARD_OR_DRAW_CARD:
                moved = source.with_position(self._clamp(state, source.position + LANDING_STEP))
                new_state = self._check_winner(new_state.with_player(moved), moved)
                changes.append(f"{source.name} moved forward to space {moved.position}")

        return ActionResult.success_with_state(new_state, changes)

    # -------------------------------------------------------------------------
    # Turn flow and housekeeping
    # -------------------------------------------------------------------------

    def _handle_end_turn(self, state: GameState, action: Action) -> ActionResult:
        """
        Pass the turn to the next player.

        A next player flagged to skip has the flag cleared and is passed
        over; the player after them plays even if also flagged.
        """
        dice = Dice(
            regular=state.dice.regular,
            rps=[RPSDice(value=None, rolling=d.rolling) for d in state.dice.rps],
        )
        num_players = state.num_players
        next_idx = (state.current_player_idx + 1) % num_players
        players = state.players
        changes = []

        next_player = players[next_idx]
        if next_player.has_skipped_turn:
            players = [
                p.with_skipped_turn(False) if i == next_idx else p
                for i, p in enumerate(players)
            ]
            changes.append(f"{next_player.name} skips a turn")
            next_idx = (next_idx + 1) % num_players

        new_state = state._copy_with(
            players=players,
            current_player_idx=next_idx,
            dice=dice,
            duel=DuelState(),
            card_in_play=None,
            phase=GamePhase.PLAYING,
        )
        changes.append(f"Turn ended. Next player: {players[next_idx].name}")
        return ActionResult.success_with_state(new_state, changes)

    def _handle_set_setup_player_index(self, state: GameState, action: Action) -> ActionResult:
        index = action.payload.index
        if index is None or index < 0:
            return ActionResult.failure(f"Invalid setup player index: {index}")
        return ActionResult.success_with_state(
            state._copy_with(setup_player_idx=index),
            changes=[f"Setup player index is now {index}"],
        )

    def _handle_reset_game(self, state: GameState, action: Action) -> ActionResult:
        logger.info("Game reset")
        return ActionResult.success_with_state(
            create_initial_state(self.rules),
            changes=["Game reset"],
        )


def apply_action(
    state: GameState,
    action: Action,
    rules: GameRules | None = None,
    rng: random.Random | None = None,
) -> GameState:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action. A rejected action returns
    the state it was given, unchanged.
    """
    reducer = Reducer(rules=rules or GameRules(), rng=rng or random.Random())
    result = reducer.apply(state, action)
    return result.new_state if result.success else state
