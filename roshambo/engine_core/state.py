"""
Game State - The single root aggregate the engine operates on.

Design principles:
- Copy-on-write: no transition mutates a state object, every change
  returns a new object
- Comparable by value: two snapshots built from the same actions are equal
- Self-describing: the presentation layer reads phase, setup step,
  interaction, duel and card in play straight off the snapshot
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class TokenType(Enum):
    """Rock, paper or scissors."""
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"


class TokenColor(Enum):
    """Token colors. Each token type comes in exactly two colors."""
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"
    BLUE = "blue"
    YELLOW = "yellow"
    WHITE = "white"


# Allowed colors per token type, in catalogue order
TOKEN_COLORS: dict[TokenType, tuple[TokenColor, TokenColor]] = {
    TokenType.ROCK: (TokenColor.GREEN, TokenColor.ORANGE),
    TokenType.PAPER: (TokenColor.RED, TokenColor.BLUE),
    TokenType.SCISSORS: (TokenColor.YELLOW, TokenColor.WHITE),
}

# Turn order once the game starts: rock players first, then paper, then scissors
TOKEN_ORDER: dict[TokenType, int] = {
    TokenType.ROCK: 0,
    TokenType.PAPER: 1,
    TokenType.SCISSORS: 2,
}


class CardType(Enum):
    """The two card decks."""
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


class EffectKind(Enum):
    """Closed set of card effects."""
    MOVE = "move"
    SKIP_TURN = "skipTurn"
    DUEL = "duel"
    MOVE_TOKEN = "moveToken"
    DRAW_CARDS = "drawCards"
    GIVE_CARD = "giveCard"


class GamePhase(Enum):
    """High-level game phases."""
    SETUP = "setup"
    PLAYING = "playing"
    DUEL = "duel"
    CARD_EFFECT = "cardEffect"
    INTERACTION = "interaction"
    GAME_OVER = "gameOver"


class SetupStep(Enum):
    """Sub-phases of the setup phase, in the order they are passed through."""
    PLAYER_COUNT = "playerCount"
    TOKEN_SELECTION = "tokenSelection"
    ROCK_TOKEN_PLACEMENT = "rockTokenPlacement"
    PAPER_TOKEN_PLACEMENT = "paperTokenPlacement"
    SCISSORS_TOKEN_PLACEMENT = "scissorsTokenPlacement"
    REMAINING_TOKEN_PLACEMENT = "remainingTokenPlacement"
    READY = "ready"


PLACEMENT_STEPS = frozenset({
    SetupStep.ROCK_TOKEN_PLACEMENT,
    SetupStep.PAPER_TOKEN_PLACEMENT,
    SetupStep.SCISSORS_TOKEN_PLACEMENT,
    SetupStep.REMAINING_TOKEN_PLACEMENT,
})

# Placement sub-step for each board token type, in priority order
PLACEMENT_STEP_FOR_TYPE: dict[TokenType, SetupStep] = {
    TokenType.ROCK: SetupStep.ROCK_TOKEN_PLACEMENT,
    TokenType.PAPER: SetupStep.PAPER_TOKEN_PLACEMENT,
    TokenType.SCISSORS: SetupStep.SCISSORS_TOKEN_PLACEMENT,
}


class DiceType(Enum):
    """The two dice instruments."""
    REGULAR = "regular"
    RPS = "rps"


class InteractionType(Enum):
    """The six kinds of landing interaction."""
    MOVE_BACK_OR_DRAW_CARD = "moveBackOrDrawCard"
    MOVE_FORWARD_OR_DRAW_CARD = "moveForwardOrDrawCard"
    CALL_DUEL_OR_SKIP = "callDuelOrSkip"
    DRAW_ADVANTAGE_OR_GIVE_DISADVANTAGE = "drawAdvantageOrGiveDisadvantage"
    DRAW_DISADVANTAGE_OR_GIVE_ADVANTAGE = "drawDisadvantageOrGiveAdvantage"
    CALL_DUEL = "callDuel"


class DuelOutcome(Enum):
    """Result of a Rock-Paper-Scissors duel."""
    PLAYER1 = "player1"
    PLAYER2 = "player2"
    DRAW = "draw"


@dataclass
class PlayerToken:
    """The piece a player moves around the board."""
    token_id: str
    token_type: TokenType = TokenType.ROCK
    color: TokenColor = TokenColor.GREEN
    position: int = 0
    owner: str | None = None

    def with_position(self, position: int) -> PlayerToken:
        return PlayerToken(
            token_id=self.token_id,
            token_type=self.token_type,
            color=self.color,
            position=position,
            owner=self.owner,
        )


@dataclass
class BoardToken:
    """
    A board-owned marker.

    Position -1 means the token has not been placed yet. Placed tokens sit
    on spaces 1..board_size-1, never on the start or the final space.
    """
    token_id: str
    token_type: TokenType
    color: TokenColor
    position: int = -1

    @property
    def is_placed(self) -> bool:
        return self.position != -1

    def with_position(self, position: int) -> BoardToken:
        return BoardToken(
            token_id=self.token_id,
            token_type=self.token_type,
            color=self.color,
            position=position,
        )


@dataclass
class CardEffect:
    """
    What a card does when played.

    Only the parameter relevant to `kind` is set:
    spaces for MOVE, players for DUEL, count for DRAW_CARDS,
    card_type for GIVE_CARD.
    """
    kind: EffectKind
    spaces: int | None = None
    players: int | None = None
    count: int | None = None
    card_type: CardType | None = None

    @classmethod
    def move(cls, spaces: int) -> CardEffect:
        return cls(kind=EffectKind.MOVE, spaces=spaces)

    @classmethod
    def skip_turn(cls) -> CardEffect:
        return cls(kind=EffectKind.SKIP_TURN)

    @classmethod
    def duel(cls, players: int = 2) -> CardEffect:
        return cls(kind=EffectKind.DUEL, players=players)

    @classmethod
    def move_token(cls) -> CardEffect:
        return cls(kind=EffectKind.MOVE_TOKEN)

    @classmethod
    def draw_cards(cls, count: int) -> CardEffect:
        return cls(kind=EffectKind.DRAW_CARDS, count=count)

    @classmethod
    def give_card(cls, card_type: CardType) -> CardEffect:
        return cls(kind=EffectKind.GIVE_CARD, card_type=card_type)


@dataclass
class Card:
    """
    An advantage or disadvantage card.

    Cards keep their identity as they move between draw pile, hand and
    discard pile, so equality is by card_id.
    """
    card_id: str
    card_type: CardType
    title: str
    description: str
    effect: CardEffect

    def __hash__(self):
        return hash(self.card_id)

    def __eq__(self, other):
        if not isinstance(other, Card):
            return False
        return self.card_id == other.card_id


@dataclass
class Player:
    """A player, their token and the cards they hold."""
    player_id: str
    name: str
    token: PlayerToken
    has_skipped_turn: bool = False
    advantage_cards: list[Card] = field(default_factory=list)
    disadvantage_cards: list[Card] = field(default_factory=list)

    # Set once the player has explicitly chosen a token during setup
    token_selected: bool = False

    @property
    def position(self) -> int:
        return self.token.position

    @property
    def token_type(self) -> TokenType:
        return self.token.token_type

    def hand(self, card_type: CardType) -> list[Card]:
        """Cards of the given type held by this player."""
        if card_type == CardType.ADVANTAGE:
            return self.advantage_cards
        return self.disadvantage_cards

    def _copy_with(self, **kwargs) -> Player:
        return Player(
            player_id=kwargs.get("player_id", self.player_id),
            name=kwargs.get("name", self.name),
            token=kwargs.get("token", self.token),
            has_skipped_turn=kwargs.get("has_skipped_turn", self.has_skipped_turn),
            advantage_cards=kwargs.get("advantage_cards", self.advantage_cards),
            disadvantage_cards=kwargs.get("disadvantage_cards", self.disadvantage_cards),
            token_selected=kwargs.get("token_selected", self.token_selected),
        )

    def with_position(self, position: int) -> Player:
        """Return new player with the token moved to position."""
        return self._copy_with(token=self.token.with_position(position))

    def with_hand(self, card_type: CardType, cards: list[Card]) -> Player:
        """Return new player with the hand of card_type replaced."""
        if card_type == CardType.ADVANTAGE:
            return self._copy_with(advantage_cards=cards)
        return self._copy_with(disadvantage_cards=cards)

    def with_skipped_turn(self, skipped: bool) -> Player:
        return self._copy_with(has_skipped_turn=skipped)

    def with_token_selection(self, token_type: TokenType, color: TokenColor) -> Player:
        """Return new player holding the chosen token type and color."""
        token = PlayerToken(
            token_id=self.token.token_id,
            token_type=token_type,
            color=color,
            position=self.token.position,
            owner=self.token.owner,
        )
        return self._copy_with(token=token, token_selected=True)


@dataclass
class RegularDice:
    """Six-sided numeric die."""
    value: int | None = None
    rolling: bool = False


@dataclass
class RPSDice:
    """Rock-Paper-Scissors die."""
    value: TokenType | None = None
    rolling: bool = False


@dataclass
class Dice:
    """Both dice instruments: one regular die and a pair of RPS dice."""
    regular: RegularDice = field(default_factory=RegularDice)
    rps: list[RPSDice] = field(default_factory=lambda: [RPSDice(), RPSDice()])


@dataclass
class Interaction:
    """
    A forced decision raised when a move lands on an occupied space.

    `options` are literal strings; the caller must send one back verbatim.
    """
    interaction_type: InteractionType
    source_player: Player | None
    target_player: Player | None = None
    board_token: BoardToken | None = None
    options: list[str] = field(default_factory=list)


@dataclass
class DuelState:
    """Duel sub-state. All fields are None outside of a duel."""
    player1: Player | None = None
    player2: Player | None = None
    result: DuelOutcome | None = None

    @property
    def is_active(self) -> bool:
        return self.player1 is not None and self.player2 is not None


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    # Players, in turn order once the game starts
    players: list[Player] = field(default_factory=list)
    current_player_idx: int = 0
    setup_player_idx: int = 0

    # Board
    board_tokens: list[BoardToken] = field(default_factory=list)
    board_size: int = 64

    # Card piles
    advantage_deck: list[Card] = field(default_factory=list)
    disadvantage_deck: list[Card] = field(default_factory=list)
    advantage_discard: list[Card] = field(default_factory=list)
    disadvantage_discard: list[Card] = field(default_factory=list)

    dice: Dice = field(default_factory=Dice)

    # Phase tracking
    phase: GamePhase = GamePhase.SETUP
    setup_step: SetupStep = SetupStep.PLAYER_COUNT
    current_token_placement_type: TokenType | None = None
    winner: Player | None = None

    # Transient sub-states
    duel: DuelState = field(default_factory=DuelState)
    card_in_play: Card | None = None
    current_interaction: Interaction | None = None

    @property
    def current_player(self) -> Player | None:
        """Get the current player, None before players exist."""
        if not self.players:
            return None
        return self.players[self.current_player_idx % len(self.players)]

    @property
    def setup_player(self) -> Player | None:
        """Get the player whose setup turn it is, if the index is in range."""
        if 0 <= self.setup_player_idx < len(self.players):
            return self.players[self.setup_player_idx]
        return None

    @property
    def num_players(self) -> int:
        return len(self.players)

    def get_player(self, player_id: str) -> Player | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def get_board_token(self, token_id: str) -> BoardToken | None:
        """Get board token by ID."""
        for t in self.board_tokens:
            if t.token_id == token_id:
                return t
        return None

    def board_tokens_at(self, position: int) -> list[BoardToken]:
        return [t for t in self.board_tokens if t.position == position]

    def players_at(self, position: int, exclude_id: str | None = None) -> list[Player]:
        return [
            p for p in self.players
            if p.position == position and p.player_id != exclude_id
        ]

    def unplaced_tokens(self, token_type: TokenType | None = None) -> list[BoardToken]:
        """Board tokens not yet placed, optionally filtered by type."""
        return [
            t for t in self.board_tokens
            if not t.is_placed and (token_type is None or t.token_type == token_type)
        ]

    @property
    def occupied_positions(self) -> set[int]:
        return {t.position for t in self.board_tokens if t.is_placed}

    def deck(self, card_type: CardType) -> list[Card]:
        if card_type == CardType.ADVANTAGE:
            return self.advantage_deck
        return self.disadvantage_deck

    def discard(self, card_type: CardType) -> list[Card]:
        if card_type == CardType.ADVANTAGE:
            return self.advantage_discard
        return self.disadvantage_discard

    def card_count(self, card_type: CardType) -> int:
        """Cards of a type across draw pile, discard pile and every hand."""
        in_hands = sum(len(p.hand(card_type)) for p in self.players)
        return len(self.deck(card_type)) + len(self.discard(card_type)) + in_hands

    def with_player(self, player: Player) -> GameState:
        """Return new state with updated player."""
        new_players = [
            player if p.player_id == player.player_id else p
            for p in self.players
        ]
        return self._copy_with(players=new_players)

    def with_board_token(self, token: BoardToken) -> GameState:
        """Return new state with updated board token."""
        new_tokens = [
            token if t.token_id == token.token_id else t
            for t in self.board_tokens
        ]
        return self._copy_with(board_tokens=new_tokens)

    def with_piles(
        self, card_type: CardType, deck: list[Card], discard: list[Card]
    ) -> GameState:
        """Return new state with the draw and discard piles of card_type replaced."""
        if card_type == CardType.ADVANTAGE:
            return self._copy_with(advantage_deck=deck, advantage_discard=discard)
        return self._copy_with(disadvantage_deck=deck, disadvantage_discard=discard)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            players=kwargs.get("players", self.players),
            current_player_idx=kwargs.get("current_player_idx", self.current_player_idx),
            setup_player_idx=kwargs.get("setup_player_idx", self.setup_player_idx),
            board_tokens=kwargs.get("board_tokens", self.board_tokens),
            board_size=kwargs.get("board_size", self.board_size),
            advantage_deck=kwargs.get("advantage_deck", self.advantage_deck),
            disadvantage_deck=kwargs.get("disadvantage_deck", self.disadvantage_deck),
            advantage_discard=kwargs.get("advantage_discard", self.advantage_discard),
            disadvantage_discard=kwargs.get("disadvantage_discard", self.disadvantage_discard),
            dice=kwargs.get("dice", self.dice),
            phase=kwargs.get("phase", self.phase),
            setup_step=kwargs.get("setup_step", self.setup_step),
            current_token_placement_type=kwargs.get(
                "current_token_placement_type", self.current_token_placement_type
            ),
            winner=kwargs.get("winner", self.winner),
            duel=kwargs.get("duel", self.duel),
            card_in_play=kwargs.get("card_in_play", self.card_in_play),
            current_interaction=kwargs.get("current_interaction", self.current_interaction),
        )
