"""
Interaction Resolver - Decides what happens when a move lands on an occupied space.

Pure decision table, no side effects. The outcome depends on the moving
player's token type and what occupies the destination, using the usual
dominance relation: rock beats scissors, scissors beats paper, paper
beats rock.

Board tokens are always checked first. If a board token produces an
interaction, the player check for that landing never runs.
"""

from __future__ import annotations

from .state import (
    BoardToken,
    DuelOutcome,
    Interaction,
    InteractionType,
    Player,
    TokenType,
)


# What each type beats
BEATS: dict[TokenType, TokenType] = {
    TokenType.ROCK: TokenType.SCISSORS,
    TokenType.SCISSORS: TokenType.PAPER,
    TokenType.PAPER: TokenType.ROCK,
}

# Option strings, used verbatim as labels and as resolution keys
MOVE_FORWARD = "Move forward 2 spaces"
MOVE_BACK = "Move back 2 spaces"
DRAW_ADVANTAGE = "Draw advantage card"
DRAW_DISADVANTAGE = "Draw disadvantage card"
GIVE_ADVANTAGE = "Give advantage card"
GIVE_DISADVANTAGE = "Give disadvantage card"
CALL_FOR_DUEL = "Call for duel"
SKIP = "Skip"

# Spaces moved by the movement options above
LANDING_STEP = 2

OPTIONS: dict[InteractionType, list[str]] = {
    InteractionType.MOVE_FORWARD_OR_DRAW_CARD: [MOVE_FORWARD, DRAW_ADVANTAGE],
    InteractionType.MOVE_BACK_OR_DRAW_CARD: [MOVE_BACK, DRAW_DISADVANTAGE],
    InteractionType.CALL_DUEL_OR_SKIP: [CALL_FOR_DUEL, SKIP],
    InteractionType.DRAW_ADVANTAGE_OR_GIVE_DISADVANTAGE: [DRAW_ADVANTAGE, GIVE_DISADVANTAGE],
    InteractionType.DRAW_DISADVANTAGE_OR_GIVE_ADVANTAGE: [DRAW_DISADVANTAGE, GIVE_ADVANTAGE],
    InteractionType.CALL_DUEL: [CALL_FOR_DUEL],
}


def beats(attacker: TokenType, defender: TokenType) -> bool:
    """True if attacker beats defender."""
    return BEATS[attacker] == defender


def determine_rps_winner(value1: TokenType, value2: TokenType) -> DuelOutcome:
    """Winner of a duel between player1 showing value1 and player2 showing value2."""
    if value1 == value2:
        return DuelOutcome.DRAW
    if beats(value1, value2):
        return DuelOutcome.PLAYER1
    return DuelOutcome.PLAYER2


def _make(
    interaction_type: InteractionType,
    source: Player,
    target: Player | None = None,
    board_token: BoardToken | None = None,
) -> Interaction:
    return Interaction(
        interaction_type=interaction_type,
        source_player=source,
        target_player=target,
        board_token=board_token,
        options=list(OPTIONS[interaction_type]),
    )


def board_token_interaction(
    moved_player: Player,
    all_players: list[Player],
    board_token: BoardToken,
) -> Interaction | None:
    """Interaction for landing on a board token, or None."""
    mover_type = moved_player.token_type

    if beats(mover_type, board_token.token_type):
        return _make(InteractionType.MOVE_FORWARD_OR_DRAW_CARD, moved_player, board_token=board_token)

    if beats(board_token.token_type, mover_type):
        return _make(InteractionType.MOVE_BACK_OR_DRAW_CARD, moved_player, board_token=board_token)

    # Same type: a duel needs someone off the start space to duel with
    duel_possible = any(
        p.player_id != moved_player.player_id and p.position > 0
        for p in all_players
    )
    if duel_possible:
        return _make(InteractionType.CALL_DUEL_OR_SKIP, moved_player, board_token=board_token)
    return None


def player_interaction(moved_player: Player, other_player: Player) -> Interaction:
    """Interaction for landing on another player's token."""
    mover_type = moved_player.token_type
    other_type = other_player.token_type

    if beats(mover_type, other_type):
        interaction_type = InteractionType.DRAW_ADVANTAGE_OR_GIVE_DISADVANTAGE
    elif beats(other_type, mover_type):
        interaction_type = InteractionType.DRAW_DISADVANTAGE_OR_GIVE_ADVANTAGE
    else:
        interaction_type = InteractionType.CALL_DUEL
    return _make(interaction_type, moved_player, target=other_player)


def resolve_landing(
    moved_player: Player,
    all_players: list[Player],
    board_tokens_at_destination: list[BoardToken],
    other_players_at_destination: list[Player],
) -> Interaction | None:
    """
    Decide the interaction for a landing.

    Args:
        moved_player: The player who just moved, at their new position
        all_players: Every player, with positions after the move
        board_tokens_at_destination: Board tokens on the destination space
        other_players_at_destination: Other players on the destination space

    Returns:
        The interaction to raise, or None if the turn simply continues.
        Only the first board token and the first co-located player count.
    """
    if board_tokens_at_destination:
        interaction = board_token_interaction(
            moved_player, all_players, board_tokens_at_destination[0]
        )
        if interaction is not None:
            return interaction

    if other_players_at_destination:
        return player_interaction(moved_player, other_players_at_destination[0])

    return None
