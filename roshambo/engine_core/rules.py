"""
Game Rules - The tunable constants of a Roshambo race.

The reducer is constructed with a GameRules instance the same way every
session gets one; the defaults are the standard game.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import TOKEN_COLORS


@dataclass
class GameRules:
    """
    Rules for one game.

    Attributes:
        board_size: Index of the final space. Reaching it wins.
        min_players: Fewest players SET_PLAYER_COUNT accepts.
        max_players: Most players SET_PLAYER_COUNT accepts.
        board_token_copies: Board tokens per (type, color) archetype.
        die_sides: Faces on the regular die.
        duel_penalty: Spaces the duel loser moves back.
        type_diversity_threshold: Below this many players, no two players
            may share a token type.
    """
    board_size: int = 64
    min_players: int = 2
    max_players: int = 6
    board_token_copies: int = 3
    die_sides: int = 6
    duel_penalty: int = 4
    type_diversity_threshold: int = 4

    def __post_init__(self):
        self.validate()

    @property
    def board_token_count(self) -> int:
        archetypes = sum(len(colors) for colors in TOKEN_COLORS.values())
        return archetypes * self.board_token_copies

    def validate(self):
        """Raise ValueError if these rules cannot produce a playable game."""
        if self.min_players < 1 or self.max_players < self.min_players:
            raise ValueError(
                f"Invalid player bounds: {self.min_players}-{self.max_players}"
            )
        if self.die_sides < 1:
            raise ValueError("The regular die needs at least one side")
        if self.duel_penalty < 0:
            raise ValueError("Duel penalty cannot be negative")
        # Every board token needs its own space between start and finish
        if self.board_size - 1 < self.board_token_count:
            raise ValueError(
                f"Board of size {self.board_size} cannot hold "
                f"{self.board_token_count} board tokens"
            )
