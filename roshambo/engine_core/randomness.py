"""
RNG-backed primitives: die rolls, the biased RPS roll and shuffling.

Every function takes an optional random.Random so callers can seed a
session for replay. Without one, a fresh system-seeded generator is used.
"""

from __future__ import annotations
import random
import uuid
from typing import Sequence, TypeVar

from .state import TokenType

T = TypeVar("T")


def roll_die(sides: int = 6, rng: random.Random | None = None) -> int:
    """Uniform roll in 1..sides."""
    rng = rng or random.Random()
    return rng.randint(1, sides)


def roll_rps(rng: random.Random | None = None) -> TokenType:
    """
    Roll an RPS die.

    The die has six faces, two of each symbol, so every outcome has a
    2/6 chance.
    """
    roll = roll_die(6, rng)
    if roll <= 2:
        return TokenType.ROCK
    if roll <= 4:
        return TokenType.PAPER
    return TokenType.SCISSORS


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Fisher-Yates shuffle.

    Returns a new list; the input is left untouched.
    """
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def new_id(rng: random.Random | None = None) -> str:
    """UUID4-shaped identifier drawn from rng, so seeded runs get stable ids."""
    rng = rng or random.Random()
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))
