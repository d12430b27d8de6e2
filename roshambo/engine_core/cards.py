"""
Card Catalog - The two fixed card decks.

Both decks have 19 cards with a fixed effect composition. Each call
generates fresh card ids and returns the deck shuffled.

Advantage deck:
- Swift Advance (move +5) x2
- Quick Advance (move +4) x3
- Time Freeze (skip turn) x4
- Forced Duel (duel, 2 players) x4
- Token Shift (move a board token) x3
- Double Draw (draw 2) x1
- Bad Luck Charm (give a disadvantage card) x3

Disadvantage deck:
- Major Setback (move -5) x2
- Significant Setback (move -4) x3
- Minor Setback (move -3) x4
- Time Warp (skip turn) x5
- Opponent Boost (move +2, benefits an opponent) x2
- Double Trouble (draw 2) x1
- Karma (give an advantage card) x3
"""

from __future__ import annotations
import random
from collections import Counter
from dataclasses import dataclass

from .state import Card, CardEffect, CardType, EffectKind
from .randomness import new_id, shuffle


@dataclass
class CardTemplate:
    """One line of a deck list: how many copies of which card."""
    copies: int
    title: str
    description: str
    effect: CardEffect


ADVANTAGE_DECK: list[CardTemplate] = [
    CardTemplate(2, "Swift Advance", "Move ahead 5 spaces", CardEffect.move(5)),
    CardTemplate(3, "Quick Advance", "Move ahead 4 spaces", CardEffect.move(4)),
    CardTemplate(4, "Time Freeze", "Make a player skip a turn", CardEffect.skip_turn()),
    CardTemplate(
        4, "Forced Duel",
        "Make any 2 players play a Rock Paper Scissor Duel",
        CardEffect.duel(2),
    ),
    CardTemplate(3, "Token Shift", "Move any one Board token on the board", CardEffect.move_token()),
    CardTemplate(1, "Double Draw", "Pick 2 advantage cards", CardEffect.draw_cards(2)),
    CardTemplate(
        3, "Bad Luck Charm",
        "Give a disadvantage card to any player",
        CardEffect.give_card(CardType.DISADVANTAGE),
    ),
]

DISADVANTAGE_DECK: list[CardTemplate] = [
    CardTemplate(2, "Major Setback", "Move back 5 spaces", CardEffect.move(-5)),
    CardTemplate(3, "Significant Setback", "Move back 4 spaces", CardEffect.move(-4)),
    CardTemplate(4, "Minor Setback", "Move back 3 spaces", CardEffect.move(-3)),
    CardTemplate(5, "Time Warp", "Skip a turn", CardEffect.skip_turn()),
    CardTemplate(2, "Opponent Boost", "Make any player move 2 places ahead", CardEffect.move(2)),
    CardTemplate(1, "Double Trouble", "Pick 2 disadvantage cards", CardEffect.draw_cards(2)),
    CardTemplate(
        3, "Karma",
        "Give an advantage card to the player because of whom you got a disadvantage card",
        CardEffect.give_card(CardType.ADVANTAGE),
    ),
]


def _build_deck(
    card_type: CardType,
    templates: list[CardTemplate],
    rng: random.Random | None,
) -> list[Card]:
    rng = rng or random.Random()
    cards = [
        Card(
            card_id=new_id(rng),
            card_type=card_type,
            title=template.title,
            description=template.description,
            effect=template.effect,
        )
        for template in templates
        for _ in range(template.copies)
    ]
    return shuffle(cards, rng)


def generate_advantage_cards(rng: random.Random | None = None) -> list[Card]:
    """Build the 19-card advantage deck, shuffled."""
    return _build_deck(CardType.ADVANTAGE, ADVANTAGE_DECK, rng)


def generate_disadvantage_cards(rng: random.Random | None = None) -> list[Card]:
    """Build the 19-card disadvantage deck, shuffled."""
    return _build_deck(CardType.DISADVANTAGE, DISADVANTAGE_DECK, rng)


def effect_signature(effect: CardEffect) -> tuple:
    """Hashable summary of an effect, e.g. ("move", 5) or ("skipTurn",)."""
    if effect.kind == EffectKind.MOVE:
        return (effect.kind.value, effect.spaces)
    if effect.kind == EffectKind.DUEL:
        return (effect.kind.value, effect.players)
    if effect.kind == EffectKind.DRAW_CARDS:
        return (effect.kind.value, effect.count)
    if effect.kind == EffectKind.GIVE_CARD:
        return (effect.kind.value, effect.card_type.value)
    return (effect.kind.value,)


def deck_composition(cards: list[Card]) -> Counter:
    """Effect multiset of a pile of cards."""
    return Counter(effect_signature(card.effect) for card in cards)


def expected_composition(card_type: CardType) -> Counter:
    """Effect multiset a freshly generated deck of card_type must have."""
    templates = ADVANTAGE_DECK if card_type == CardType.ADVANTAGE else DISADVANTAGE_DECK
    composition: Counter = Counter()
    for template in templates:
        composition[effect_signature(template.effect)] += template.copies
    return composition
