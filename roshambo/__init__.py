"""
Roshambo Race - A Rock-Paper-Scissors board race engine.

Players race tokens along a board seeded with rock, paper and scissors
markers. Landing on a marker or another player raises an interaction
that is settled by cards, movement or a Rock-Paper-Scissors duel.
"""

__version__ = "0.1.0"
