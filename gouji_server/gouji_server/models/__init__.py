"""Card models."""

from .card import Card, CardSet, Rank, Suit, create_full_deck
from .hand import Hand

__all__ = [
    "Card",
    "CardSet",
    "Hand",
    "Rank",
    "Suit",
    "create_full_deck",
]
