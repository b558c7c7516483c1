"""Player hand model."""

from typing import Iterable, Iterator

from gouji_server.errors import IllegalResidualError, InsufficientHandError

from .card import Card, CardSet, Rank, Suit, expand_agg


class Hand:
    """Cards held by one player, kept sorted by rank.

    Duplicates are kept as separate cards. ``subtract`` is the only
    operation that removes cards.
    """

    def __init__(self, cards: Iterable[Card] | None = None):
        """Initialize hand.

        Args:
            cards: Initial cards in any order.
        """
        self._cards: list[Card] = sorted(cards) if cards else []

    @classmethod
    def from_agg(cls, entries: Iterable[tuple[Suit, Rank, int]]) -> "Hand":
        """Build a hand from (suit, rank, count) entries."""
        return cls(expand_agg(entries))

    def add(self, cards: Iterable[Card]) -> None:
        """Add dealt cards, keeping the hand sorted."""
        self._cards = sorted([*self._cards, *cards])

    def subtract(self, card_set: CardSet) -> None:
        """Remove a played set from the hand.

        Set cards are matched against hand cards by the rank printed on the
        card, so a wildcard consumes a real 2. This deliberately differs from
        matching on the rank a wildcard plays as, which would take a card of
        the substituted rank and leave the 2 in the hand. Both sides are
        walked once in ascending order and matched cards are removed by
        position.

        Args:
            card_set: Set that was just played.

        Raises:
            InsufficientHandError: A card of the set is not in the hand.
            IllegalResidualError: A 3-set does not empty the hand, or a
                4-set leaves a 4 behind.
        """
        wanted = sorted(card_set, key=lambda c: c.face_rank)
        indices: list[int] = []

        i = 0
        for card in wanted:
            while i < len(self._cards) and self._cards[i].rank != card.face_rank:
                i += 1
            if i == len(self._cards):
                raise InsufficientHandError(f"hand does not hold {card}")
            indices.append(i)
            i += 1

        taken = set(indices)
        remain = [c for idx, c in enumerate(self._cards) if idx not in taken]

        base = card_set.base_rank
        if base == Rank.THREE and remain:
            raise IllegalResidualError("3s may only be played as the last cards")
        if base == Rank.FOUR and any(c.rank == Rank.FOUR for c in remain):
            raise IllegalResidualError("4s must all be played at once")

        self._cards = remain

    def count(self) -> int:
        """Get number of cards."""
        return len(self._cards)

    def is_empty(self) -> bool:
        """Check if hand is empty."""
        return not self._cards

    def to_list(self) -> list[Card]:
        """Get cards as a sorted list."""
        return list(self._cards)

    def copy(self) -> "Hand":
        """Create a copy of this hand."""
        return Hand(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __str__(self) -> str:
        if not self._cards:
            return "[]"
        return "[" + ", ".join(str(c) for c in self._cards) + "]"

    def __repr__(self) -> str:
        return f"Hand({self._cards!r})"
