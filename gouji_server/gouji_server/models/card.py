"""Card and CardSet models."""

from enum import IntEnum
from typing import Iterable, Iterator

from pydantic import BaseModel, Field, model_validator

from gouji_server.errors import EmptyInputError, IllegalCompositionError


class Suit(IntEnum):
    """Card suit. NONE is used for jokers only."""

    NONE = 0
    CLUB = 1
    DIAMOND = 2
    HEART = 3
    SPADE = 4


class Rank(IntEnum):
    """Card rank in ascending strength.

    Strength order: 3 < 4 < ... < K < A < 2 < Black Joker < Red Joker
    """

    THREE = 0
    FOUR = 1
    FIVE = 2
    SIX = 3
    SEVEN = 4
    EIGHT = 5
    NINE = 6
    TEN = 7
    JACK = 8
    QUEEN = 9
    KING = 10
    ACE = 11
    TWO = 12
    BLACK_JOKER = 13
    RED_JOKER = 14


# Map rank to display string
RANK_NAMES = {
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
    Rank.TWO: "2",
    Rank.BLACK_JOKER: "Black Joker",
    Rank.RED_JOKER: "Red Joker",
}

SUIT_SYMBOLS = {
    Suit.NONE: "",
    Suit.CLUB: "♣",
    Suit.DIAMOND: "♦",
    Suit.HEART: "♥",
    Suit.SPADE: "♠",
}

PLAYING_SUITS = [Suit.CLUB, Suit.DIAMOND, Suit.HEART, Suit.SPADE]

# Minimum set size for a bomb, by base rank
BOMB_MIN_SIZE = {
    Rank.TEN: 5,
    Rank.JACK: 4,
    Rank.QUEEN: 3,
    Rank.KING: 2,
    Rank.ACE: 2,
}


class Card(BaseModel, frozen=True):
    """Single card.

    Equality, ordering and hashing look at the rank only, so two cards of
    the same rank are interchangeable for the rules.
    """

    suit: Suit
    rank: Rank
    # A 2 standing in for the rank it was recolored to. Only _normalize sets it.
    wild: bool = Field(default=False, exclude=True)

    @model_validator(mode="after")
    def _check_suit(self) -> "Card":
        # Jokers carry no suit, every other card carries one
        is_joker = self.face_rank >= Rank.BLACK_JOKER
        if is_joker != (self.suit == Suit.NONE):
            raise ValueError(f"suit {self.suit.name} does not fit rank {self.rank.name}")
        return self

    @property
    def is_joker(self) -> bool:
        """Check if this card is either joker."""
        return self.rank >= Rank.BLACK_JOKER

    @property
    def face_rank(self) -> Rank:
        """Rank printed on the physical card."""
        return Rank.TWO if self.wild else self.rank

    def recolored(self, rank: Rank) -> "Card":
        """Return a wildcard copy of this card playing as ``rank``."""
        return self.model_copy(update={"rank": rank, "wild": True})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank == other.rank

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank != other.rank

    def __lt__(self, other: "Card") -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "Card") -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: "Card") -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: "Card") -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank >= other.rank

    def __hash__(self) -> int:
        return hash(self.rank)

    def __str__(self) -> str:
        if self.is_joker:
            return RANK_NAMES[self.rank]
        if self.wild:
            return f"{SUIT_SYMBOLS[self.suit]}2({RANK_NAMES[self.rank]})"
        return f"{SUIT_SYMBOLS[self.suit]}{RANK_NAMES[self.rank]}"

    def __repr__(self) -> str:
        return str(self)


def expand_agg(entries: Iterable[tuple[Suit, Rank, int]]) -> list[Card]:
    """Expand (suit, rank, count) entries into individual cards."""
    cards: list[Card] = []
    for suit, rank, count in entries:
        cards.extend(Card(suit=suit, rank=rank) for _ in range(count))
    return cards


def _normalize(cards: list[Card]) -> list[Card]:
    """Sort cards and recolor wildcards, rejecting illegal groups.

    Args:
        cards: Raw cards in any order.

    Returns:
        New list sorted by rank where every 2 that follows a lower rank has
        been replaced by a wildcard of that rank.

    Raises:
        EmptyInputError: No cards were given.
        IllegalCompositionError: Cards do not form one group.
    """
    if not cards:
        raise EmptyInputError("card set must not be empty")

    # Wild flags are rebuilt below, so every 2 starts out as a plain 2
    ordered = sorted(
        card.model_copy(update={"rank": card.face_rank, "wild": False}) if card.wild else card
        for card in cards
    )
    lowest, highest = ordered[0].rank, ordered[-1].rank

    # 3s and 4s may only be played on their own
    if lowest in (Rank.THREE, Rank.FOUR) and highest > Rank.ACE:
        raise IllegalCompositionError(
            f"{RANK_NAMES[lowest]} cannot be combined with {RANK_NAMES[highest]}"
        )

    normalized = [ordered[0]]
    for card in ordered[1:]:
        previous = normalized[-1]
        if card.rank != previous.rank:
            if card.rank < Rank.TWO:
                raise IllegalCompositionError(
                    f"mixed ranks {RANK_NAMES[previous.rank]} and {RANK_NAMES[card.rank]}"
                )
            if card.rank == Rank.TWO:
                card = card.recolored(previous.rank)
        normalized.append(card)

    return normalized


class CardSet:
    """Validated group of cards played in one throw.

    A set is a run of equal ranks, optionally padded with 2s (wildcards,
    recolored to the group's rank) and jokers. Sets based on 3 or 4 may
    contain neither.
    """

    def __init__(self, cards: Iterable[Card]):
        """Validate and normalize cards.

        Args:
            cards: Raw cards in any order.

        Raises:
            EmptyInputError: No cards were given.
            IllegalCompositionError: Cards do not form one group.
        """
        self._cards: tuple[Card, ...] = tuple(_normalize(list(cards)))

    @classmethod
    def new(cls, cards: Iterable[Card]) -> "CardSet":
        """Build a validated set from raw cards."""
        return cls(cards)

    @classmethod
    def from_agg(cls, entries: Iterable[tuple[Suit, Rank, int]]) -> "CardSet":
        """Build a validated set from (suit, rank, count) entries."""
        return cls(expand_agg(entries))

    @property
    def base_rank(self) -> Rank:
        """Lowest rank in the set."""
        return self._cards[0].rank

    def has_black_joker(self) -> bool:
        """Check if any card is a black joker."""
        return any(c.rank == Rank.BLACK_JOKER for c in self._cards)

    def is_gouji(self) -> bool:
        """Check whether this set is a bomb (gouji).

        Higher base ranks need fewer copies. Sets based on 3-9 only count
        when they carry a black joker.
        """
        base = self.base_rank
        if base == Rank.RED_JOKER:
            return False
        if base in (Rank.BLACK_JOKER, Rank.TWO):
            return True
        if base in BOMB_MIN_SIZE:
            return len(self._cards) >= BOMB_MIN_SIZE[base]
        return self.has_black_joker()

    def is_greater_than(self, other: "CardSet") -> bool:
        """Check whether this set beats ``other``.

        Sets of equal size must win at every position. A set one card longer
        may only win when both of its last two cards are red jokers and
        ``other`` ends in a red joker; the leading cards must still win
        position by position. Any other size difference never wins.
        """
        diff = len(self._cards) - len(other._cards)

        if diff == 0:
            return self._dominates(other, len(self._cards))

        if diff == 1:
            if other._cards[-1].rank != Rank.RED_JOKER:
                return False
            if self._cards[-1].rank != Rank.RED_JOKER or self._cards[-2].rank != Rank.RED_JOKER:
                return False
            return self._dominates(other, len(self._cards) - 2)

        return False

    def _dominates(self, other: "CardSet", count: int) -> bool:
        """Check that the first ``count`` cards all outrank ``other``'s."""
        return all(
            mine.rank > theirs.rank
            for mine, theirs in zip(self._cards[:count], other._cards[:count])
        )

    def to_list(self) -> list[Card]:
        """Get cards as a sorted list."""
        return list(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __getitem__(self, index: int) -> Card:
        return self._cards[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CardSet):
            return NotImplemented
        return self._cards == other._cards

    def __hash__(self) -> int:
        return hash(self._cards)

    def __str__(self) -> str:
        return "[" + ", ".join(str(c) for c in self._cards) + "]"

    def __repr__(self) -> str:
        return f"CardSet({list(self._cards)!r})"


def create_full_deck(num_decks: int = 1) -> list[Card]:
    """Create ``num_decks`` 54-card decks (52 + 2 jokers)."""
    cards: list[Card] = []
    for _ in range(num_decks):
        for suit in PLAYING_SUITS:
            for rank in Rank:
                if rank < Rank.BLACK_JOKER:
                    cards.append(Card(suit=suit, rank=rank))
        cards.append(Card(suit=Suit.NONE, rank=Rank.BLACK_JOKER))
        cards.append(Card(suit=Suit.NONE, rank=Rank.RED_JOKER))
    return cards
