"""Card codes used on the wire and in game logs."""

from typing import Iterable

from gouji_server.models.card import Card, Rank, Suit

# Suit codes
SUIT_CODES: dict[Suit, str] = {
    Suit.CLUB: "C",
    Suit.DIAMOND: "D",
    Suit.HEART: "H",
    Suit.SPADE: "S",
}

# Rank codes for non-joker cards
RANK_CODES: dict[Rank, str] = {
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
}

JOKER_CODES: dict[Rank, str] = {
    Rank.BLACK_JOKER: "BJ",
    Rank.RED_JOKER: "RJ",
}

_SUITS_BY_CODE = {code: suit for suit, code in SUIT_CODES.items()}
_RANKS_BY_CODE = {code: rank for rank, code in RANK_CODES.items()}
_JOKERS_BY_CODE = {code: rank for rank, code in JOKER_CODES.items()}


def format_card(card: Card) -> str:
    """Format a single card to string.

    Args:
        card: Card to format.

    Returns:
        Formatted string (e.g., "S3" for Spade 3, "RJ" for Red Joker).
        A wildcard is written as the 2 it was played as.
    """
    if card.is_joker:
        return JOKER_CODES[card.rank]
    return f"{SUIT_CODES[card.suit]}{RANK_CODES[card.face_rank]}"


def parse_card(code: str) -> Card:
    """Parse a card code produced by ``format_card``.

    Args:
        code: Card code (e.g., "H10", "BJ").

    Returns:
        Card.

    Raises:
        ValueError: Unknown code.
    """
    code = code.strip().upper()
    if code in _JOKERS_BY_CODE:
        return Card(suit=Suit.NONE, rank=_JOKERS_BY_CODE[code])

    suit = _SUITS_BY_CODE.get(code[:1])
    rank = _RANKS_BY_CODE.get(code[1:])
    if suit is None or rank is None:
        raise ValueError(f"Unknown card code: {code!r}")
    return Card(suit=suit, rank=rank)


def format_cards(cards: Iterable[Card]) -> str:
    """Format cards to comma-separated string.

    Args:
        cards: Cards to format.

    Returns:
        Comma-separated card strings (e.g., "S8,H8,D8").
        Empty string if no cards.
    """
    return ",".join(format_card(c) for c in cards)


def format_hands(hands: dict[str, Iterable[Card]]) -> dict[str, str]:
    """Format all players' hands to dict.

    Args:
        hands: Hands keyed by player uid.

    Returns:
        Dict mapping uid to formatted hand string.
    """
    return {uid: format_cards(h) for uid, h in hands.items()}
