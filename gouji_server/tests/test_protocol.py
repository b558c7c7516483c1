"""Tests for card codes and wire messages."""

import json

import pytest
from pydantic import ValidationError

from gouji_server.logging.formatters import (
    format_card,
    format_cards,
    format_hands,
    parse_card,
)
from gouji_server.models.card import Card, CardSet, Rank, Suit
from gouji_server.network.protocol import (
    ErrorResponse,
    HandRequest,
    HandResponse,
    PassRequest,
    PlayRequest,
    PlayResponse,
    SitRequest,
    SitResponse,
    encode_response,
    parse_request,
)


class TestCardCodes:
    """Tests for card code formatting and parsing."""

    def test_format_card(self):
        """Test formatting single cards."""
        assert format_card(Card(suit=Suit.SPADE, rank=Rank.THREE)) == "S3"
        assert format_card(Card(suit=Suit.HEART, rank=Rank.TEN)) == "H10"
        assert format_card(Card(suit=Suit.NONE, rank=Rank.BLACK_JOKER)) == "BJ"
        assert format_card(Card(suit=Suit.NONE, rank=Rank.RED_JOKER)) == "RJ"

    def test_format_wildcard_as_two(self):
        """Test that a recolored 2 is written as the card it is."""
        wild = Card(suit=Suit.CLUB, rank=Rank.TWO).recolored(Rank.FIVE)
        assert format_card(wild) == "C2"

    def test_parse_card(self):
        """Test parsing card codes."""
        card = parse_card("D10")
        assert card.suit == Suit.DIAMOND
        assert card.rank == Rank.TEN

        joker = parse_card("rj")
        assert joker.suit == Suit.NONE
        assert joker.rank == Rank.RED_JOKER

    @pytest.mark.parametrize("code", ["", "X5", "H1", "H11", "J", "BJK"])
    def test_parse_unknown_code(self, code):
        """Test that unknown codes are rejected."""
        with pytest.raises(ValueError):
            parse_card(code)

    def test_format_cards(self):
        """Test formatting a set."""
        cs = CardSet.from_agg([(Suit.HEART, Rank.EIGHT, 2), (Suit.CLUB, Rank.TWO, 1)])
        assert format_cards(cs) == "H8,H8,C2"
        assert format_cards([]) == ""

    def test_format_hands(self):
        """Test formatting hands by uid."""
        hands = {"alice": [Card(suit=Suit.SPADE, rank=Rank.ACE)], "bob": []}
        assert format_hands(hands) == {"alice": "SA", "bob": ""}


class TestParseRequest:
    """Tests for request parsing."""

    def test_sit(self):
        """Test parsing a sit request."""
        request = parse_request('{"type": "sit", "uid": "alice", "desktop_id": 3}')
        assert isinstance(request, SitRequest)
        assert request.uid == "alice"
        assert request.desktop_id == 3

    def test_play(self):
        """Test parsing a play request with card codes."""
        request = parse_request('{"type": "play", "cards": ["H5", "D5", "C2"]}')
        assert isinstance(request, PlayRequest)
        assert [c.rank for c in request.cards] == [Rank.FIVE, Rank.FIVE, Rank.TWO]
        assert request.cards[2].suit == Suit.CLUB

    def test_pass_and_hand(self):
        """Test parsing requests without payload."""
        assert isinstance(parse_request('{"type": "pass"}'), PassRequest)
        assert isinstance(parse_request(b'{"type": "hand"}\n'), HandRequest)

    def test_play_card_objects(self):
        """Test that cards may also be sent as suit and rank objects."""
        request = parse_request('{"type": "play", "cards": [{"suit": 3, "rank": 5}, "D8"]}')
        assert request.cards[0] == Card(suit=Suit.HEART, rank=Rank.EIGHT)
        assert request.cards[0].suit == Suit.HEART

    @pytest.mark.parametrize(
        "card",
        [
            {"suit": 1, "rank": 0, "wild": True},
            {"suit": 1, "rank": 14, "wild": True},
            {"suit": 1, "rank": 12, "wild": False},
        ],
    )
    def test_wild_flag_refused(self, card):
        """Test that clients cannot mark cards as wildcards."""
        line = json.dumps({"type": "play", "cards": ["H3", "D3", card]})
        with pytest.raises(ValidationError):
            parse_request(line)

    @pytest.mark.parametrize("card", [{"suit": 0, "rank": 5}, {"suit": 2, "rank": 13}])
    def test_suit_must_fit_rank(self, card):
        """Test that suitless non-jokers and suited jokers are refused."""
        with pytest.raises(ValidationError):
            parse_request(json.dumps({"type": "play", "cards": [card]}))

    @pytest.mark.parametrize(
        "line",
        [
            "not json",
            '{"type": "dance"}',
            '{"type": "sit"}',
            '{"type": "sit", "uid": ""}',
            '{"type": "play", "cards": ["Z9"]}',
            '{"type": "play"}',
        ],
    )
    def test_malformed(self, line):
        """Test that malformed requests raise ValidationError."""
        with pytest.raises(ValidationError):
            parse_request(line)


class TestEncodeResponse:
    """Tests for response encoding."""

    def test_one_line(self):
        """Test that a response is one JSON line."""
        data = encode_response(SitResponse(is_ok=True, seat=2))
        assert data.endswith(b"\n")
        assert data.count(b"\n") == 1
        assert json.loads(data) == {"type": "sit", "is_ok": True, "reason": "", "seat": 2}

    def test_play_response(self):
        """Test encoding a play response."""
        data = encode_response(
            PlayResponse(is_ok=False, reason="nope", error="not_greater", remaining=4)
        )
        decoded = json.loads(data)
        assert decoded["type"] == "play"
        assert decoded["error"] == "not_greater"
        assert decoded["remaining"] == 4

    def test_hand_response(self):
        """Test building a hand response from cards."""
        response = HandResponse.from_cards([
            Card(suit=Suit.HEART, rank=Rank.THREE),
            Card(suit=Suit.NONE, rank=Rank.BLACK_JOKER),
        ])
        assert response.cards == ["H3", "BJ"]

    def test_error_response(self):
        """Test encoding an error response."""
        decoded = json.loads(encode_response(ErrorResponse(reason="not seated")))
        assert decoded == {"type": "error", "reason": "not seated"}
