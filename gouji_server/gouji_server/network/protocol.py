"""Wire protocol: one JSON object per line.

Requests (client -> server):
- {"type": "sit", "uid": "alice", "desktop_id": 0}
- {"type": "play", "cards": ["H5", "D5", "C2"]}
- {"type": "pass"}
- {"type": "hand"}

Responses (server -> client):
- {"type": "sit", "is_ok": true, "reason": "", "seat": 0}
- {"type": "play", "is_ok": false, "reason": "...", "error": "not_greater",
   "is_bomb": false, "remaining": 36}
- {"type": "pass", "is_ok": true, "reason": "", "field_cleared": false}
- {"type": "hand", "cards": ["H3", "H3", "BJ"]}
- {"type": "error", "reason": "..."}

Cards are written as card codes (see ``gouji_server.logging.formatters``).
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from gouji_server.logging.formatters import format_card, parse_card
from gouji_server.models.card import Card

ENCODING = "utf-8"


class SitRequest(BaseModel):
    """Take a seat at a desktop."""

    type: Literal["sit"] = "sit"
    uid: str = Field(min_length=1)
    desktop_id: int = 0


class PlayRequest(BaseModel):
    """Play cards on the field."""

    type: Literal["play"] = "play"
    cards: list[Card]

    @field_validator("cards", mode="before")
    @classmethod
    def _parse_codes(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        cards = []
        for v in value:
            if isinstance(v, str):
                v = parse_card(v)
            elif isinstance(v, dict) and "wild" in v:
                # Wildcards are decided by the server when the set is built
                raise ValueError("cards must not set wild")
            cards.append(v)
        return cards


class PassRequest(BaseModel):
    """Pass instead of playing."""

    type: Literal["pass"] = "pass"


class HandRequest(BaseModel):
    """Ask for the current hand."""

    type: Literal["hand"] = "hand"


Request = Annotated[
    Union[SitRequest, PlayRequest, PassRequest, HandRequest],
    Field(discriminator="type"),
]

_request_adapter: TypeAdapter[Request] = TypeAdapter(Request)


class SitResponse(BaseModel):
    """Reply to a sit request."""

    type: Literal["sit"] = "sit"
    is_ok: bool
    reason: str = ""
    seat: int = -1


class PlayResponse(BaseModel):
    """Reply to a play request."""

    type: Literal["play"] = "play"
    is_ok: bool
    reason: str = ""
    error: str = "none"
    is_bomb: bool = False
    remaining: int = 0


class PassResponse(BaseModel):
    """Reply to a pass request."""

    type: Literal["pass"] = "pass"
    is_ok: bool
    reason: str = ""
    field_cleared: bool = False


class HandResponse(BaseModel):
    """Reply to a hand request."""

    type: Literal["hand"] = "hand"
    cards: list[str]

    @classmethod
    def from_cards(cls, cards: list[Card]) -> "HandResponse":
        return cls(cards=[format_card(c) for c in cards])


class ErrorResponse(BaseModel):
    """Reply to a malformed or out-of-order request."""

    type: Literal["error"] = "error"
    reason: str


Response = Union[SitResponse, PlayResponse, PassResponse, HandResponse, ErrorResponse]


def parse_request(line: str | bytes) -> Request:
    """Parse one request line.

    Args:
        line: JSON text of a single request.

    Returns:
        The request model selected by its "type" field.

    Raises:
        pydantic.ValidationError: Malformed JSON, unknown type, or bad card code.
    """
    return _request_adapter.validate_json(line)


def encode_response(response: Response) -> bytes:
    """Encode a response as one JSON line."""
    return (response.model_dump_json() + "\n").encode(ENCODING)
