"""Network communication."""

from .protocol import parse_request, encode_response
from .server import GameServer, Session

__all__ = [
    "GameServer",
    "Session",
    "encode_response",
    "parse_request",
]
