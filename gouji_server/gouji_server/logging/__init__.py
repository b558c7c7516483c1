"""Game logging module."""

from gouji_server.config import GameLogConfig

from .formatters import format_card, format_cards, format_hands, parse_card
from .game_logger import GameLogger

__all__ = [
    "GameLogConfig",
    "GameLogger",
    "format_card",
    "format_cards",
    "format_hands",
    "parse_card",
]
