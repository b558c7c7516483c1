"""Game logger for detailed event replay."""

import json
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, TextIO

from gouji_server.config import GameLogConfig
from gouji_server.models.card import Card, CardSet
from gouji_server.models.hand import Hand

from .formatters import format_cards, format_hands


class GameLogger:
    """Logger for desktop events in JSONL format.

    Each line in the output file is a JSON object representing one event.
    Desktops on different connection threads share one logger, so writes
    are serialized.
    """

    def __init__(self, config: GameLogConfig | None = None):
        """Initialize game logger.

        Args:
            config: Logging configuration. If None, logging is disabled.
        """
        self.config = config or GameLogConfig()
        self._file: TextIO | None = None
        self._lock = threading.Lock()

    def __enter__(self) -> "GameLogger":
        """Context manager entry."""
        if self.config.enabled and self.config.output_path:
            path = Path(self.config.output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(path, "a", encoding="utf-8")
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the log file."""
        with self._lock:
            if self._file:
                self._file.close()
                self._file = None

    def _write(self, event: dict[str, Any]) -> None:
        """Write an event to the log file.

        Args:
            event: Event dictionary to write as JSON.
        """
        with self._lock:
            if self._file:
                self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
                self._file.flush()

    def log_server_start(self, host: str, port: int, num_desktops: int) -> None:
        """Log server start."""
        self._write({
            "type": "server_start",
            "timestamp": datetime.now().isoformat(),
            "host": host,
            "port": port,
            "desktops": num_desktops,
        })

    def log_sit(self, desktop_id: int, uid: str, seat: int) -> None:
        """Log a player taking a seat."""
        self._write({
            "type": "sit",
            "desktop": desktop_id,
            "uid": uid,
            "seat": seat,
        })

    def log_deal(self, desktop_id: int, hands: dict[str, Hand]) -> None:
        """Log dealt hands.

        Args:
            desktop_id: Desktop that was dealt.
            hands: Hands keyed by player uid.
        """
        self._write({
            "type": "deal",
            "desktop": desktop_id,
            "hands": format_hands(hands),
        })

    def log_play(
        self,
        desktop_id: int,
        uid: str,
        card_set: CardSet,
        is_bomb: bool,
        remaining: int,
    ) -> None:
        """Log an accepted play.

        Args:
            desktop_id: Desktop the play was made on.
            uid: Player who played.
            card_set: Normalized set that became the field.
            is_bomb: Whether the set is a bomb.
            remaining: Cards left in the player's hand.
        """
        self._write({
            "type": "play",
            "desktop": desktop_id,
            "uid": uid,
            "cards": format_cards(card_set),
            "bomb": is_bomb,
            "remaining": remaining,
        })

    def log_reject(
        self,
        desktop_id: int,
        uid: str,
        cards: Iterable[Card],
        error: str,
    ) -> None:
        """Log a rejected play."""
        self._write({
            "type": "reject",
            "desktop": desktop_id,
            "uid": uid,
            "cards": format_cards(cards),
            "error": error,
        })

    def log_pass(self, desktop_id: int, uid: str) -> None:
        """Log a pass."""
        self._write({
            "type": "pass",
            "desktop": desktop_id,
            "uid": uid,
        })

    def log_field_clear(self, desktop_id: int, leader: str | None) -> None:
        """Log the field being cleared after everyone passed."""
        self._write({
            "type": "field_clear",
            "desktop": desktop_id,
            "leader": leader,
        })

    def log_server_stop(self) -> None:
        """Log server shutdown."""
        self._write({
            "type": "server_stop",
            "timestamp": datetime.now().isoformat(),
        })
