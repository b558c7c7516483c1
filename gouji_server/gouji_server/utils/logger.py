"""Logging utilities and server console display."""

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gouji_server.config import Config
    from gouji_server.game.desktop import Desktop


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


class ServerDisplay:
    """Display server events to stdout."""

    def __init__(self, show_hands: bool = False):
        """Initialize display.

        Args:
            show_hands: Whether to show hands once a desktop is dealt
        """
        self.show_hands = show_hands

    def print_separator(self) -> None:
        """Print a separator line."""
        print("=" * 60)

    def print_startup(self, config: "Config") -> None:
        """Print startup banner."""
        self.print_separator()
        print("Gouji Server starting...")
        print(f"Address: {config.server.host}:{config.server.port}")
        print(f"Desktops: {config.desktop.num_desktops} x {config.desktop.capacity} seats")
        print(f"Decks per desktop: {config.desktop.num_decks}")
        if config.game_log.enabled:
            print(f"Game log: {config.game_log.output_path}")
        self.print_separator()

    def print_player_seated(self, desktop_id: int, uid: str, seat: int) -> None:
        """Print player seating message."""
        print(f"Desktop {desktop_id}: {uid} took seat {seat}")

    def print_hands(self, desktop: "Desktop") -> None:
        """Print every hand at a desktop (if show_hands is enabled)."""
        if not self.show_hands:
            return

        print(f"\nDesktop {desktop.desktop_id} hands:")
        for seat in desktop.seats:
            print(f"  [{seat.index}] {seat.uid}: {seat.hand}")
