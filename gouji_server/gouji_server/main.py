"""Main entry point for Gouji server."""

import argparse
import logging
import sys
from pathlib import Path

from gouji_server.config import load_config
from gouji_server.game.desktop import Lobby
from gouji_server.logging import GameLogger
from gouji_server.network.server import GameServer
from gouji_server.utils.logger import ServerDisplay, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Gouji card game rule server"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config file (YAML)",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        help="Server port (overrides config)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--show-hands",
        action="store_true",
        help="Show hands when a desktop is dealt",
    )
    parser.add_argument(
        "--game-log",
        type=Path,
        help="Path of the JSONL game event log",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Shuffle seed (overrides config)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success)
    """
    args = build_parser().parse_args(argv)

    # Load config
    config = load_config(args.config)

    # Apply command-line overrides
    if args.port is not None:
        config.server.port = args.port
    if args.verbose:
        config.logging.level = "DEBUG"
    if args.show_hands:
        config.logging.show_hands = True
    if args.game_log:
        config.game_log.enabled = True
        config.game_log.output_path = str(args.game_log)
    if args.seed is not None:
        config.desktop.seed = args.seed

    setup_logging(config.logging.level)

    display = ServerDisplay(show_hands=config.logging.show_hands)
    display.print_startup(config)

    try:
        with GameLogger(config.game_log) as game_logger:
            lobby = Lobby(config.desktop, game_logger)

            def on_sit(desktop_id: int, uid: str, seat: int) -> None:
                display.print_player_seated(desktop_id, uid, seat)
                desktop = lobby.get(desktop_id)
                if desktop is not None and desktop.is_full():
                    display.print_hands(desktop)

            with GameServer(
                lobby,
                host=config.server.host,
                port=config.server.port,
                game_logger=game_logger,
                on_sit=on_sit,
            ) as server:
                server.serve_forever()

        return 0

    except KeyboardInterrupt:
        print("\nServer interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"Server error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
