"""TCP server relaying JSON-line requests to desktops."""

import logging
import socket
import threading
from dataclasses import dataclass
from typing import Callable

from pydantic import ValidationError

from gouji_server.game.desktop import Desktop, Lobby
from gouji_server.logging import GameLogger

from .protocol import (
    ErrorResponse,
    HandRequest,
    HandResponse,
    PassRequest,
    PassResponse,
    PlayRequest,
    PlayResponse,
    Request,
    Response,
    SitRequest,
    SitResponse,
    encode_response,
    parse_request,
)

logger = logging.getLogger(__name__)

# Backlog for pending connections
LISTEN_BACKLOG = 16

# Longest request line accepted, newline included
MAX_LINE_BYTES = 64 * 1024


@dataclass
class Session:
    """State of one client connection."""

    address: str
    uid: str | None = None
    desktop: Desktop | None = None


class GameServer:
    """TCP server for hosting Gouji desktops.

    Every connection gets its own thread. A connection must sit at a
    desktop before it can play, pass or look at its hand.
    """

    def __init__(
        self,
        lobby: Lobby,
        host: str = "0.0.0.0",
        port: int = 8000,
        game_logger: GameLogger | None = None,
        on_sit: Callable[[int, str, int], None] | None = None,
    ):
        """Initialize server.

        Args:
            lobby: Desktops served by this server
            host: Host address to bind to
            port: Port number
            game_logger: GameLogger instance for event logging
            on_sit: Callback when a player sits (desktop_id, uid, seat)
        """
        self.lobby = lobby
        self.host = host
        self.port = port
        self.game_logger = game_logger
        self.on_sit = on_sit

        self._socket: socket.socket | None = None
        self._connections: set[socket.socket] = set()
        self._connections_lock = threading.Lock()

    def start(self) -> None:
        """Start the server and listen for connections."""
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._socket.bind((self.host, self.port))
        self._socket.listen(LISTEN_BACKLOG)
        # Port 0 binds an ephemeral port
        self.port = self._socket.getsockname()[1]
        logger.info(f"Server listening on {self.host}:{self.port}")

        if self.game_logger:
            self.game_logger.log_server_start(self.host, self.port, len(self.lobby))

    def serve_forever(self) -> None:
        """Accept connections until the server is closed."""
        if self._socket is None:
            raise RuntimeError("Server not started")

        while self._socket is not None:
            try:
                conn, addr = self._socket.accept()
            except OSError:
                # Listening socket closed
                break

            logger.info(f"Connection from {addr}")
            with self._connections_lock:
                self._connections.add(conn)
            thread = threading.Thread(
                target=self._handle_client,
                args=(conn, f"{addr[0]}:{addr[1]}"),
                daemon=True,
            )
            thread.start()

    def _handle_client(self, conn: socket.socket, address: str) -> None:
        """Serve one connection until it closes.

        Args:
            conn: Client socket
            address: Printable client address
        """
        session = Session(address=address)
        try:
            with conn.makefile("rb") as reader:
                while True:
                    line = reader.readline(MAX_LINE_BYTES)
                    if not line:
                        break
                    if len(line) == MAX_LINE_BYTES and not line.endswith(b"\n"):
                        logger.warning(f"Connection {address} sent an overlong line")
                        conn.sendall(encode_response(ErrorResponse(reason="request too long")))
                        break
                    if not line.strip():
                        continue
                    response = self.handle_line(session, line)
                    conn.sendall(encode_response(response))
        except OSError as e:
            logger.warning(f"Connection {address} dropped: {e}")
        finally:
            with self._connections_lock:
                self._connections.discard(conn)
            conn.close()
            logger.info(f"Connection {address} closed")

    def handle_line(self, session: Session, line: str | bytes) -> Response:
        """Parse one request line and answer it.

        Args:
            session: Connection state
            line: Raw request line

        Returns:
            Response to send back
        """
        try:
            request = parse_request(line)
        except ValidationError as e:
            first = e.errors()[0]
            logger.debug(f"Malformed request from {session.address}: {e}")
            return ErrorResponse(reason=f"malformed request: {first['msg']}")

        return self.dispatch(session, request)

    def dispatch(self, session: Session, request: Request) -> Response:
        """Route a parsed request to the session's desktop.

        Args:
            session: Connection state
            request: Parsed request

        Returns:
            Response to send back
        """
        if isinstance(request, SitRequest):
            return self._sit(session, request)

        if session.desktop is None or session.uid is None:
            return ErrorResponse(reason="not seated")

        if isinstance(request, PlayRequest):
            result = session.desktop.play(session.uid, request.cards)
            return PlayResponse(
                is_ok=result.is_ok,
                reason=result.reason,
                error=result.error.name.lower(),
                is_bomb=result.is_bomb,
                remaining=result.remaining,
            )

        if isinstance(request, PassRequest):
            result = session.desktop.pass_turn(session.uid)
            return PassResponse(
                is_ok=result.is_ok,
                reason=result.reason,
                field_cleared=result.field_cleared,
            )

        if isinstance(request, HandRequest):
            cards = session.desktop.hand_of(session.uid) or []
            return HandResponse.from_cards(cards)

        return ErrorResponse(reason=f"unsupported request: {request.type}")

    def _sit(self, session: Session, request: SitRequest) -> SitResponse:
        """Seat the session's player at the requested desktop."""
        if session.desktop is not None:
            return SitResponse(is_ok=False, reason="already seated")

        desktop = self.lobby.get(request.desktop_id)
        if desktop is None:
            return SitResponse(is_ok=False, reason="no such desktop")

        result = desktop.sit(request.uid)
        if not result.is_ok:
            return SitResponse(is_ok=False, reason=result.reason)

        session.uid = request.uid
        session.desktop = desktop
        if self.on_sit:
            self.on_sit(desktop.desktop_id, request.uid, result.seat)

        return SitResponse(is_ok=True, seat=result.seat)

    def close(self) -> None:
        """Close all connections and the server socket."""
        if self._socket:
            self._socket.close()
            self._socket = None

        with self._connections_lock:
            connections = list(self._connections)
            self._connections.clear()
        for conn in connections:
            try:
                conn.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass  # Already disconnected

        if self.game_logger:
            self.game_logger.log_server_stop()
        logger.info("Server closed")

    def __enter__(self) -> "GameServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
