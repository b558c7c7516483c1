"""Desktops (tables) and the lobby that holds them."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gouji_server.config import DesktopConfig
from gouji_server.errors import ErrorCode
from gouji_server.models.card import Card, CardSet, create_full_deck
from gouji_server.models.hand import Hand

from .validator import PlayValidator

if TYPE_CHECKING:
    from gouji_server.logging import GameLogger

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 6
DEFAULT_NUM_DECKS = 4


@dataclass
class Seat:
    """One occupied seat at a desktop."""

    uid: str
    index: int
    hand: Hand = field(default_factory=Hand)
    has_passed: bool = False


@dataclass
class SitResult:
    """Outcome of a sit request."""

    is_ok: bool
    reason: str = ""
    seat: int = -1
    dealt: bool = False


@dataclass
class PlayResult:
    """Outcome of a play request."""

    is_ok: bool
    reason: str = ""
    error: ErrorCode = ErrorCode.NONE
    is_bomb: bool = False
    remaining: int = 0
    card_set: CardSet | None = None


@dataclass
class PassResult:
    """Outcome of a pass request."""

    is_ok: bool
    reason: str = ""
    field_cleared: bool = False


class Desktop:
    """A table of seats sharing one field.

    All public methods take the desktop lock, so hands and the field are
    only ever changed by one request at a time.
    """

    def __init__(
        self,
        desktop_id: int,
        capacity: int = DEFAULT_CAPACITY,
        num_decks: int = DEFAULT_NUM_DECKS,
        rng: random.Random | None = None,
        game_logger: GameLogger | None = None,
        validator: PlayValidator | None = None,
    ):
        """Initialize desktop.

        Args:
            desktop_id: Index of this desktop in the lobby
            capacity: Number of seats
            num_decks: Number of 54-card decks dealt when the desktop fills
            rng: Random source for shuffling
            game_logger: GameLogger instance for event logging
            validator: PlayValidator instance (creates one if not provided)
        """
        self.desktop_id = desktop_id
        self.capacity = capacity
        self.num_decks = num_decks
        self.rng = rng or random.Random()
        self.game_logger = game_logger
        self.validator = validator or PlayValidator()

        self.seats: list[Seat] = []
        self.field: CardSet | None = None
        self.last_player: str | None = None
        self.dealt = False

        self._lock = threading.Lock()

    def is_full(self) -> bool:
        """Check if every seat is taken."""
        return len(self.seats) >= self.capacity

    def find_seat(self, uid: str) -> Seat | None:
        """Get the seat held by ``uid``."""
        for seat in self.seats:
            if seat.uid == uid:
                return seat
        return None

    def sit(self, uid: str) -> SitResult:
        """Seat a player, dealing once the last seat fills.

        Args:
            uid: Player identifier

        Returns:
            SitResult
        """
        with self._lock:
            existing = self.find_seat(uid)
            if existing is not None:
                return SitResult(is_ok=True, seat=existing.index, dealt=self.dealt)

            if self.is_full():
                return SitResult(is_ok=False, reason="desktop is full")

            seat = Seat(uid=uid, index=len(self.seats))
            self.seats.append(seat)
            logger.info(f"Desktop {self.desktop_id}: {uid} sat at seat {seat.index}")

            if self.game_logger:
                self.game_logger.log_sit(self.desktop_id, uid, seat.index)

            if self.is_full():
                self._deal()

            return SitResult(is_ok=True, seat=seat.index, dealt=self.dealt)

    def _deal(self) -> None:
        """Shuffle the decks and deal them round-robin to every seat."""
        deck = create_full_deck(self.num_decks)
        self.rng.shuffle(deck)

        dealt: list[list[Card]] = [[] for _ in self.seats]
        for i, card in enumerate(deck):
            dealt[i % len(self.seats)].append(card)

        for seat, cards in zip(self.seats, dealt):
            seat.hand = Hand(cards)
            seat.has_passed = False

        self.field = None
        self.last_player = None
        self.dealt = True
        logger.info(f"Desktop {self.desktop_id}: dealt {len(deck)} cards to {len(self.seats)} seats")

        if self.game_logger:
            self.game_logger.log_deal(
                self.desktop_id,
                {seat.uid: seat.hand for seat in self.seats},
            )

    def play(self, uid: str, cards: list[Card]) -> PlayResult:
        """Play cards on the field.

        Args:
            uid: Player identifier
            cards: Raw cards being played

        Returns:
            PlayResult
        """
        with self._lock:
            seat = self.find_seat(uid)
            if seat is None:
                return PlayResult(is_ok=False, reason=f"{uid} is not seated")

            result = self.validator.validate_play(seat.hand, cards, self.field)
            if not result.is_valid:
                logger.debug(f"Desktop {self.desktop_id}: rejected {uid}: {result.error_message}")
                if self.game_logger:
                    self.game_logger.log_reject(
                        self.desktop_id, uid, cards, result.error.name.lower()
                    )
                return PlayResult(
                    is_ok=False,
                    reason=result.error_message,
                    error=result.error,
                    remaining=seat.hand.count(),
                )

            self.field = result.card_set
            self.last_player = uid
            for other in self.seats:
                other.has_passed = False

            logger.info(
                f"Desktop {self.desktop_id}: {uid} played {result.card_set}"
                f"{' (bomb)' if result.is_bomb else ''}"
            )
            if self.game_logger:
                self.game_logger.log_play(
                    self.desktop_id,
                    uid,
                    result.card_set,
                    result.is_bomb,
                    seat.hand.count(),
                )

            return PlayResult(
                is_ok=True,
                is_bomb=result.is_bomb,
                remaining=seat.hand.count(),
                card_set=result.card_set,
            )

    def pass_turn(self, uid: str) -> PassResult:
        """Record a pass, clearing the field once everyone else passed.

        Args:
            uid: Player identifier

        Returns:
            PassResult
        """
        with self._lock:
            seat = self.find_seat(uid)
            if seat is None:
                return PassResult(is_ok=False, reason=f"{uid} is not seated")

            seat.has_passed = True
            if self.game_logger:
                self.game_logger.log_pass(self.desktop_id, uid)

            if self.field is None or not self._check_all_passed():
                return PassResult(is_ok=True)

            self._clear_field()
            return PassResult(is_ok=True, field_cleared=True)

    def _check_all_passed(self) -> bool:
        """Check if every other player still holding cards has passed."""
        return all(
            seat.has_passed
            for seat in self.seats
            if seat.uid != self.last_player and not seat.hand.is_empty()
        )

    def _clear_field(self) -> None:
        """Clear the field (all passed)."""
        self.field = None
        for seat in self.seats:
            seat.has_passed = False
        logger.info(f"Desktop {self.desktop_id}: field cleared, {self.last_player} leads")

        if self.game_logger:
            self.game_logger.log_field_clear(self.desktop_id, self.last_player)

    def hand_of(self, uid: str) -> list[Card] | None:
        """Get a copy of the player's hand, or None if not seated."""
        with self._lock:
            seat = self.find_seat(uid)
            return seat.hand.to_list() if seat else None


class Lobby:
    """Fixed collection of desktops addressed by id."""

    def __init__(
        self,
        config: DesktopConfig | None = None,
        game_logger: GameLogger | None = None,
    ):
        """Initialize lobby.

        Args:
            config: Desktop configuration (uses defaults if not provided)
            game_logger: GameLogger shared by every desktop
        """
        self.config = config or DesktopConfig()
        rng = random.Random(self.config.seed)
        self.desktops = [
            Desktop(
                desktop_id=i,
                capacity=self.config.capacity,
                num_decks=self.config.num_decks,
                rng=random.Random(rng.random()),
                game_logger=game_logger,
            )
            for i in range(self.config.num_desktops)
        ]

    def get(self, desktop_id: int) -> Desktop | None:
        """Get a desktop by id."""
        if 0 <= desktop_id < len(self.desktops):
            return self.desktops[desktop_id]
        return None

    def __len__(self) -> int:
        return len(self.desktops)
