"""Tests for the JSONL game logger."""

import json
import random

from gouji_server.game.desktop import Desktop
from gouji_server.logging import GameLogConfig, GameLogger
from gouji_server.models.card import CardSet, Rank, Suit, expand_agg
from gouji_server.models.hand import Hand


def read_events(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


class TestGameLogger:
    """Tests for GameLogger."""

    def test_disabled_writes_nothing(self, tmp_path):
        """Test that a disabled logger creates no file."""
        path = tmp_path / "log.jsonl"
        with GameLogger(GameLogConfig(enabled=False, output_path=str(path))) as game_logger:
            game_logger.log_sit(0, "alice", 0)

        assert not path.exists()

    def test_events(self, tmp_path):
        """Test writing individual events."""
        path = tmp_path / "logs" / "log.jsonl"
        config = GameLogConfig(enabled=True, output_path=str(path))

        with GameLogger(config) as game_logger:
            game_logger.log_server_start("127.0.0.1", 8000, 10)
            game_logger.log_sit(0, "alice", 0)
            game_logger.log_play(
                0,
                "alice",
                CardSet.from_agg([(Suit.HEART, Rank.KING, 1), (Suit.CLUB, Rank.TWO, 1)]),
                True,
                5,
            )
            game_logger.log_pass(0, "bob")
            game_logger.log_server_stop()

        events = read_events(path)
        assert [e["type"] for e in events] == ["server_start", "sit", "play", "pass", "server_stop"]
        assert events[1] == {"type": "sit", "desktop": 0, "uid": "alice", "seat": 0}
        assert events[2]["cards"] == "HK,C2"
        assert events[2]["bomb"] is True
        assert events[2]["remaining"] == 5

    def test_appends(self, tmp_path):
        """Test that reopening the log appends."""
        config = GameLogConfig(enabled=True, output_path=str(tmp_path / "log.jsonl"))
        for uid in ("alice", "bob"):
            with GameLogger(config) as game_logger:
                game_logger.log_pass(0, uid)

        assert [e["uid"] for e in read_events(config.output_path)] == ["alice", "bob"]

    def test_desktop_events(self, tmp_path):
        """Test the events a desktop emits during play."""
        config = GameLogConfig(enabled=True, output_path=str(tmp_path / "log.jsonl"))

        with GameLogger(config) as game_logger:
            desktop = Desktop(
                desktop_id=4,
                capacity=2,
                num_decks=1,
                rng=random.Random(3),
                game_logger=game_logger,
            )
            desktop.sit("alice")
            desktop.sit("bob")
            desktop.find_seat("alice").hand = Hand.from_agg([(Suit.HEART, Rank.NINE, 2)])
            desktop.play("alice", expand_agg([(Suit.HEART, Rank.EIGHT, 1)]))
            desktop.play("alice", expand_agg([(Suit.HEART, Rank.NINE, 1)]))
            desktop.pass_turn("bob")

        events = read_events(config.output_path)
        types = [e["type"] for e in events]
        assert types == ["sit", "sit", "deal", "reject", "play", "pass", "field_clear"]

        deal = events[2]
        assert set(deal["hands"]) == {"alice", "bob"}
        assert len(deal["hands"]["alice"].split(",")) == 27

        assert events[3]["error"] == "insufficient_hand"
        assert events[6] == {"type": "field_clear", "desktop": 4, "leader": "alice"}
