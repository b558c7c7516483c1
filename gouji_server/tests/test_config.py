"""Tests for configuration loading and the CLI parser."""

from gouji_server.config import Config, load_config
from gouji_server.main import build_parser


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self):
        """Test default configuration."""
        config = load_config()

        assert config.server.port == 8000
        assert config.desktop.num_desktops == 10
        assert config.desktop.capacity == 6
        assert config.desktop.num_decks == 4
        assert config.desktop.seed is None
        assert not config.game_log.enabled

    def test_missing_file(self, tmp_path):
        """Test that a missing file gives defaults."""
        assert load_config(tmp_path / "missing.yaml") == Config()

    def test_empty_file(self, tmp_path):
        """Test that an empty file gives defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == Config()

    def test_yaml_overrides(self, tmp_path):
        """Test that YAML values override defaults."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "server:\n"
            "  port: 9001\n"
            "desktop:\n"
            "  capacity: 4\n"
            "  seed: 12\n"
            "logging:\n"
            "  level: DEBUG\n"
        )
        config = load_config(str(path))

        assert config.server.port == 9001
        assert config.server.host == "0.0.0.0"
        assert config.desktop.capacity == 4
        assert config.desktop.seed == 12
        assert config.desktop.num_desktops == 10
        assert config.logging.level == "DEBUG"


class TestParser:
    """Tests for the command-line parser."""

    def test_options(self):
        """Test parsing overrides."""
        args = build_parser().parse_args(["-p", "9000", "-v", "--seed", "3", "--game-log", "out.jsonl"])

        assert args.port == 9000
        assert args.verbose
        assert args.seed == 3
        assert str(args.game_log) == "out.jsonl"
        assert args.config is None
