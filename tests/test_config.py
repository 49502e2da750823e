"""Tests for environment-driven settings."""

from pathlib import Path

from antakshari_mcp import config


class TestEnvironment:
    def test_defaults(self, monkeypatch):
        for name in (
            "ANTAKSHARI_CORPUS_PATH",
            "ANTAKSHARI_ORACLE_URL",
            "ANTAKSHARI_ORACLE_API_KEY",
            "ANTAKSHARI_ORACLE_TIMEOUT",
            "ANTAKSHARI_POINTS_PER_TURN",
        ):
            monkeypatch.delenv(name, raising=False)

        assert config.corpus_path() == config.DEFAULT_CORPUS_PATH
        assert config.oracle_url() is None
        assert config.oracle_api_key() == ""
        assert config.oracle_timeout() == 60.0
        assert config.points_per_turn() == 10

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("ANTAKSHARI_CORPUS_PATH", "/tmp/verses.json")
        monkeypatch.setenv("ANTAKSHARI_ORACLE_URL", "https://oracle.test")
        monkeypatch.setenv("ANTAKSHARI_ORACLE_TIMEOUT", "2.5")
        monkeypatch.setenv("ANTAKSHARI_POINTS_PER_TURN", "25")

        assert config.corpus_path() == Path("/tmp/verses.json")
        assert config.oracle_url() == "https://oracle.test"
        assert config.oracle_timeout() == 2.5
        assert config.points_per_turn() == 25

    def test_empty_oracle_url_disables(self, monkeypatch):
        monkeypatch.setenv("ANTAKSHARI_ORACLE_URL", "")
        assert config.oracle_url() is None


class TestMatcherConfig:
    def test_defaults(self):
        cfg = config.MatcherConfig()
        assert cfg.first_word_threshold == 0.7
        assert cfg.word_threshold == 0.75
        assert cfg.min_combined_score == 1.4
        assert cfg.min_words == 2
