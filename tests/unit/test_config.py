"""Unit tests for settings."""

from cerebro.config import Environment, Settings, get_dev_settings, get_test_settings


class TestSettings:
    """Tests for Settings defaults and presets."""

    def test_defaults(self, monkeypatch) -> None:
        """Test interaction constants."""
        monkeypatch.delenv("API_BASE_URL", raising=False)
        config = Settings(_env_file=None)
        assert config.graph_limit == 60
        assert config.playback_ticks == 60
        assert config.playback_interval == 0.1
        assert config.detail_freshness == 300
        assert config.extraction_error_ttl == 8
        assert (config.graph_min_zoom, config.graph_max_zoom) == (0.15, 4.0)

    def test_env_override(self, monkeypatch) -> None:
        """Test environment variables override defaults."""
        monkeypatch.setenv("GRAPH_LIMIT", "25")
        monkeypatch.setenv("API_TOKEN", "abc")
        config = Settings(_env_file=None)
        assert config.graph_limit == 25
        assert config.api_token == "abc"

    def test_presets(self) -> None:
        assert get_test_settings().environment == Environment.TEST
        assert get_dev_settings().api_max_retries == 0
