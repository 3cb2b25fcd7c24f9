"""Tests for configuration validation."""

from quakemap.core.config import Config, validate_config, validate_coordinates
from quakemap.core.event import TimeWindow


def _fields(result, severity):
    return {e.field for e in result.errors if e.severity == severity}


class TestConfigDefaults:
    """Tests for Config defaults."""

    def test_defaults(self):
        config = Config()

        assert config.feed_base_url.startswith("https://earthquake.usgs.gov/")
        assert config.default_window is TimeWindow.DAY
        assert config.request_timeout_seconds is None
        assert (config.map_center_latitude, config.map_center_longitude) == (20.0, 0.0)
        assert config.map_zoom == 2

    def test_tz_none_means_local(self):
        assert Config().tz is None

    def test_tz_resolves_zone(self):
        config = Config(display_timezone="Europe/Rome")
        assert config.tz.key == "Europe/Rome"


class TestValidateCoordinates:
    """Tests for validate_coordinates()."""

    def test_valid(self):
        assert validate_coordinates(45.0, 12.0, "center") == []

    def test_out_of_range(self):
        errors = validate_coordinates(95.0, 200.0, "center")
        assert len(errors) == 2


class TestValidateConfig:
    """Tests for validate_config()."""

    def test_defaults_are_valid_with_timeout_warning(self):
        result = validate_config(Config())

        assert result.valid is True
        assert _fields(result, "warning") == {"request_timeout_seconds"}
        assert result.critical_errors == []

    def test_timeout_silences_warning(self):
        result = validate_config(Config(request_timeout_seconds=30))

        assert result.errors == []

    def test_bad_url(self):
        result = validate_config(Config(feed_base_url="ftp://example.com/feeds"))

        assert result.valid is False
        assert "feed_base_url" in _fields(result, "error")

    def test_plain_http_is_a_warning(self):
        result = validate_config(Config(
            feed_base_url="http://example.com/feeds",
            request_timeout_seconds=10,
        ))

        assert result.valid is True
        assert _fields(result, "warning") == {"feed_base_url"}

    def test_collects_all_errors(self):
        result = validate_config(Config(
            request_timeout_seconds=0,
            max_workers=0,
            display_timezone="Mars/Olympus_Mons",
            map_width=0,
            map_zoom=25,
            map_center_latitude=100.0,
        ))

        assert result.valid is False
        assert _fields(result, "error") == {
            "request_timeout_seconds",
            "max_workers",
            "display_timezone",
            "map_width/map_height",
            "map_zoom",
            "map_center",
        }
