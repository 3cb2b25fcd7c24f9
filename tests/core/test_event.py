"""Unit tests for feed normalization.

Pure functions: no mocks, no network.
"""

from datetime import datetime, timezone

import pytest

from quakemap.core.errors import MalformedFeedError
from quakemap.core.event import (
    NormalizationResult,
    SeismicEvent,
    TimeWindow,
    normalize,
    parse_event,
)


# Sample USGS GeoJSON feature for testing
SAMPLE_FEATURE = {
    "type": "Feature",
    "id": "nc75095866",
    "properties": {
        "mag": 4.2,
        "place": "10km NE of San Francisco, CA",
        "time": 1703001600000,  # 2023-12-19 16:00:00 UTC
        "url": "https://earthquake.usgs.gov/earthquakes/eventpage/nc75095866",
    },
    "geometry": {
        "type": "Point",
        "coordinates": [-122.4194, 37.7749, 10.5],  # lon, lat, depth
    },
}


def _feature(**overrides):
    """Copy SAMPLE_FEATURE with properties/geometry/id overrides."""
    feature = {
        "type": "Feature",
        "id": SAMPLE_FEATURE["id"],
        "properties": dict(SAMPLE_FEATURE["properties"]),
        "geometry": dict(SAMPLE_FEATURE["geometry"]),
    }
    for key, value in overrides.items():
        if key in ("mag", "place", "time", "url"):
            feature["properties"][key] = value
        elif key == "coordinates":
            feature["geometry"]["coordinates"] = value
        else:
            feature[key] = value
    return feature


class TestTimeWindow:
    """Tests for TimeWindow parsing."""

    def test_values_are_feed_keys(self):
        assert [w.value for w in TimeWindow] == ["hour", "day", "week"]

    @pytest.mark.parametrize("raw,expected", [
        ("hour", TimeWindow.HOUR),
        ("DAY", TimeWindow.DAY),
        (" week ", TimeWindow.WEEK),
        (TimeWindow.DAY, TimeWindow.DAY),
    ])
    def test_parse(self, raw, expected):
        assert TimeWindow.parse(raw) is expected

    def test_parse_rejects_unknown_key(self):
        with pytest.raises(ValueError, match="month"):
            TimeWindow.parse("month")


class TestParseEvent:
    """Tests for parse_event()."""

    def test_parses_valid_feature(self):
        result = parse_event(SAMPLE_FEATURE)

        assert result is not None
        assert result.id == "nc75095866"
        assert result.magnitude == 4.2
        assert result.place == "10km NE of San Francisco, CA"
        assert result.depth_km == 10.5
        assert result.url.endswith("nc75095866")

    def test_swaps_coordinates_to_lat_lon(self):
        """Geometry is [lon, lat]; the model is (lat, lon)."""
        result = parse_event(_feature(coordinates=[12.3, 45.6]))

        assert result.latitude == 45.6
        assert result.longitude == 12.3
        assert result.coordinates == (45.6, 12.3)
        assert result.depth_km is None

    def test_parses_time_as_aware_utc(self):
        result = parse_event(SAMPLE_FEATURE)

        assert result.timestamp == datetime(2023, 12, 19, 16, 0, 0, tzinfo=timezone.utc)
        assert result.timestamp.tzinfo is not None

    @pytest.mark.parametrize("mag", [None, "4.2", "", True, float("nan"), [4.2]])
    def test_unusable_magnitude_becomes_none(self, mag):
        result = parse_event(_feature(mag=mag))

        assert result is not None
        assert result.magnitude is None

    def test_negative_magnitude_is_kept(self):
        result = parse_event(_feature(mag=-0.4))
        assert result.magnitude == -0.4

    def test_zero_magnitude_is_not_none(self):
        result = parse_event(_feature(mag=0))
        assert result.magnitude == 0.0

    @pytest.mark.parametrize("place", [None, "", "   ", 42])
    def test_unusable_place_becomes_none(self, place):
        result = parse_event(_feature(place=place))

        assert result is not None
        assert result.place is None

    def test_missing_properties_block_drops_record_without_time(self):
        feature = {"id": "x", "geometry": {"coordinates": [0, 0]}}
        assert parse_event(feature) is None

    @pytest.mark.parametrize("event_id", [None, "", "  ", True, {"a": 1}])
    def test_returns_none_without_usable_id(self, event_id):
        assert parse_event(_feature(id=event_id)) is None

    def test_numeric_id_is_stringified(self):
        result = parse_event(_feature(id=123))
        assert result.id == "123"

    @pytest.mark.parametrize("coordinates", [
        None,
        [],
        [1.0],
        ["12.3", "45.6"],
        [12.3, None],
        [12.3, 91.0],
        [181.0, 45.6],
        [float("inf"), 0.0],
    ])
    def test_returns_none_for_invalid_coordinates(self, coordinates):
        assert parse_event(_feature(coordinates=coordinates)) is None

    def test_returns_none_without_geometry(self):
        feature = {"id": "x", "properties": {"time": 1703001600000}}
        assert parse_event(feature) is None

    @pytest.mark.parametrize("time", [None, "yesterday", float("nan"), True, 1e20])
    def test_returns_none_without_usable_time(self, time):
        assert parse_event(_feature(time=time)) is None

    @pytest.mark.parametrize("feature", [None, "feature", 42, ["id"]])
    def test_returns_none_for_non_mapping(self, feature):
        assert parse_event(feature) is None


class TestNormalize:
    """Tests for normalize()."""

    def test_end_to_end_example(self):
        raw = [{
            "id": "eq1",
            "properties": {"place": "X", "mag": 5.2, "time": 1700000000000},
            "geometry": {"coordinates": [12.3, 45.6]},
        }]

        result = normalize(raw)

        assert result == NormalizationResult(
            events=(
                SeismicEvent(
                    id="eq1",
                    place="X",
                    magnitude=5.2,
                    timestamp=datetime.fromtimestamp(1700000000, tz=timezone.utc),
                    latitude=45.6,
                    longitude=12.3,
                ),
            ),
            skipped=0,
        )

    def test_missing_id_is_skipped_and_counted(self):
        raw = [SAMPLE_FEATURE, _feature(id=None)]

        result = normalize(raw)

        assert len(result.events) == 1
        assert result.skipped == 1

    def test_counts_every_bad_record(self):
        raw = [
            SAMPLE_FEATURE,
            {"properties": {}, "geometry": {}},
            None,
            _feature(id="bad-coords", coordinates=[0]),
            _feature(id="no-time", time=None),
        ]

        result = normalize(raw)

        assert [e.id for e in result.events] == ["nc75095866"]
        assert result.skipped == 4

    def test_duplicate_ids_keep_first(self):
        raw = [
            _feature(id="dup", mag=1.0),
            _feature(id="dup", mag=5.0),
            _feature(id="other"),
        ]

        result = normalize(raw)

        assert [e.id for e in result.events] == ["dup", "other"]
        assert result.events[0].magnitude == 1.0
        assert result.skipped == 1

    def test_preserves_feed_order(self):
        raw = [_feature(id=str(i), time=1703001600000 + i) for i in (3, 1, 2)]

        result = normalize(raw)

        assert [e.id for e in result.events] == ["3", "1", "2"]

    def test_is_idempotent(self):
        raw = [SAMPLE_FEATURE, _feature(id="b", mag=None, place=None)]

        assert normalize(raw) == normalize(raw)

    def test_accepts_any_iterable(self):
        result = normalize(iter([SAMPLE_FEATURE]))
        assert len(result.events) == 1

    def test_empty_feed(self):
        assert normalize([]) == NormalizationResult(events=(), skipped=0)

    @pytest.mark.parametrize("payload", [
        None,
        42,
        "features",
        b"[]",
        {"features": []},
    ])
    def test_raises_for_non_container(self, payload):
        with pytest.raises(MalformedFeedError):
            normalize(payload)

    def test_events_are_immutable(self):
        event = normalize([SAMPLE_FEATURE]).events[0]

        with pytest.raises(AttributeError):
            event.latitude = 0.0
