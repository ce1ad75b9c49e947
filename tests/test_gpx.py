import datetime as dt
from pathlib import Path

import pytest

from trackanalytics.errors import InvalidGpxError
from trackanalytics.formats.gpx import _parse_gpx_time, load_track

UTC = dt.timezone.utc


def _write(tmp_path: Path, body: str, name: str = "t.gpx") -> Path:
    p = tmp_path / name
    p.write_text(
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<gpx xmlns="http://www.topografix.com/GPX/1/1" version="1.1">' + body + "</gpx>",
        encoding="utf-8",
    )
    return p


def test_load_gpx_11_track(morning_gpx_path):
    t = load_track(morning_gpx_path)

    assert t.name == "Morning Ride"
    assert len(t.points) == 6
    assert t.has_elevation
    assert t.has_timestamps
    assert t.points[0].lat == 51.0
    assert t.points[0].lon == -114.0
    assert t.points[0].ele == 1000.0
    assert t.points[0].time == dt.datetime(2026, 5, 1, 8, 0, tzinfo=UTC)
    # -06:00 offset normalized to UTC
    assert t.points[4].time == dt.datetime(2026, 5, 1, 8, 4, tzinfo=UTC)


def test_load_gpx_10_route(evening_gpx_path):
    t = load_track(evening_gpx_path)

    assert t.name == "Evening Route"
    assert len(t.points) == 16
    assert not t.has_elevation
    assert not t.has_timestamps
    assert t.points[-1].lat == 51.003


def test_explicit_name_wins(morning_gpx_path):
    assert load_track(morning_gpx_path, name="Commute").name == "Commute"


def test_name_falls_back_to_file_stem(tmp_path):
    p = _write(tmp_path, '<trk><trkseg><trkpt lat="1" lon="2"/></trkseg></trk>', name="lunch_walk.gpx")
    assert load_track(p).name == "lunch_walk"


def test_point_names_are_not_track_names(tmp_path):
    p = _write(tmp_path, '<wpt lat="0" lon="0"/><rte><rtept lat="1" lon="2"><name>Turn left</name></rtept></rte>')
    assert load_track(p).name == "t"


def test_waypoint_name_is_not_track_name(tmp_path):
    p = _write(
        tmp_path,
        '<wpt lat="0" lon="0"><name>Cafe</name></wpt>'
        '<trk><name>Ride</name><trkseg><trkpt lat="1" lon="2"/></trkseg></trk>',
    )
    assert load_track(p).name == "Ride"


def test_metadata_name_comes_first(tmp_path):
    p = _write(
        tmp_path,
        "<metadata><name>Saturday</name></metadata>"
        '<trk><name>Ride</name><trkseg><trkpt lat="1" lon="2"/></trkseg></trk>',
    )
    assert load_track(p).name == "Saturday"


def test_namespace_less_gpx(tmp_path):
    p = tmp_path / "plain.gpx"
    p.write_text('<gpx><trk><name>Plain</name><trkseg><trkpt lat="1" lon="2"><ele>5</ele></trkpt></trkseg></trk></gpx>')
    t = load_track(p)
    assert t.name == "Plain"
    assert t.points[0].ele == 5.0


def test_bad_fields(tmp_path):
    p = _write(
        tmp_path,
        "<trk><trkseg>"
        '<trkpt lat="1" lon="2"><ele>high</ele><time>yesterday</time></trkpt>'
        '<trkpt lat="north" lon="2"/>'
        '<trkpt lat="95" lon="2"/>'
        '<trkpt lon="2"/>'
        '<trkpt lat="1.5" lon="2.5"><ele> 12.5 </ele><time>2026-05-01T08:00:00Z</time></trkpt>'
        "</trkseg></trk>",
    )
    t = load_track(p)

    assert [(pt.lat, pt.lon) for pt in t.points] == [(1.0, 2.0), (1.5, 2.5)]
    assert t.points[0].ele is None
    assert t.points[0].time is None
    assert t.points[1].ele == 12.5


def test_no_points(tmp_path):
    p = _write(tmp_path, "<metadata><name>Empty</name></metadata>")
    with pytest.raises(InvalidGpxError, match="No track points"):
        load_track(p)


def test_malformed_xml(tmp_path):
    p = tmp_path / "broken.gpx"
    p.write_text("<gpx><trk>", encoding="utf-8")
    with pytest.raises(InvalidGpxError, match="Malformed"):
        load_track(p)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2026-01-02T21:14:44Z", dt.datetime(2026, 1, 2, 21, 14, 44, tzinfo=UTC)),
        ("2026-01-02T21:14:44.123Z", dt.datetime(2026, 1, 2, 21, 14, 44, 123000, tzinfo=UTC)),
        ("2026-01-02T21:14:44+00:00", dt.datetime(2026, 1, 2, 21, 14, 44, tzinfo=UTC)),
        ("2026-01-02T23:14:44+02:00", dt.datetime(2026, 1, 2, 21, 14, 44, tzinfo=UTC)),
        ("2026-01-02T21:14:44", dt.datetime(2026, 1, 2, 21, 14, 44, tzinfo=UTC)),
        ("  2026-01-02T21:14:44Z\n", dt.datetime(2026, 1, 2, 21, 14, 44, tzinfo=UTC)),
        ("", None),
        ("   ", None),
        (None, None),
        ("not a time", None),
    ],
)
def test_parse_gpx_time(text, expected):
    assert _parse_gpx_time(text) == expected
