import datetime as dt
import math
import os
from pathlib import Path

import pytest

# Headless plotting for the CLI and plot tests.
os.environ.setdefault("MPLBACKEND", "Agg")

from trackanalytics.analyze.models import Track, TrackPoint

KM_PER_DEG = 6371.0 * math.pi / 180
T0 = dt.datetime(2026, 5, 1, 8, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
def data_dir() -> Path:
    return Path(__file__).parent / "data"


@pytest.fixture
def morning_gpx_path(data_dir) -> Path:
    return data_dir / "morning_loop.gpx"


@pytest.fixture
def evening_gpx_path(data_dir) -> Path:
    return data_dir / "evening_route.gpx"


@pytest.fixture
def meridian_track():
    """
    Build a track running north along a meridian.

    offsets_km: distance of each point north of (lat0, lon)
    eles: elevation per point (None entries allowed)
    seconds: seconds after T0 per point (None entries allowed)
    """

    def build(offsets_km, *, name="track", lat0=0.0, lon=0.0, eles=None, seconds=None):
        n = len(offsets_km)
        eles = eles if eles is not None else [None] * n
        seconds = seconds if seconds is not None else [None] * n
        points = [
            TrackPoint(
                lat=lat0 + off / KM_PER_DEG,
                lon=lon,
                ele=ele,
                time=None if s is None else T0 + dt.timedelta(seconds=s),
            )
            for off, ele, s in zip(offsets_km, eles, seconds)
        ]
        return Track(name=name, points=tuple(points))

    return build
