import pytest

from trackanalytics.analyze.elevation import (
    ELEVATION_THRESHOLD_M,
    elevation_changes,
    elevation_metrics,
    elevation_profile,
)
from trackanalytics.analyze.models import Track, TrackPoint


def _track(eles):
    return Track(
        name="ele",
        points=tuple(TrackPoint(lat=0.001 * i, lon=0.0, ele=e) for i, e in enumerate(eles)),
    )


def test_absent_without_elevation():
    assert elevation_metrics(_track([None, None, None])) is None


def test_absent_for_single_point():
    assert elevation_metrics(_track([120.0])) is None


def test_flat_track():
    m = elevation_metrics(_track([250.0] * 5))
    assert m.total_ascent == 0.0
    assert m.total_descent == 0.0
    assert m.elevation_range == 0.0


def test_jitter_below_deadband_is_ignored():
    m = elevation_metrics(_track([100.0, 101.0, 100.0]))
    assert m.total_ascent == 0.0
    assert m.total_descent == 0.0
    assert (m.min_elevation, m.max_elevation) == (100.0, 101.0)


def test_climb_then_drop():
    m = elevation_metrics(_track([100.0, 105.0, 95.0]))
    assert m.total_ascent == 5.0
    assert m.total_descent == 10.0
    assert m.min_elevation == 95.0
    assert m.max_elevation == 105.0
    assert m.elevation_range == 10.0


def test_reference_does_not_move_on_small_steps():
    # 101.9 is ignored, so 103.8 is measured against 100 rather than 101.9.
    ascent, descent = elevation_changes([100.0, 101.9, 103.8, 105.7])
    assert ascent == pytest.approx(3.8)
    assert descent == 0.0


def test_climb_with_small_dips_still_counts():
    ascent, descent = elevation_changes([100.0, 104.0, 103.0, 108.0, 107.5, 112.0])
    assert ascent == pytest.approx(12.0)
    assert descent == 0.0


def test_exact_threshold_counts():
    ascent, descent = elevation_changes([10.0, 10.0 + ELEVATION_THRESHOLD_M])
    assert ascent == ELEVATION_THRESHOLD_M
    assert descent == 0.0


def test_missing_samples_are_skipped_not_interpolated():
    m = elevation_metrics(_track([100.0, None, None, 104.0, None]))
    assert m.total_ascent == 4.0
    assert m.min_elevation == 100.0
    assert m.max_elevation == 104.0


def test_custom_threshold():
    m = elevation_metrics(_track([100.0, 105.0, 95.0]), threshold_m=8.0)
    # +5 ignored, then 95 is 5 below the reference of 100: still ignored
    assert m.total_ascent == 0.0
    assert m.total_descent == 0.0


def test_empty_series():
    assert elevation_changes([]) == (0.0, 0.0)


def test_profile_skips_points_without_elevation(meridian_track):
    t = meridian_track([0.0, 1.0, 2.0, 3.0], eles=[10.0, None, 30.0, 40.0])
    profile = elevation_profile(t)

    assert [e for _, e in profile] == [10.0, 30.0, 40.0]
    assert profile[0][0] == 0.0
    assert profile[1][0] == pytest.approx(2.0, rel=1e-9)
    assert profile[2][0] == pytest.approx(3.0, rel=1e-9)


def test_profile_empty_without_elevation(meridian_track):
    assert elevation_profile(meridian_track([0.0, 1.0])) == []
