# trackanalytics/formats/gpx.py
"""
GPX reader for trackanalytics

This module is intentionally format-focused:
- GPX namespace handling (1.0, 1.1, or none at all)
- parsing <time> and <ele> leniently
- turning <trkpt>/<rtept> elements into an engine Track

Key design principle:
  The analysis engine never touches files. Everything format-specific stays
  here, and the engine only ever sees a validated Track.
"""

from __future__ import annotations

import datetime as _dt
import math
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from trackanalytics.analyze.models import Track, TrackPoint
from trackanalytics.errors import InvalidGpxError, InvalidTrackError

POINT_TAGS = ("trkpt", "rtept")
NAME_PARENTS = ("metadata", "trk", "rte")


def _local(tag: str) -> str:
    """
    Strip the namespace from an ElementTree tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    and GPX 1.0 and 1.1 use different URIs, so we match on local names.
    """
    return tag.rsplit("}", 1)[-1]


def _parse_gpx_time(text: Optional[str]) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp commonly found in GPX <time> nodes.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"
    """
    if not text:
        return None
    s = text.strip()
    if not s:
        return None

    # GPX times commonly use Z for UTC.
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = _dt.datetime.fromisoformat(s)
    except ValueError:
        return None

    # Ensure tz-aware; if naive, assume UTC (conservative for GPX sources)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


def _parse_float(text: Optional[str]) -> Optional[float]:
    if text is None:
        return None
    try:
        v = float(text.strip())
    except ValueError:
        return None
    return v if math.isfinite(v) else None


def _child_text(el: ET.Element, name: str) -> Optional[str]:
    for child in el:
        if _local(child.tag) == name:
            return child.text
    return None


def read_gpx(path: Path) -> ET.ElementTree:
    """
    Read a GPX file into an ElementTree.

    Raises:
      InvalidGpxError (malformed XML), OSError
    """
    try:
        return ET.parse(path)
    except ET.ParseError as e:
        raise InvalidGpxError(f"Malformed GPX: {path} ({e})") from e


def track_name_from_gpx(root: ET.Element) -> Optional[str]:
    """
    First non-blank <name> of a <metadata>, <trk> or <rte> element, in
    document order.

    Waypoint and point names are never used.
    """
    for child in root:
        if _local(child.tag) not in NAME_PARENTS:
            continue
        text = _child_text(child, "name")
        if text and text.strip():
            return text.strip()
    return None


def extract_trackpoints(tree: ET.ElementTree) -> list[TrackPoint]:
    """
    Extract trackpoints and routepoints in document order.

    Elevation and time are optional. Points whose lat/lon are missing or not
    valid coordinates are skipped.
    """
    pts: list[TrackPoint] = []

    for el in tree.getroot().iter():
        if _local(el.tag) not in POINT_TAGS:
            continue

        lat = _parse_float(el.get("lat"))
        lon = _parse_float(el.get("lon"))
        if lat is None or lon is None:
            continue

        try:
            pts.append(TrackPoint(
                lat=lat,
                lon=lon,
                ele=_parse_float(_child_text(el, "ele")),
                time=_parse_gpx_time(_child_text(el, "time")),
            ))
        except InvalidTrackError:
            continue

    return pts


def load_track(path: Path, name: Optional[str] = None) -> Track:
    """
    Read a GPX file into a Track.

    Name: `name` if given, else the GPX's own name, else the file stem.

    Raises:
      InvalidGpxError if the file is malformed or has no usable points
    """
    path = Path(path)
    tree = read_gpx(path)
    points = extract_trackpoints(tree)
    if not points:
        raise InvalidGpxError(f"No track points found in GPX file: {path}")

    track_name = name or track_name_from_gpx(tree.getroot()) or path.stem
    return Track(name=track_name, points=tuple(points))
