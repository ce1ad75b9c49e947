"""
trackanalytics configuration loader

This module centralizes *all* configuration handling for trackanalytics.

Design goals:
- CLI flags override everything.
- Sensible defaults if no config exists; the defaults are the engine's own
  constants, so an unconfigured run and a bare library call agree.
- Per-machine config without committing personal preferences:
    ~/.config/trackanalytics/config.toml
- Repo-local config:
    <repo_root>/config/config.toml
- Environment variable overrides for automation.

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by the CLI)
2) Environment variables (TRACKANALYTICS_*)
3) User config: ~/.config/trackanalytics/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults

Recognized keys:

    [analysis]
    overlap_threshold_m = 50.0
    elevation_threshold_m = 2.0
    min_moving_speed_kmh = 1.0
    max_speed_kmh = 200.0

    [display]
    units = "km"            # km | mi | nmi

This module uses Python's built-in tomllib on Python 3.11+, or `tomli`.
"""

from __future__ import annotations

import math
import os
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from trackanalytics.errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# Engine defaults. The engine modules carry the same values as their
# keyword defaults; tests pin the two together.
DEFAULT_OVERLAP_THRESHOLD_M = 50.0
DEFAULT_ELEVATION_THRESHOLD_M = 2.0
DEFAULT_MIN_MOVING_SPEED_KMH = 1.0
DEFAULT_MAX_SPEED_KMH = 200.0

UNITS = ("km", "mi", "nmi")


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise ConfigError
      with the file path in the message.
    """
    if not path.is_file():
        return {}

    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "analysis.overlap_threshold_m")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_float(v: Any, key: str, origin: str) -> float:
    """
    Coerce a config value into a non-negative finite float.

    Strings are accepted so environment variables go through the same path.
    A bad number raises rather than falling back to the default.
    """
    if isinstance(v, bool):
        raise ConfigError(f"{key} must be a number, got {v!r} ({origin})")
    try:
        f = float(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {v!r} ({origin})") from e
    if not math.isfinite(f) or f < 0:
        raise ConfigError(f"{key} must be a non-negative finite number, got {v!r} ({origin})")
    return f


def _as_units(v: Any, origin: str) -> str:
    s = str(v).strip().lower()
    if s not in UNITS:
        raise ConfigError(f"display.units must be one of {', '.join(UNITS)}, got {v!r} ({origin})")
    return s


# ---------------------------------------------------------------------------
# Repo discovery
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AnalysisSettings:
    """
    Thresholds fed to the analysis engines.

    This object is what the engine and CLI consume.
    """

    overlap_threshold_m: float = DEFAULT_OVERLAP_THRESHOLD_M
    elevation_threshold_m: float = DEFAULT_ELEVATION_THRESHOLD_M
    min_moving_speed_kmh: float = DEFAULT_MIN_MOVING_SPEED_KMH
    max_speed_kmh: float = DEFAULT_MAX_SPEED_KMH


@dataclass(frozen=True)
class DisplaySettings:
    units: str = "km"


@dataclass(frozen=True)
class TrackAnalyticsConfig:
    """
    Fully merged configuration.

    Attributes:
    - analysis: engine thresholds
    - display: presentation preferences
    - source: provenance map showing where each value came from
    """

    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)
    display: DisplaySettings = field(default_factory=DisplaySettings)
    source: dict[str, str] = field(default_factory=dict)


_ANALYSIS_KEYS = (
    "overlap_threshold_m",
    "elevation_threshold_m",
    "min_moving_speed_kmh",
    "max_speed_kmh",
)

ENV_MAP = {
    "TRACKANALYTICS_OVERLAP_THRESHOLD_M": "analysis.overlap_threshold_m",
    "TRACKANALYTICS_ELEVATION_THRESHOLD_M": "analysis.elevation_threshold_m",
    "TRACKANALYTICS_MIN_MOVING_SPEED_KMH": "analysis.min_moving_speed_kmh",
    "TRACKANALYTICS_MAX_SPEED_KMH": "analysis.max_speed_kmh",
    "TRACKANALYTICS_UNITS": "display.units",
}


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> TrackAnalyticsConfig:
    """
    Load, merge, and validate all configuration.

    This function is the single authoritative entry point
    for configuration access.

    Raises:
        ConfigError: malformed TOML or an invalid value anywhere in the chain
    """

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "trackanalytics" / "config.toml"

    # Load raw TOML dicts
    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    analysis = AnalysisSettings()
    display = DisplaySettings()
    src = {f"analysis.{k}": "default" for k in _ANALYSIS_KEYS}
    src["display.units"] = "default"

    def apply(key: str, raw: Any, origin: str) -> None:
        nonlocal analysis, display
        section, name = key.split(".", 1)
        if section == "analysis":
            analysis = replace(analysis, **{name: _as_float(raw, key, origin)})
        else:
            display = replace(display, units=_as_units(raw, origin))
        src[key] = origin

    # Repo, then user (user overrides repo)
    for cfg, origin in ((repo_cfg, f"repo:{repo_config_path}"), (user_cfg, f"user:{user_config_path}")):
        for key in src:
            v = _deep_get(cfg, key)
            if v is not None:
                apply(key, v, origin)

    # Environment variable overrides (highest non-CLI precedence)
    for env, key in ENV_MAP.items():
        v = os.environ.get(env)
        if v:
            apply(key, v, f"env:{env}")

    return TrackAnalyticsConfig(analysis=analysis, display=display, source=src)
