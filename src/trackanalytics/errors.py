# trackanalytics/errors

"""
trackanalytics.errors

Central exception hierarchy for trackanalytics.

Rationale:
  - Invalid structure (an empty track, coordinates off the globe) is a failure.
  - Valid but sparse data (no elevation, no timestamps) is not; the engine
    returns absent or zero results for it instead of raising.
  - Callers can catch TrackAnalyticsError (broad) or specific subclasses (narrow).
"""


class TrackAnalyticsError(RuntimeError):
    """Base class for all trackanalytics runtime errors."""


# ---- Engine input errors -----------------------

class InvalidTrackError(TrackAnalyticsError, ValueError):
    """A Track or TrackPoint violates the input contract."""

class AnalysisError(TrackAnalyticsError, ValueError):
    """An analysis parameter (threshold, cap) is out of range."""


# ---- Input adapter errors ----------------------

class InvalidGpxError(TrackAnalyticsError):
    """GPX file could not be parsed or did not contain usable track points."""


# ---- Configuration errors ----------------------

class ConfigError(TrackAnalyticsError):
    """Config file is malformed or holds an invalid value."""
