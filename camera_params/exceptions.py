"""
Calibration Error Types
=======================

Every failure raised while reading a calibration source derives from
CalibrationError, so callers can catch a single type:

- SourceUnavailable: the document cannot be opened or read
- FormatError: a required field is missing, has the wrong element count,
  or the document header/tags are malformed
- DimensionMismatch: a flattened matrix does not match its declared shape
"""


class CalibrationError(Exception):
    """Base class for camera calibration ingestion errors."""


class SourceUnavailable(CalibrationError, FileNotFoundError):
    """The calibration document could not be opened."""


class FormatError(CalibrationError, ValueError):
    """The calibration document does not have the expected layout."""


class DimensionMismatch(FormatError):
    """A matrix has a different number of elements than its declared shape."""
