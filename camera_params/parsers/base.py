"""
Base Class for Calibration Parsers
==================================

This module contains the abstract base class shared by all calibration
source parsers. A parser reads one calibration document and returns a
fully populated CameraParams, or raises a CalibrationError.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from ..camera_params import CameraParams
from ..exceptions import FormatError, SourceUnavailable


class CalibrationParser(ABC):
    """Abstract base class for calibration document parsers."""

    FORMAT_INFO: Dict[str, Any] = {}

    def __init__(self, verbose: bool = False):
        """
        Initialize parser.

        Args:
            verbose: Whether to print what is read from the document
        """
        self.verbose = verbose

    @abstractmethod
    def parse(self, filepath: str, **kwargs) -> CameraParams:
        """
        Parse a calibration document.

        Args:
            filepath: Path to the calibration document
            **kwargs: Format-specific parameters

        Returns:
            Fully populated CameraParams

        Raises:
            SourceUnavailable: If the document cannot be opened
            FormatError: If the document does not match the format
        """
        pass

    # Common utility methods that can be used by all parsers

    def check_source(self, filepath: str) -> Path:
        """Make sure the calibration document exists and is a regular file."""
        path = Path(filepath)
        if not path.is_file():
            raise SourceUnavailable(f"Calibration file not found: {filepath}")
        return path

    def require_count(self, values: List[float], expected: int, field: str, context: str = "") -> None:
        """Raise FormatError if a numeric field has fewer than expected values."""
        if len(values) < expected:
            where = f" ({context})" if context else ""
            raise FormatError(
                f"Field '{field}'{where} needs at least {expected} values, got {len(values)}"
            )

    def log(self, message: str) -> None:
        if self.verbose:
            print(message)

    @classmethod
    def get_info(cls) -> Dict[str, Any]:
        info = dict(cls.FORMAT_INFO)
        info['class_name'] = cls.__name__
        return info
