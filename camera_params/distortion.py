"""
Distortion Models and Packed Calibration
========================================

The distortion model is a tagged variant. Each tag has a builder that
packs intrinsics and distortion coefficients into the calibration object
handed to downstream geometry/estimation code.

Only the 4-parameter radial-tangential model is supported:
    (fx, fy, skew=0, cx, cy, k1, k2, p1, p2)
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .exceptions import FormatError


class DistortionModel(Enum):
    """Lens distortion model tag."""
    RADIAL_TANGENTIAL = 'radial-tangential'

    @classmethod
    def from_name(cls, name: str) -> "DistortionModel":
        """
        Resolve a distortion model from the name used in calibration files.

        Raises:
            FormatError: If the name is not a supported model
        """
        key = str(name).strip().lower()
        if key in _MODEL_ALIASES:
            return _MODEL_ALIASES[key]
        raise FormatError(
            f"Unsupported distortion model: '{name}'. "
            f"Supported: {', '.join(sorted(_MODEL_ALIASES))}"
        )


_MODEL_ALIASES = {
    'radial-tangential': DistortionModel.RADIAL_TANGENTIAL,
    'radtan': DistortionModel.RADIAL_TANGENTIAL,
    'plumb_bob': DistortionModel.RADIAL_TANGENTIAL,
}


@dataclass(frozen=True)
class PinholeRadTanCalibration:
    """Pinhole intrinsics with 4-parameter radial-tangential distortion."""
    fx: float
    fy: float
    skew: float
    cx: float
    cy: float
    k1: float
    k2: float
    p1: float
    p2: float

    def vector(self) -> np.ndarray:
        """Return the 9 packed parameters (fx, fy, skew, cx, cy, k1, k2, p1, p2)."""
        return np.array([self.fx, self.fy, self.skew, self.cx, self.cy,
                         self.k1, self.k2, self.p1, self.p2], dtype=np.float64)

    def K(self) -> np.ndarray:
        return np.array([[self.fx, self.skew, self.cx],
                         [0.0, self.fy, self.cy],
                         [0.0, 0.0, 1.0]], dtype=np.float64)

    def distortion(self) -> np.ndarray:
        return np.array([self.k1, self.k2, self.p1, self.p2], dtype=np.float64)

    def equals(self, other: "PinholeRadTanCalibration", tol: float = 1e-9) -> bool:
        if not isinstance(other, PinholeRadTanCalibration):
            return False
        return bool(np.all(np.abs(self.vector() - other.vector()) <= tol))

    def to_json(self) -> dict:
        return {name: float(value) for name, value in zip(
            ('fx', 'fy', 'skew', 'cx', 'cy', 'k1', 'k2', 'p1', 'p2'), self.vector())}

    def __str__(self) -> str:
        return (f"fx: {self.fx}, fy: {self.fy}, s: {self.skew}, "
                f"cx: {self.cx}, cy: {self.cy}\n"
                f"k1: {self.k1}, k2: {self.k2}, p1: {self.p1}, p2: {self.p2}")


def _build_radial_tangential(intrinsics: Sequence[float],
                             distortion_coefficients: Sequence[float]) -> PinholeRadTanCalibration:
    if len(distortion_coefficients) < 4:
        raise FormatError(
            f"Radial-tangential model needs 4 distortion coefficients, "
            f"got {len(distortion_coefficients)}"
        )
    fx, fy, cx, cy = (float(v) for v in intrinsics)
    k1, k2, p1, p2 = (float(v) for v in distortion_coefficients[:4])
    return PinholeRadTanCalibration(fx, fy, 0.0, cx, cy, k1, k2, p1, p2)


_CALIBRATION_BUILDERS = {
    DistortionModel.RADIAL_TANGENTIAL: _build_radial_tangential,
}


def build_calibration(intrinsics: Sequence[float],
                      distortion_coefficients: Sequence[float],
                      model: DistortionModel = DistortionModel.RADIAL_TANGENTIAL):
    """
    Pack intrinsics and distortion into the calibration object for a model.

    Args:
        intrinsics: [fx, fy, cx, cy]
        distortion_coefficients: Flat distortion values in the model's layout;
            extra trailing values (e.g. k3) are not packed
        model: Distortion model tag

    Returns:
        Packed calibration object for the model

    Raises:
        FormatError: If the inputs are too short for the model
    """
    if len(intrinsics) != 4:
        raise FormatError(f"Intrinsics must have 4 values [fx, fy, cx, cy], got {len(intrinsics)}")

    builder = _CALIBRATION_BUILDERS.get(model)
    if builder is None:
        raise FormatError(f"No calibration builder registered for distortion model {model}")

    return builder(intrinsics, np.asarray(distortion_coefficients, dtype=np.float64).ravel())
