"""
Rigid Transform Module
======================

Pose3 is the 6-DoF rigid transform (rotation + translation) used for the
body-to-camera extrinsics of a camera. It is a small value type on top of
numpy with tolerance-based equality.
"""

import numpy as np
from typing import Optional

from .exceptions import DimensionMismatch


class Pose3:
    """
    Rigid transform mapping points from a child frame into a parent frame.

    For ``body_pose_camera`` the child frame is the camera and the parent
    frame is the vehicle/body: ``p_body = R @ p_cam + t``.
    """

    def __init__(self, rotation: Optional[np.ndarray] = None,
                 translation: Optional[np.ndarray] = None):
        """
        Initialize a pose.

        Args:
            rotation: 3x3 rotation matrix (identity if None)
            translation: 3-element translation (zero if None)
        """
        if rotation is None:
            rotation = np.eye(3)
        if translation is None:
            translation = np.zeros(3)

        rotation = np.asarray(rotation, dtype=np.float64)
        translation = np.asarray(translation, dtype=np.float64)

        if rotation.shape != (3, 3):
            raise DimensionMismatch(f"Rotation must be 3x3, got shape {rotation.shape}")
        if translation.size != 3:
            raise DimensionMismatch(f"Translation must have 3 elements, got {translation.size}")

        self.rotation = rotation.copy()
        self.translation = translation.reshape(3).copy()

    def matrix(self) -> np.ndarray:
        """Return the 4x4 homogeneous transformation matrix."""
        T = np.eye(4, dtype=np.float64)
        T[:3, :3] = self.rotation
        T[:3, 3] = self.translation
        return T

    def inverse(self) -> "Pose3":
        R_inv = self.rotation.T
        return Pose3(R_inv, -R_inv @ self.translation)

    def compose(self, other: "Pose3") -> "Pose3":
        """Return ``self * other`` (apply ``other`` first, then ``self``)."""
        return Pose3(self.rotation @ other.rotation,
                     self.rotation @ other.translation + self.translation)

    def __matmul__(self, other: "Pose3") -> "Pose3":
        return self.compose(other)

    def transform_point(self, point) -> np.ndarray:
        return self.rotation @ np.asarray(point, dtype=np.float64).reshape(3) + self.translation

    def equals(self, other: "Pose3", tol: float = 1e-9) -> bool:
        """
        Compare two poses element-wise up to an absolute tolerance.

        Args:
            other: Pose to compare against
            tol: Maximum allowed absolute difference per element

        Returns:
            bool: True if every rotation and translation element is within tol
        """
        if not isinstance(other, Pose3):
            return False
        return bool(
            np.all(np.abs(self.rotation - other.rotation) <= tol) and
            np.all(np.abs(self.translation - other.translation) <= tol)
        )

    def to_json(self) -> dict:
        return {
            'rotation': self.rotation.tolist(),
            'translation': self.translation.tolist(),
        }

    @classmethod
    def from_json(cls, data: dict) -> "Pose3":
        return cls(np.array(data['rotation'], dtype=np.float64),
                   np.array(data['translation'], dtype=np.float64))

    def __repr__(self) -> str:
        return f"Pose3(rotation={self.rotation.tolist()}, translation={self.translation.tolist()})"

    def __str__(self) -> str:
        return f"R:\n{self.rotation}\nt: {self.translation}"
