"""
Pose Utility Functions
======================

Helpers that turn raw numeric layouts found in calibration files into
Pose3 objects, plus roll-pitch-yaw conversions used for reporting.
"""

import numpy as np
from typing import Sequence

from .exceptions import DimensionMismatch
from .pose import Pose3


def vec_to_pose(values: Sequence[float], rows: int, cols: int) -> Pose3:
    """
    Build a pose from a flattened row-major transformation matrix.

    Args:
        values: Flattened matrix entries in row-major order
        rows: Declared number of rows (3 or 4)
        cols: Declared number of columns (must be 4)

    Returns:
        Pose3 with the top-left 3x3 block as rotation and the last column as translation

    Raises:
        DimensionMismatch: If len(values) != rows * cols or the shape is not 3x4/4x4
    """
    values = np.asarray(values, dtype=np.float64).ravel()
    rows, cols = int(rows), int(cols)

    if rows * cols != values.size:
        raise DimensionMismatch(
            f"Transform data has {values.size} elements but rows x cols = "
            f"{rows} x {cols} = {rows * cols}"
        )
    if cols != 4 or rows not in (3, 4):
        raise DimensionMismatch(f"Transform must be 3x4 or 4x4, got {rows}x{cols}")

    T = values.reshape(rows, cols)
    return Pose3(T[:3, :3], T[:3, 3])


def cvmats_to_pose(rotation, translation) -> Pose3:
    """
    Build a pose from a rotation matrix and a translation vector.

    Args:
        rotation: 3x3 rotation matrix
        translation: Translation as 3, 3x1 or 1x3 array

    Returns:
        Pose3 instance
    """
    rotation = np.asarray(rotation, dtype=np.float64)
    translation = np.asarray(translation, dtype=np.float64)

    if rotation.shape != (3, 3):
        raise DimensionMismatch(f"Rotation must be 3x3, got shape {rotation.shape}")
    if translation.size != 3:
        raise DimensionMismatch(f"Translation must have 3 elements, got {translation.size}")

    return Pose3(rotation, translation.reshape(3))


def rpy_to_matrix(rpy: Sequence[float]) -> np.ndarray:
    """
    Rotation matrix for fixed-axis roll, pitch, yaw (radians): Rz(yaw) @ Ry(pitch) @ Rx(roll).

    Raises:
        DimensionMismatch: If rpy does not hold exactly 3 angles
    """
    angles = np.asarray(rpy, dtype=np.float64).ravel()
    if angles.size != 3:
        raise DimensionMismatch(f"Expected 3 roll-pitch-yaw angles, got {angles.size}")
    roll, pitch, yaw = angles

    Rx = np.array([[1.0, 0.0, 0.0],
                   [0.0, np.cos(roll), -np.sin(roll)],
                   [0.0, np.sin(roll), np.cos(roll)]])
    Ry = np.array([[np.cos(pitch), 0.0, np.sin(pitch)],
                   [0.0, 1.0, 0.0],
                   [-np.sin(pitch), 0.0, np.cos(pitch)]])
    Rz = np.array([[np.cos(yaw), -np.sin(yaw), 0.0],
                   [np.sin(yaw), np.cos(yaw), 0.0],
                   [0.0, 0.0, 1.0]])
    return Rz @ Ry @ Rx


def pose_to_xyz_rpy(pose: Pose3):
    """
    Express a pose as xyz position and rpy angles.
    
    Args:
        pose: Pose3 instance
        
    Returns:
        Tuple of (x, y, z, roll, pitch, yaw), angles in radians
    """
    x, y, z = pose.translation
    
    R = pose.rotation
    sy = np.sqrt(R[0, 0] * R[0, 0] + R[1, 0] * R[1, 0])
    
    # Gimbal lock
    if sy >= 1e-6:
        roll = np.arctan2(R[2, 1], R[2, 2])
        pitch = np.arctan2(-R[2, 0], sy)
        yaw = np.arctan2(R[1, 0], R[0, 0])
    else:
        roll = np.arctan2(-R[1, 2], R[1, 1])
        pitch = np.arctan2(-R[2, 0], sy)
        yaw = 0.0
    
    return float(x), float(y), float(z), float(roll), float(pitch), float(yaw)
