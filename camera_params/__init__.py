"""
Camera Parameters Toolkit - Core Module
=======================================

This module loads camera calibration from file-based calibration sources
into one canonical camera description:
- Structured OpenCV YAML documents (EuRoC-style sensor.yaml)
- KITTI-style line-oriented calibration text files
- Tolerance-based comparison and printable reports of camera descriptions

Downstream undistortion, rectification, projection and pose-estimation
code only ever sees CameraParams, whatever the source format was.
"""

from .camera_params import CameraParams, DEFAULT_TOLERANCE
from .distortion import DistortionModel, PinholeRadTanCalibration, build_calibration
from .exceptions import CalibrationError, SourceUnavailable, FormatError, DimensionMismatch
from .pose import Pose3
from .utils import (
    vec_to_pose,
    cvmats_to_pose,
    rpy_to_matrix,
    pose_to_xyz_rpy
)
from .parsers import parse_yaml, parse_kitti_calib, load_camera_params

__all__ = [
    'CameraParams',
    'DEFAULT_TOLERANCE',
    'DistortionModel',
    'PinholeRadTanCalibration',
    'build_calibration',
    'CalibrationError',
    'SourceUnavailable',
    'FormatError',
    'DimensionMismatch',
    'Pose3',
    'vec_to_pose',
    'cvmats_to_pose',
    'rpy_to_matrix',
    'pose_to_xyz_rpy',
    'parse_yaml',
    'parse_kitti_calib',
    'load_camera_params'
]
