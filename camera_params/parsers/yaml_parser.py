"""
Structured Calibration Document Parser
======================================

Reads per-camera calibration documents in the OpenCV FileStorage YAML
layout used by EuRoC-style datasets:

    %YAML:1.0
    camera_id: cam0
    T_BS:
      cols: 4
      rows: 4
      data: [0.0148655429818, -0.999880929698, 0.00414029679422, -0.0216401454975,
             0.999557249008, 0.0149672133247, 0.025715529948, -0.064676986768,
             -0.0257744366974, 0.00375618835797, 0.999660727178, 0.00981073058949,
             0.0, 0.0, 0.0, 1.0]
    rate_hz: 20
    resolution: [752, 480]
    camera_model: pinhole
    intrinsics: [458.654, 457.296, 367.215, 248.375]
    distortion_model: radial-tangential
    distortion_coefficients: [-0.28340811, 0.07395907, 0.00019359, 1.76187114e-05]

T_BS is the camera pose in the body (IMU) frame. The distortion_model tag is
not checked: the 4-parameter radial-tangential model is assumed.
"""

import math

import cv2
from typing import List

from ..camera_params import CameraParams
from ..distortion import DistortionModel
from ..exceptions import FormatError, SourceUnavailable
from ..utils import vec_to_pose
from .base import CalibrationParser


class YamlCameraParser(CalibrationParser):
    """Parser for OpenCV FileStorage YAML camera descriptions."""

    FORMAT_INFO = {
        'id': 'yaml',
        'name': 'Structured YAML calibration',
        'description': 'OpenCV FileStorage document with intrinsics, distortion, resolution, rate and T_BS',
        'extensions': ['.yaml', '.yml'],
    }

    def parse(self, filepath: str, **kwargs) -> CameraParams:
        """
        Parse a structured calibration document.

        Args:
            filepath: Path to the YAML document

        Returns:
            Fully populated CameraParams

        Raises:
            SourceUnavailable: If the document does not exist or cannot be opened
            FormatError: If a required field is missing or too short
            DimensionMismatch: If T_BS data does not match rows x cols
        """
        path = self.check_source(filepath)
        if path.stat().st_size == 0:
            raise FormatError(f"Calibration document is empty: {filepath}")

        try:
            fs = cv2.FileStorage(str(filepath), cv2.FILE_STORAGE_READ)
        except (cv2.error, SystemError) as e:
            # OpenCV reports some parse failures as SystemError from the binding
            raise FormatError(f"Malformed calibration document {filepath}: {e}") from e

        try:
            if not fs.isOpened():
                raise SourceUnavailable(f"Could not open calibration file: {filepath}")
            self.log(f"Parsing structured calibration: {filepath}")

            intrinsics = self._read_numbers(fs, 'intrinsics', 4)[:4]
            distortion = self._read_numbers(fs, 'distortion_coefficients', 4)[:4]
            resolution = self._read_numbers(fs, 'resolution', 2)

            rate = self._read_int(fs, 'rate_hz')
            if rate <= 0:
                raise FormatError(f"Field 'rate_hz' must be a positive integer, got {rate}")

            T_BS = fs.getNode('T_BS')
            if T_BS.empty() or T_BS.isNone() or not T_BS.isMap():
                raise FormatError("Missing required field 'T_BS' (map with rows, cols, data)")
            n_rows = self._read_int(T_BS, 'rows', parent='T_BS')
            n_cols = self._read_int(T_BS, 'cols', parent='T_BS')
            data = self._read_numbers(T_BS, 'data', 1, parent='T_BS')
        finally:
            fs.release()

        body_pose_camera = vec_to_pose(data, n_rows, n_cols)

        params = CameraParams()
        # 5th slot (k3) stays zero
        params.populate(
            intrinsics=intrinsics,
            distortion_coefficients=distortion,
            image_size=(int(resolution[0]), int(resolution[1])),
            frame_interval=1.0 / float(rate),
            body_pose_camera=body_pose_camera,
            distortion_model=DistortionModel.RADIAL_TANGENTIAL,
        )

        self.log(f"  intrinsics: {params.intrinsics}")
        self.log(f"  resolution: {params.image_size}, rate: {rate} Hz")
        return params

    @staticmethod
    def _qualified(key: str, parent: str) -> str:
        return f"{parent}.{key}" if parent else key

    def _read_numbers(self, node, key: str, min_count: int, parent: str = "") -> List[float]:
        """Read a sequence of numbers, raising FormatError if absent or too short."""
        name = self._qualified(key, parent)
        child = node.getNode(key)
        if child.empty() or child.isNone():
            raise FormatError(f"Missing required field '{name}'")
        if not child.isSeq():
            raise FormatError(f"Field '{name}' must be a sequence of numbers")

        values = []
        for i in range(child.size()):
            item = child.at(i)
            if not (item.isReal() or item.isInt()):
                raise FormatError(f"Field '{name}' has a non-numeric entry at index {i}")
            values.append(item.real())

        self.require_count(values, min_count, name)
        return values

    def _read_scalar(self, node, key: str, parent: str = "") -> float:
        name = self._qualified(key, parent)
        child = node.getNode(key)
        if child.empty() or child.isNone():
            raise FormatError(f"Missing required field '{name}'")
        if not (child.isReal() or child.isInt()):
            raise FormatError(f"Field '{name}' must be a number")
        return child.real()

    def _read_int(self, node, key: str, parent: str = "") -> int:
        """Read a scalar that must hold a whole number (e.g. 20 or 20.0)."""
        value = self._read_scalar(node, key, parent)
        if not math.isfinite(value) or not float(value).is_integer():
            raise FormatError(
                f"Field '{self._qualified(key, parent)}' must be an integer, got {value}"
            )
        return int(value)
