"""
Camera Parameter Model
======================

This module holds CameraParams, the canonical in-memory description of a
monocular camera consumed by undistortion, rectification, projection and
pose-estimation code.

A CameraParams instance is filled by one of the calibration parsers:
    params = CameraParams()
    params.parse_yaml('cam0/sensor.yaml')

or, equivalently, through the pure parser functions:
    from camera_params.parsers import parse_yaml
    params = parse_yaml('cam0/sensor.yaml')

Derived fields (camera_matrix, calibration) are always rebuilt together
from intrinsics and distortion coefficients; there is no way to set them
independently. Rectification fields stay empty until an external stereo
rectification routine stores its results through set_rectification().
"""

import json
import numpy as np
from typing import List, Optional, Sequence, Tuple

from .distortion import DistortionModel, build_calibration
from .exceptions import FormatError
from .pose import Pose3
from .utils import pose_to_xyz_rpy

DEFAULT_TOLERANCE = 1e-9
NOT_POPULATED = "not yet populated"


def _matrices_equal(a: Optional[np.ndarray], b: Optional[np.ndarray]) -> bool:
    """Exact element-wise comparison; two unpopulated matrices are equal."""
    if a is None or b is None:
        return a is None and b is None
    return a.shape == b.shape and bool(np.array_equal(a, b))


def _copy_or_none(matrix: Optional[np.ndarray]) -> Optional[np.ndarray]:
    return None if matrix is None else np.array(matrix, copy=True)


class CameraParams:
    """
    Parameters describing a monocular camera.

    Attributes:
    - intrinsics: [fx, fy, cx, cy] in pixels
    - distortion_coefficients: 1x5 array [k1, k2, p1, p2, k3]
    - distortion_model: DistortionModel tag selecting the packed calibration layout
    - image_size: (width, height) in pixels
    - frame_interval: seconds per frame
    - body_pose_camera: Pose3 mapping camera frame into body frame
    - camera_matrix: 3x3 intrinsic matrix derived from intrinsics
    - calibration: packed calibration built from intrinsics and distortion
    - R_rectify, P, undist_rect_map_x, undist_rect_map_y: stereo rectification results
    """

    def __init__(self):
        """Create an empty, unpopulated camera description."""
        self.intrinsics: List[float] = []                            # [fx, fy, cx, cy]
        self.distortion_coefficients = np.zeros((1, 5), np.float64)  # [k1, k2, p1, p2, k3]
        self.distortion_model = DistortionModel.RADIAL_TANGENTIAL
        self.image_size: Tuple[int, int] = (0, 0)                    # (width, height)
        self.frame_interval = 0.0                                    # seconds per frame
        self.body_pose_camera = Pose3()

        # Derived from intrinsics / distortion
        self.camera_matrix = None
        self.calibration = None

        # Filled by stereo rectification only
        self.R_rectify = None
        self.P = None
        self.undist_rect_map_x = None
        self.undist_rect_map_y = None

    # Population

    def populate(self, intrinsics: Sequence[float], distortion_coefficients: Sequence[float],
                 image_size: Tuple[int, int], frame_interval: float, body_pose_camera: Pose3,
                 distortion_model: DistortionModel = DistortionModel.RADIAL_TANGENTIAL) -> None:
        """
        Set all calibration fields at once and rebuild the derived ones.

        Args:
            intrinsics: [fx, fy, cx, cy]
            distortion_coefficients: Up to 5 values [k1, k2, p1, p2, k3]; missing
                trailing slots are zero
            image_size: (width, height)
            frame_interval: Seconds per frame
            body_pose_camera: Camera pose in the body frame
            distortion_model: Distortion model tag

        Raises:
            FormatError: If intrinsics or distortion values have the wrong size.
                The instance is left unchanged in that case.
        """
        intrinsics = [float(v) for v in intrinsics]
        distortion = np.asarray(distortion_coefficients, dtype=np.float64).ravel()
        if distortion.size > 5:
            raise FormatError(f"At most 5 distortion coefficients are stored, got {distortion.size}")

        coefficients = np.zeros((1, 5), np.float64)
        coefficients[0, :distortion.size] = distortion

        # Raises before anything is assigned
        calibration = build_calibration(intrinsics, coefficients[0], distortion_model)

        self.intrinsics = intrinsics
        self.distortion_coefficients = coefficients
        self.distortion_model = distortion_model
        self.image_size = (int(image_size[0]), int(image_size[1]))
        self.frame_interval = float(frame_interval)
        self.body_pose_camera = Pose3(body_pose_camera.rotation, body_pose_camera.translation)
        self.camera_matrix = self._intrinsics_to_camera_matrix(intrinsics)
        self.calibration = calibration

    @staticmethod
    def _intrinsics_to_camera_matrix(intrinsics: Sequence[float]) -> np.ndarray:
        camera_matrix = np.eye(3, dtype=np.float64)
        camera_matrix[0, 0] = intrinsics[0]
        camera_matrix[1, 1] = intrinsics[1]
        camera_matrix[0, 2] = intrinsics[2]
        camera_matrix[1, 2] = intrinsics[3]
        return camera_matrix

    def parse_yaml(self, filepath: str, verbose: bool = False) -> None:
        """
        Fill this instance from a structured (OpenCV YAML) calibration document.

        The instance is only modified if parsing succeeds.
        """
        from .parsers.yaml_parser import YamlCameraParser

        self._assign_from(YamlCameraParser(verbose=verbose).parse(filepath))

    def parse_kitti_calib(self, filepath: str, R_cam_to_body, T_cam_to_body,
                          cam_id: str, verbose: bool = False) -> None:
        """
        Fill this instance from a KITTI-style calibration text file.

        The instance is only modified if parsing succeeds.
        """
        from .parsers.kitti_parser import KittiCameraParser

        parser = KittiCameraParser(verbose=verbose)
        self._assign_from(parser.parse(filepath, R_cam_to_body, T_cam_to_body, cam_id))

    def _assign_from(self, other: "CameraParams") -> None:
        self.intrinsics = list(other.intrinsics)
        self.distortion_coefficients = other.distortion_coefficients.copy()
        self.distortion_model = other.distortion_model
        self.image_size = tuple(other.image_size)
        self.frame_interval = other.frame_interval
        self.body_pose_camera = Pose3(other.body_pose_camera.rotation,
                                      other.body_pose_camera.translation)
        self.camera_matrix = _copy_or_none(other.camera_matrix)
        self.calibration = other.calibration
        self.R_rectify = _copy_or_none(other.R_rectify)
        self.P = _copy_or_none(other.P)
        self.undist_rect_map_x = _copy_or_none(other.undist_rect_map_x)
        self.undist_rect_map_y = _copy_or_none(other.undist_rect_map_y)

    def set_rectification(self, R_rectify: np.ndarray, P: np.ndarray,
                          undist_rect_map_x: Optional[np.ndarray] = None,
                          undist_rect_map_y: Optional[np.ndarray] = None) -> None:
        """
        Store stereo rectification results computed elsewhere.

        Args:
            R_rectify: 3x3 rectification rotation
            P: 3x4 projection matrix in the rectified frame
            undist_rect_map_x: Optional x remap table (e.g. from cv2.initUndistortRectifyMap)
            undist_rect_map_y: Optional y remap table
        """
        self.R_rectify = np.array(R_rectify, copy=True)
        self.P = np.array(P, copy=True)
        self.undist_rect_map_x = _copy_or_none(undist_rect_map_x)
        self.undist_rect_map_y = _copy_or_none(undist_rect_map_y)

    # Accessors

    def is_populated(self) -> bool:
        return len(self.intrinsics) == 4 and self.camera_matrix is not None

    def get_camera_matrix(self) -> Optional[np.ndarray]:
        return self.camera_matrix

    def get_distortion_coefficients(self) -> np.ndarray:
        return self.distortion_coefficients

    # Comparison and reporting

    def equals(self, other: "CameraParams", tol: float = DEFAULT_TOLERANCE) -> bool:
        """
        Compare two camera descriptions up to a tolerance.

        Intrinsics, frame interval, pose and packed calibration are compared
        with an absolute tolerance. Image size is compared exactly, and so are
        all matrix fields (camera matrix, distortion coefficients and the
        rectification matrices): callers needing fuzzy matrix equality must
        round beforehand.

        Args:
            other: Camera description to compare against
            tol: Absolute tolerance for the floating fields

        Returns:
            bool: True if the descriptions are equal
        """
        if len(self.intrinsics) != len(other.intrinsics):
            return False
        intrinsics_equal = all(abs(a - b) <= tol for a, b in zip(self.intrinsics, other.intrinsics))

        if (self.calibration is None) != (other.calibration is None):
            return False
        calibration_equal = (self.calibration is None or
                             self.calibration.equals(other.calibration, tol))

        return (intrinsics_equal and
                self.body_pose_camera.equals(other.body_pose_camera, tol) and
                abs(self.frame_interval - other.frame_interval) <= tol and
                self.image_size[0] == other.image_size[0] and
                self.image_size[1] == other.image_size[1] and
                calibration_equal and
                _matrices_equal(self.camera_matrix, other.camera_matrix) and
                _matrices_equal(self.distortion_coefficients, other.distortion_coefficients) and
                _matrices_equal(self.undist_rect_map_x, other.undist_rect_map_x) and
                _matrices_equal(self.undist_rect_map_y, other.undist_rect_map_y) and
                _matrices_equal(self.R_rectify, other.R_rectify) and
                _matrices_equal(self.P, other.P))

    def __str__(self) -> str:
        lines = ["------------ CameraParams ------------"]

        if self.intrinsics:
            lines.append("intrinsics: " + ", ".join(repr(float(v)) for v in self.intrinsics))
        else:
            lines.append(f"intrinsics: {NOT_POPULATED}")

        x, y, z, roll, pitch, yaw = pose_to_xyz_rpy(self.body_pose_camera)
        lines.append(f"body_pose_camera:\n{self.body_pose_camera}")
        lines.append(f"  xyz: ({x}, {y}, {z})  rpy [rad]: ({roll}, {pitch}, {yaw})")

        lines.append(f"calibration ({self.distortion_model.value}):")
        lines.append(str(self.calibration) if self.calibration is not None else NOT_POPULATED)

        lines.append(f"frame_interval: {self.frame_interval}")
        lines.append(f"image_size: width= {self.image_size[0]} height= {self.image_size[1]}")
        lines.append(f"camera_matrix:\n{self._format_matrix(self.camera_matrix)}")
        lines.append(f"distortion_coefficients:\n{self.distortion_coefficients}")
        lines.append(f"R_rectify:\n{self._format_matrix(self.R_rectify)}")
        lines.append(f"P:\n{self._format_matrix(self.P)}")

        # Remap tables are image sized
        for name in ('undist_rect_map_x', 'undist_rect_map_y'):
            table = getattr(self, name)
            if table is None:
                lines.append(f"{name}: {NOT_POPULATED}")
            else:
                lines.append(f"{name}: {table.shape} table, too large to display")

        return "\n".join(lines)

    @staticmethod
    def _format_matrix(matrix: Optional[np.ndarray]) -> str:
        return NOT_POPULATED if matrix is None else str(matrix)

    def print(self) -> None:
        """Print every field to stdout."""
        print(str(self))

    # Serialization

    def to_json(self) -> dict:
        """
        Serialize to a JSON-compatible dictionary.

        Derived fields (camera_matrix, calibration) are written for
        convenience but rebuilt from intrinsics/distortion when loading.

        Returns:
            dict: JSON-compatible dictionary
        """
        data = {
            'intrinsics': list(self.intrinsics),
            'distortion_coefficients': self.distortion_coefficients.ravel().tolist(),
            'distortion_model': self.distortion_model.value,
            'image_size': list(self.image_size),
            'frame_interval': self.frame_interval,
            'body_pose_camera': self.body_pose_camera.to_json(),
        }

        if self.camera_matrix is not None:
            data['camera_matrix'] = self.camera_matrix.tolist()
        if self.calibration is not None:
            data['calibration'] = self.calibration.to_json()

        # Save rectification results if present
        for name in ('R_rectify', 'P', 'undist_rect_map_x', 'undist_rect_map_y'):
            value = getattr(self, name)
            if value is not None:
                data[name] = value.tolist()

        return data

    @classmethod
    def from_json(cls, data: dict) -> "CameraParams":
        """
        Deserialize from a dictionary produced by to_json().

        Args:
            data: JSON-compatible dictionary

        Returns:
            CameraParams instance
        """
        params = cls()

        if data.get('intrinsics'):
            params.populate(
                intrinsics=data['intrinsics'],
                distortion_coefficients=data.get('distortion_coefficients', []),
                image_size=tuple(data.get('image_size', (0, 0))),
                frame_interval=data.get('frame_interval', 0.0),
                body_pose_camera=Pose3.from_json(data['body_pose_camera'])
                if 'body_pose_camera' in data else Pose3(),
                distortion_model=DistortionModel.from_name(
                    data.get('distortion_model', DistortionModel.RADIAL_TANGENTIAL.value)),
            )

        if 'R_rectify' in data and 'P' in data:
            maps = [np.array(data[name]) if name in data else None
                    for name in ('undist_rect_map_x', 'undist_rect_map_y')]
            params.set_rectification(np.array(data['R_rectify'], dtype=np.float64),
                                     np.array(data['P'], dtype=np.float64), *maps)

        return params

    def save_json(self, filepath: str) -> None:
        with open(filepath, 'w') as f:
            json.dump(self.to_json(), f, indent=4)

    @classmethod
    def load_json(cls, filepath: str) -> "CameraParams":
        with open(filepath, 'r') as f:
            return cls.from_json(json.load(f))
