"""
KITTI Calibration Text Parser
=============================

Reads the line-oriented calibration dump distributed with KITTI
(calib_cam_to_cam.txt). Each line is a label followed by numbers:

    calib_time: 09-Jan-2012 13:57:47
    S_00: 1.392000e+03 5.120000e+02
    K_00: 9.842439e+02 0.000000e+00 6.900000e+02 0.000000e+00 9.808141e+02 2.331966e+02 0.000000e+00 0.000000e+00 1.000000e+00
    D_00: -3.728755e-01 2.037299e-01 2.219027e-03 1.383707e-03 -7.233722e-02
    R_00: 1.000000e+00 0.000000e+00 0.000000e+00 0.000000e+00 1.000000e+00 0.000000e+00 0.000000e+00 0.000000e+00 1.000000e+00
    T_00: 2.573699e-16 -1.059758e-16 1.614870e-16
    S_rect_00: 1.242000e+03 3.750000e+02
    ...

Only the S_, K_, D_, R_ and T_ lines of the requested camera id are used.
R_/T_ give the camera pose relative to the reference camera; the pose in
the body frame is obtained by composing it with the externally supplied
camera-hardware-to-body rotation and translation.

The frame rate is not stored in the file; KITTI records at about 10 Hz.
"""

import numpy as np
from typing import Dict, List

from ..camera_params import CameraParams
from ..distortion import DistortionModel
from ..exceptions import DimensionMismatch, FormatError, SourceUnavailable
from ..utils import cvmats_to_pose
from .base import CalibrationParser

KITTI_FRAME_RATE_HZ = 10

# label prefix -> number of values required
LABEL_FIELD_COUNTS = {
    'S': 2,
    'K': 9,
    'D': 5,
    'R': 9,
    'T': 3,
}


class KittiCameraParser(CalibrationParser):
    """Parser for KITTI calib_cam_to_cam.txt style files."""

    FORMAT_INFO = {
        'id': 'kitti',
        'name': 'KITTI calibration text',
        'description': 'Line-oriented S_/K_/D_/R_/T_ entries keyed by camera id',
        'extensions': ['.txt'],
    }

    def parse(self, filepath: str, R_cam_to_body=None, T_cam_to_body=None,
              cam_id: str = '00', **kwargs) -> CameraParams:
        """
        Parse the entries of one camera from a KITTI calibration file.

        Args:
            filepath: Path to the calibration text file
            R_cam_to_body: 3x3 rotation from camera hardware frame to body frame
                (identity if None)
            T_cam_to_body: 3-element translation from camera hardware frame to body
                frame (zero if None)
            cam_id: Camera identifier, e.g. '00' selects S_00, K_00, ...

        Returns:
            Fully populated CameraParams

        Raises:
            SourceUnavailable: If the file cannot be opened
            FormatError: If an entry of the camera is short, non-numeric or missing
            DimensionMismatch: If R_cam_to_body / T_cam_to_body have the wrong shape
        """
        R_ext = np.eye(3) if R_cam_to_body is None else np.asarray(R_cam_to_body, dtype=np.float64)
        T_ext = np.zeros(3) if T_cam_to_body is None else np.asarray(T_cam_to_body, dtype=np.float64)
        if R_ext.shape != (3, 3):
            raise DimensionMismatch(f"R_cam_to_body must be 3x3, got shape {R_ext.shape}")
        if T_ext.size != 3:
            raise DimensionMismatch(f"T_cam_to_body must have 3 elements, got {T_ext.size}")

        self.check_source(filepath)
        entries = self._read_entries(filepath, str(cam_id))

        missing = [f"{prefix}_{cam_id}:" for prefix in LABEL_FIELD_COUNTS if prefix not in entries]
        if missing:
            raise FormatError(f"Camera '{cam_id}' entries missing in {filepath}: {', '.join(missing)}")

        S, K, D = entries['S'], entries['K'], entries['D']
        R_local = np.array(entries['R'][:9], dtype=np.float64).reshape(3, 3)
        T_local = np.array(entries['T'][:3], dtype=np.float64)

        # Cam pose wrt to body
        R = R_ext @ R_local
        T = T_ext.reshape(3) + T_local

        params = CameraParams()
        # Only k1, k2, p1, p2 are packed; k3 is kept in distortion_coefficients
        params.populate(
            intrinsics=[K[0], K[4], K[2], K[5]],
            distortion_coefficients=D[:5],
            image_size=(int(round(S[0])), int(round(S[1]))),
            frame_interval=1.0 / KITTI_FRAME_RATE_HZ,
            body_pose_camera=cvmats_to_pose(R, T),
            distortion_model=DistortionModel.RADIAL_TANGENTIAL,
        )
        return params

    def _read_entries(self, filepath: str, cam_id: str) -> Dict[str, List[float]]:
        """
        Scan the file and collect the numeric values of this camera's labels.

        Returns:
            Dictionary mapping label prefix ('S', 'K', ...) to its values
        """
        labels = {f"{prefix}_{cam_id}:": prefix for prefix in LABEL_FIELD_COUNTS}
        entries: Dict[str, List[float]] = {}

        try:
            f = open(filepath, 'r', encoding='utf-8')
        except OSError as e:
            raise SourceUnavailable(f"Could not open calibration file: {filepath}") from e

        line_num = 0
        with f:
            try:
                for line_num, line in enumerate(f, 1):
                    self._read_line(line, line_num, labels, entries, filepath)
            except UnicodeDecodeError as e:
                raise FormatError(
                    f"Calibration file {filepath} is not UTF-8 text (after line {line_num}): {e}"
                ) from e

        return entries

    def _read_line(self, line: str, line_num: int, labels: Dict[str, str],
                   entries: Dict[str, List[float]], filepath: str) -> None:
        parts = line.split()
        if not parts:
            return

        label = parts[0]
        self.log(f"label: {label}")
        if label not in labels:
            return

        prefix = labels[label]
        try:
            values = [float(token) for token in parts[1:]]
        except ValueError as e:
            raise FormatError(
                f"Non-numeric value in '{label}' on line {line_num} of {filepath}: {e}"
            ) from e

        self.require_count(values, LABEL_FIELD_COUNTS[prefix], label, f"line {line_num}")
        entries[prefix] = values
