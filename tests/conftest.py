"""
pytest configuration file for camera parameters toolkit
"""
import pytest
import sys
import numpy as np
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from camera_params import CameraParams, Pose3

# Test configuration
pytest_plugins = []

EUROC_CAM0_YAML = """%YAML:1.0
# General sensor definitions.
sensor_type: camera
comment: VI-Sensor cam0 (MT9M034)

# Sensor extrinsics wrt. the body-frame.
T_BS:
  cols: 4
  rows: 4
  data: [0.0148655429818, -0.999880929698, 0.00414029679422, -0.0216401454975,
         0.999557249008, 0.0149672133247, 0.025715529948, -0.064676986768,
        -0.0257744366974, 0.00375618835797, 0.999660727178, 0.00981073058949,
         0.0, 0.0, 0.0, 1.0]

# Camera specific definitions.
rate_hz: 20
resolution: [752, 480]
camera_model: pinhole
intrinsics: [458.654, 457.296, 367.215, 248.375]
distortion_model: radial-tangential
distortion_coefficients: [-0.28340811, 0.07395907, 0.00019359, 1.76187114e-05]
"""

KITTI_CALIB_TXT = """calib_time: 09-Jan-2012 13:57:47
corner_dist: 9.950000e-02
S_00: 1.392000e+03 5.120000e+02
K_00: 9.842439e+02 0.000000e+00 6.900000e+02 0.000000e+00 9.808141e+02 2.331966e+02 0.000000e+00 0.000000e+00 1.000000e+00
D_00: -3.728755e-01 2.037299e-01 2.219027e-03 1.383707e-03 -7.233722e-02
R_00: 1.000000e+00 0.000000e+00 0.000000e+00 0.000000e+00 1.000000e+00 0.000000e+00 0.000000e+00 0.000000e+00 1.000000e+00
T_00: 0.000000e+00 0.000000e+00 0.000000e+00
S_rect_00: 1.242000e+03 3.750000e+02
S_01: 1.392000e+03 5.120000e+02
K_01: 9.895267e+02 0.000000e+00 7.020000e+02 0.000000e+00 9.878386e+02 2.455590e+02 0.000000e+00 0.000000e+00 1.000000e+00
D_01: -3.644661e-01 1.790019e-01 1.148107e-03 -6.298563e-04 -5.314062e-02
R_01: 0.000000e+00 -1.000000e+00 0.000000e+00 1.000000e+00 0.000000e+00 0.000000e+00 0.000000e+00 0.000000e+00 1.000000e+00
T_01: -5.370000e-01 4.822061e-03 -1.252488e-02
"""


@pytest.fixture(scope="session")
def project_root_dir():
    """Get the project root directory."""
    return Path(__file__).parent.parent

@pytest.fixture(scope="session")
def sample_data_dir(project_root_dir):
    """Get the sample data directory."""
    return project_root_dir / "sample_data"

@pytest.fixture
def write_calib_file(tmp_path):
    """Write calibration document text into a temporary file and return its path."""
    def _write(content, name="calib.yaml"):
        path = tmp_path / name
        path.write_text(content)
        return str(path)
    return _write

@pytest.fixture
def euroc_yaml_content():
    return EUROC_CAM0_YAML

@pytest.fixture
def euroc_yaml_file(write_calib_file):
    return write_calib_file(EUROC_CAM0_YAML, "sensor.yaml")

@pytest.fixture
def kitti_calib_content():
    return KITTI_CALIB_TXT

@pytest.fixture
def kitti_calib_file(write_calib_file):
    return write_calib_file(KITTI_CALIB_TXT, "calib_cam_to_cam.txt")

@pytest.fixture
def sample_camera_params():
    """A populated camera description built without any file."""
    params = CameraParams()
    params.populate(
        intrinsics=[458.654, 457.296, 367.215, 248.375],
        distortion_coefficients=[-0.28340811, 0.07395907, 0.00019359, 1.76187114e-05],
        image_size=(752, 480),
        frame_interval=0.05,
        body_pose_camera=Pose3(np.eye(3), [0.1, -0.2, 0.3]),
    )
    return params

# Test markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
