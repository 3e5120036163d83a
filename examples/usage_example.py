"""
Example: Loading Camera Parameters
==================================

This example loads the sample EuRoC-style YAML document and the sample
KITTI calibration file, prints both camera descriptions, compares them
and stores one as JSON.
"""

import sys
import os
import tempfile
import numpy as np

# Add the toolkit to the Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from camera_params import CameraParams, FormatError, rpy_to_matrix
from camera_params.parsers import parse_yaml, parse_kitti_calib

SAMPLE_DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'sample_data')


def example_yaml_calibration():
    """Example of loading a structured YAML calibration document."""
    print("=== Structured YAML Calibration Example ===")

    cam0 = parse_yaml(os.path.join(SAMPLE_DATA_DIR, 'euroc_cam0.yaml'), verbose=True)
    cam0.print()

    print(f"Camera matrix:\n{cam0.get_camera_matrix()}")
    print(f"Frame interval: {cam0.frame_interval} s")
    return cam0


def example_kitti_calibration():
    """Example of loading one camera from a KITTI calibration file."""
    print("\n=== KITTI Calibration Example ===")

    # Camera hardware frame to body frame: x-forward body, z-forward camera
    R_cam_to_body = rpy_to_matrix([-np.pi / 2, 0.0, -np.pi / 2])
    T_cam_to_body = np.array([0.27, 0.0, -0.08])

    cam01 = CameraParams()
    cam01.parse_kitti_calib(os.path.join(SAMPLE_DATA_DIR, 'kitti_calib_cam_to_cam.txt'),
                            R_cam_to_body, T_cam_to_body, '01')
    cam01.print()

    # k3 is stored but not part of the packed calibration
    print(f"Stored k3: {cam01.distortion_coefficients[0, 4]}")
    print(f"Packed calibration: {cam01.calibration.vector()}")
    return cam01


def example_comparison_and_json(cam0, cam01):
    """Example of comparing camera descriptions and JSON round trips."""
    print("\n=== Comparison and Serialization Example ===")

    print(f"cam0 equals itself: {cam0.equals(cam0, tol=1e-9)}")
    print(f"cam0 equals KITTI cam01: {cam0.equals(cam01, tol=1e-9)}")

    with tempfile.TemporaryDirectory() as tmp_dir:
        json_path = os.path.join(tmp_dir, 'cam0.json')
        cam0.save_json(json_path)
        restored = CameraParams.load_json(json_path)
        print(f"JSON round trip preserved parameters: {restored.equals(cam0, tol=1e-12)}")


def example_error_handling():
    """Example of the errors raised for malformed calibration files."""
    print("\n=== Error Handling Example ===")

    with tempfile.TemporaryDirectory() as tmp_dir:
        bad_path = os.path.join(tmp_dir, 'short_k.txt')
        with open(bad_path, 'w') as f:
            f.write("K_00: 1.0 0.0 320.0\n")

        try:
            parse_kitti_calib(bad_path, np.eye(3), np.zeros(3), '00')
        except FormatError as e:
            print(f"Rejected malformed file: {e}")


if __name__ == "__main__":
    print("Camera Parameters Toolkit - Usage Examples")
    print("=" * 50)

    cam0 = example_yaml_calibration()
    cam01 = example_kitti_calibration()
    example_comparison_and_json(cam0, cam01)
    example_error_handling()

    print("\n" + "=" * 50)
    print("Examples completed!")
