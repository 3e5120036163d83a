"""
Calibration Source Parsers
==========================

One parser per calibration source format, all returning a fully populated
CameraParams or raising a CalibrationError.

Usage:
    from camera_params.parsers import parse_yaml, parse_kitti_calib

    cam0 = parse_yaml('mav0/cam0/sensor.yaml')
    cam2 = parse_kitti_calib('calib_cam_to_cam.txt', R_cam_to_imu, T_cam_to_imu, '02')

    # Or select the format by id
    params = load_camera_params('yaml', 'mav0/cam0/sensor.yaml')
"""

from .base import CalibrationParser
from .kitti_parser import KittiCameraParser, KITTI_FRAME_RATE_HZ
from .manager import CalibrationParserManager, get_parser_manager
from .yaml_parser import YamlCameraParser


def parse_yaml(filepath, verbose=False):
    """Parse a structured (OpenCV YAML) calibration document into a new CameraParams."""
    return YamlCameraParser(verbose=verbose).parse(filepath)


def parse_kitti_calib(filepath, R_cam_to_body, T_cam_to_body, cam_id, verbose=False):
    """Parse one camera of a KITTI calibration text file into a new CameraParams."""
    return KittiCameraParser(verbose=verbose).parse(
        filepath, R_cam_to_body=R_cam_to_body, T_cam_to_body=T_cam_to_body, cam_id=cam_id)


def load_camera_params(format_id, filepath, verbose=False, **kwargs):
    """
    Parse a calibration document using the parser registered for format_id.

    Args:
        format_id: Registered format id ('yaml' or 'kitti')
        filepath: Path to the calibration document
        verbose: Whether to print parsing progress
        **kwargs: Format-specific arguments (R_cam_to_body, T_cam_to_body, cam_id for 'kitti')

    Returns:
        CameraParams instance
    """
    parser = get_parser_manager().create_parser(format_id, verbose=verbose)
    return parser.parse(filepath, **kwargs)


__all__ = [
    'CalibrationParser',
    'YamlCameraParser',
    'KittiCameraParser',
    'KITTI_FRAME_RATE_HZ',
    'CalibrationParserManager',
    'get_parser_manager',
    'parse_yaml',
    'parse_kitti_calib',
    'load_camera_params',
]
