#!/usr/bin/env python3
"""
Camera Parameters Toolkit - Main Entry Point
============================================

Command-line interface that loads a camera calibration file, prints the
resulting camera description and optionally saves it as JSON.
"""

import argparse
import os
import sys

import numpy as np

# Add the toolkit to the Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from camera_params import CalibrationError, rpy_to_matrix
from camera_params.parsers import get_parser_manager, load_camera_params


def main(argv=None):
    parser = argparse.ArgumentParser(description="Camera Parameters Toolkit")

    parser.add_argument("--format", choices=get_parser_manager().get_available_formats(),
                        default='yaml', help="Calibration file format")
    parser.add_argument("--calib_file", required=True, help="Path to the calibration file")
    parser.add_argument("--cam_id", default='00', help="Camera id (kitti format only)")
    rotation = parser.add_mutually_exclusive_group()
    rotation.add_argument("--R_cam_to_body", type=float, nargs=9, default=None,
                          help="Row-major camera-to-body rotation (kitti format only, default identity)")
    rotation.add_argument("--rpy_cam_to_body", type=float, nargs=3, default=None,
                          help="Camera-to-body rotation as roll pitch yaw in radians (kitti format only)")
    parser.add_argument("--T_cam_to_body", type=float, nargs=3, default=None,
                        help="Camera-to-body translation (kitti format only, default zero)")
    parser.add_argument("--output", help="Optional path of a JSON file to write the parameters to")
    parser.add_argument("--verbose", action="store_true", help="Print parsing progress")

    args = parser.parse_args(argv)

    kwargs = {}
    if args.format == 'kitti':
        kwargs['cam_id'] = args.cam_id
        if args.R_cam_to_body is not None:
            kwargs['R_cam_to_body'] = np.array(args.R_cam_to_body).reshape(3, 3)
        elif args.rpy_cam_to_body is not None:
            kwargs['R_cam_to_body'] = rpy_to_matrix(args.rpy_cam_to_body)
        if args.T_cam_to_body is not None:
            kwargs['T_cam_to_body'] = np.array(args.T_cam_to_body)

    try:
        params = load_camera_params(args.format, args.calib_file, verbose=args.verbose, **kwargs)
    except CalibrationError as e:
        print(f"Error: {e}")
        return 1

    params.print()

    if args.output:
        output_dir = os.path.dirname(args.output)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        params.save_json(args.output)
        print(f"Camera parameters saved to: {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
