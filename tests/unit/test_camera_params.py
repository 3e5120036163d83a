"""
Unit tests for the CameraParams model.

Covers population and derived fields, tolerance-based equality,
the printed report, rectification storage and JSON serialization.
"""
import copy
import re

import pytest
import numpy as np

from camera_params import CameraParams, FormatError, Pose3, rpy_to_matrix


class TestCameraParamsInitialization:

    @pytest.mark.unit
    def test_empty_model(self):
        params = CameraParams()

        assert params.intrinsics == []
        assert params.image_size == (0, 0)
        assert params.frame_interval == 0.0
        assert params.camera_matrix is None
        assert params.calibration is None
        assert params.R_rectify is None
        assert params.P is None
        assert params.undist_rect_map_x is None
        assert params.undist_rect_map_y is None
        assert params.distortion_coefficients.shape == (1, 5)
        assert not params.is_populated()


class TestPopulate:

    @pytest.mark.unit
    def test_camera_matrix_layout(self, sample_camera_params):
        """Intrinsics land on (0,0), (1,1), (0,2), (1,2); the rest is identity."""
        K = sample_camera_params.get_camera_matrix()
        fx, fy, cx, cy = sample_camera_params.intrinsics

        expected = np.array([[fx, 0.0, cx],
                             [0.0, fy, cy],
                             [0.0, 0.0, 1.0]])
        np.testing.assert_array_equal(K, expected)
        assert sample_camera_params.is_populated()

    @pytest.mark.unit
    def test_short_distortion_padded(self, sample_camera_params):
        coefficients = sample_camera_params.get_distortion_coefficients()

        assert coefficients.shape == (1, 5)
        assert coefficients[0, 4] == 0.0
        assert coefficients[0, 0] == pytest.approx(-0.28340811)

    @pytest.mark.unit
    def test_calibration_consistent_with_intrinsics(self, sample_camera_params):
        calibration = sample_camera_params.calibration

        np.testing.assert_array_equal(calibration.K(), sample_camera_params.camera_matrix)
        np.testing.assert_array_equal(calibration.distortion(),
                                      sample_camera_params.distortion_coefficients[0, :4])

    @pytest.mark.unit
    def test_failed_populate_leaves_instance_unchanged(self, sample_camera_params):
        before = copy.deepcopy(sample_camera_params)

        with pytest.raises(FormatError):
            sample_camera_params.populate([1.0, 2.0, 3.0], [0.0] * 4, (10, 10), 0.1, Pose3())

        assert sample_camera_params.equals(before, 0.0)

    @pytest.mark.unit
    def test_too_many_distortion_values(self):
        with pytest.raises(FormatError, match="At most 5"):
            CameraParams().populate([1.0, 1.0, 0.0, 0.0], [0.0] * 6, (1, 1), 0.1, Pose3())


class TestEquals:

    @pytest.mark.unit
    @pytest.mark.parametrize("tol", [0.0, 1e-12, 1e-3, 10.0])
    def test_reflexive(self, sample_camera_params, tol):
        assert sample_camera_params.equals(sample_camera_params, tol)

    @pytest.mark.unit
    def test_empty_models_equal(self):
        assert CameraParams().equals(CameraParams(), 0.0)

    @pytest.mark.unit
    def test_populated_and_empty_differ(self, sample_camera_params):
        assert not sample_camera_params.equals(CameraParams(), 1e9)
        assert not CameraParams().equals(sample_camera_params, 1e9)

    @pytest.mark.unit
    def test_frame_interval_tolerance(self, sample_camera_params):
        tol = 1e-6
        other = copy.deepcopy(sample_camera_params)

        other.frame_interval += tol / 2
        assert sample_camera_params.equals(other, tol)
        assert other.equals(sample_camera_params, tol)

        other.frame_interval = sample_camera_params.frame_interval + 2 * tol
        assert not sample_camera_params.equals(other, tol)

    @pytest.mark.unit
    def test_image_size_exact(self, sample_camera_params):
        other = copy.deepcopy(sample_camera_params)
        other.image_size = (752, 481)

        assert not sample_camera_params.equals(other, 100.0)

    @pytest.mark.unit
    def test_pose_tolerance(self, sample_camera_params):
        other = copy.deepcopy(sample_camera_params)
        other.body_pose_camera = Pose3(np.eye(3), [0.1, -0.2, 0.3 + 1e-7])

        assert sample_camera_params.equals(other, 1e-6)
        assert not sample_camera_params.equals(other, 1e-8)

    @pytest.mark.unit
    def test_intrinsics_change_changes_camera_matrix(self, sample_camera_params):
        """Derived matrices are compared exactly, so any intrinsics change is visible."""
        other = CameraParams()
        intrinsics = list(sample_camera_params.intrinsics)
        intrinsics[0] += 1e-9
        other.populate(intrinsics, sample_camera_params.distortion_coefficients,
                       sample_camera_params.image_size, sample_camera_params.frame_interval,
                       sample_camera_params.body_pose_camera)

        assert not sample_camera_params.equals(other, 1e-6)

    @pytest.mark.unit
    @pytest.mark.parametrize("factor", [2.0, 0.5])
    def test_distortion_matrix_compared_exactly(self, sample_camera_params, factor):
        """distortion_coefficients is a matrix field: k3 differences never pass."""
        tol = 1e-6
        other = copy.deepcopy(sample_camera_params)
        other.distortion_coefficients[0, 4] += factor * tol

        assert not sample_camera_params.equals(other, tol)

    @pytest.mark.unit
    def test_rectification_fields_compared(self, sample_camera_params):
        other = copy.deepcopy(sample_camera_params)
        other.set_rectification(np.eye(3), np.hstack([np.eye(3), np.zeros((3, 1))]))

        assert not sample_camera_params.equals(other, 1.0)

        sample_camera_params.set_rectification(np.eye(3), np.hstack([np.eye(3), np.zeros((3, 1))]))
        assert sample_camera_params.equals(other, 0.0)


class TestRectification:

    @pytest.mark.unit
    def test_set_rectification_copies(self, sample_camera_params):
        R = np.eye(3)
        P = np.arange(12, dtype=np.float64).reshape(3, 4)
        map_x = np.zeros((480, 752), dtype=np.float32)

        sample_camera_params.set_rectification(R, P, map_x, map_x)
        R[0, 0] = 5.0

        assert sample_camera_params.R_rectify[0, 0] == 1.0
        np.testing.assert_array_equal(sample_camera_params.P, P)
        assert sample_camera_params.undist_rect_map_y.shape == (480, 752)


class TestPrint:

    @pytest.mark.unit
    def test_report_mentions_every_field(self, sample_camera_params):
        report = str(sample_camera_params)

        for name in ('intrinsics', 'body_pose_camera', 'calibration', 'frame_interval',
                     'image_size', 'camera_matrix', 'distortion_coefficients',
                     'R_rectify', 'P:', 'undist_rect_map_x', 'undist_rect_map_y'):
            assert name in report
        assert "width= 752 height= 480" in report

    @pytest.mark.unit
    def test_unpopulated_rectification_annotated(self, sample_camera_params):
        report = str(sample_camera_params)

        assert "R_rectify:\nnot yet populated" in report
        assert "undist_rect_map_x: not yet populated" in report

    @pytest.mark.unit
    def test_report_is_deterministic(self, sample_camera_params):
        assert str(sample_camera_params) == str(copy.deepcopy(sample_camera_params))

    @pytest.mark.unit
    def test_printed_intrinsics_reproduce_camera_matrix(self, sample_camera_params):
        report = str(sample_camera_params)
        line = re.search(r"^intrinsics: (.*)$", report, re.MULTILINE).group(1)
        fx, fy, cx, cy = (float(v) for v in line.split(','))

        K = np.eye(3)
        K[0, 0], K[1, 1], K[0, 2], K[1, 2] = fx, fy, cx, cy
        np.testing.assert_array_equal(K, sample_camera_params.camera_matrix)

    @pytest.mark.unit
    def test_print_writes_to_stdout(self, sample_camera_params, capsys):
        sample_camera_params.print()

        captured = capsys.readouterr()
        assert captured.out.strip() == str(sample_camera_params)

    @pytest.mark.unit
    def test_empty_model_report(self):
        report = str(CameraParams())

        assert "intrinsics: not yet populated" in report
        assert "camera_matrix:\nnot yet populated" in report


class TestSerialization:

    @pytest.mark.unit
    def test_json_round_trip(self, sample_camera_params):
        restored = CameraParams.from_json(sample_camera_params.to_json())

        assert restored.equals(sample_camera_params, 0.0)

    @pytest.mark.unit
    def test_json_round_trip_with_rectification(self, sample_camera_params):
        sample_camera_params.set_rectification(
            rpy_to_matrix([0.01, 0.02, 0.03]),
            np.hstack([np.eye(3) * 400.0, np.zeros((3, 1))]),
            np.full((4, 6), 1.5, dtype=np.float32),
            np.full((4, 6), 2.5, dtype=np.float32),
        )

        restored = CameraParams.from_json(sample_camera_params.to_json())

        assert restored.equals(sample_camera_params, 0.0)

    @pytest.mark.unit
    def test_derived_fields_rebuilt_from_intrinsics(self, sample_camera_params):
        data = sample_camera_params.to_json()
        data['camera_matrix'] = [[0.0] * 3] * 3

        restored = CameraParams.from_json(data)

        np.testing.assert_array_equal(restored.camera_matrix, sample_camera_params.camera_matrix)

    @pytest.mark.unit
    def test_save_and_load(self, sample_camera_params, tmp_path):
        path = tmp_path / "cam.json"

        sample_camera_params.save_json(str(path))
        restored = CameraParams.load_json(str(path))

        assert restored.equals(sample_camera_params, 0.0)

    @pytest.mark.unit
    def test_empty_model_round_trip(self):
        restored = CameraParams.from_json(CameraParams().to_json())

        assert not restored.is_populated()
        assert restored.equals(CameraParams(), 0.0)
