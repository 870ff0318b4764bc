"""Unit tests for camera geometry and framing."""

import numpy as np
import pytest

from orrery.view.camera import (
    FOCUS_DIRECTION,
    Camera,
    CameraTransition,
    Viewport,
    ease_in_out,
    frame_all,
    frame_entity,
)


class TestEasing:
    """Tests for ease_in_out."""

    def test_endpoints_and_midpoint(self) -> None:
        """Test fixed points of the curve."""
        assert ease_in_out(0.0) == 0.0
        assert ease_in_out(0.5) == pytest.approx(0.5)
        assert ease_in_out(1.0) == 1.0

    def test_quadratic_halves(self) -> None:
        """Test both branches."""
        assert ease_in_out(0.25) == pytest.approx(0.125)
        assert ease_in_out(0.75) == pytest.approx(0.875)

    def test_clamped(self) -> None:
        """Test out-of-range input."""
        assert ease_in_out(-1.0) == 0.0
        assert ease_in_out(2.0) == 1.0


class TestFrameAll:
    """Tests for frame_all."""

    def test_three_points(self) -> None:
        """Test bounding-box centre and padded distance."""
        framing = frame_all([np.array([0, 0, 0]), np.array([10, 0, 0]), np.array([0, 10, 0])])
        assert framing is not None
        np.testing.assert_allclose(framing.target, [5.0, 5.0, 0.0])
        assert framing.distance == pytest.approx(15.0)
        np.testing.assert_allclose(framing.eye, [5.0 + 7.5, 5.0 + 7.5, 10.5])

    def test_single_point_uses_unit_extent(self) -> None:
        """Test the max(..., 1) floor."""
        framing = frame_all(np.array([[2.0, 3.0, 4.0]]))
        assert framing is not None
        np.testing.assert_allclose(framing.target, [2.0, 3.0, 4.0])
        assert framing.distance == pytest.approx(1.5)

    def test_empty_is_none(self) -> None:
        """Test no-op on an empty snapshot."""
        assert frame_all([]) is None
        assert frame_all(np.zeros((0, 3))) is None

    def test_custom_padding(self) -> None:
        """Test padding override."""
        framing = frame_all(np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 20.0]]), padding=2.0)
        assert framing.distance == pytest.approx(40.0)


class TestFrameEntity:
    """Tests for frame_entity and CameraTransition."""

    def test_end_pose(self) -> None:
        """Test target and eye at max(30, 0.6 * distance)."""
        transition = frame_entity(
            position=np.array([10.0, 0.0, 0.0]),
            current_target=np.zeros(3),
            current_eye=np.array([0.0, 0.0, 100.0]),
            now_ms=0.0,
            duration_ms=1000.0,
        )
        np.testing.assert_allclose(transition.end_target, [10.0, 0.0, 0.0])
        np.testing.assert_allclose(transition.end_eye, [10.0, 0.0, 0.0] + FOCUS_DIRECTION * 60.0)

    def test_minimum_distance(self) -> None:
        """Test the 30-unit floor when already close."""
        transition = frame_entity(np.zeros(3), np.zeros(3), np.array([0.0, 0.0, 10.0]), now_ms=0.0)
        assert np.linalg.norm(transition.end_eye - transition.end_target) == pytest.approx(30.0)

    def test_sampling(self) -> None:
        """Test interpolation along the eased curve."""
        transition = CameraTransition(
            start_target=np.zeros(3),
            start_eye=np.array([0.0, 0.0, 100.0]),
            end_target=np.array([10.0, 0.0, 0.0]),
            end_eye=np.array([10.0, 0.0, 50.0]),
            started_at=1000.0,
            duration_ms=1000.0,
        )
        target, eye = transition.sample(1000.0)
        np.testing.assert_allclose(target, [0.0, 0.0, 0.0])
        target, eye = transition.sample(1250.0)
        np.testing.assert_allclose(target, [1.25, 0.0, 0.0])
        target, eye = transition.sample(1500.0)
        np.testing.assert_allclose(eye, [5.0, 0.0, 75.0])
        target, eye = transition.sample(5000.0)
        np.testing.assert_allclose(target, [10.0, 0.0, 0.0])

        assert not transition.finished(1999.0)
        assert transition.finished(2000.0)

    def test_zero_duration_finishes_immediately(self) -> None:
        """Test degenerate duration."""
        transition = frame_entity(np.ones(3), np.zeros(3), np.array([0.0, 0.0, 50.0]), now_ms=0.0, duration_ms=0)
        assert transition.finished(0.0)
        target, _ = transition.sample(0.0)
        np.testing.assert_allclose(target, np.ones(3))


class TestCamera:
    """Tests for Camera and Viewport."""

    def test_ndc_round_trip(self) -> None:
        """Test pixel <-> NDC conversion at the centre and corner."""
        viewport = Viewport(width=800, height=600)
        assert viewport.to_ndc(400, 300) == (0.0, 0.0)
        assert viewport.to_ndc(0, 0) == (-1.0, 1.0)
        assert viewport.to_pixels(1.0, -1.0) == (800.0, 600.0)

    def test_center_ray_points_at_target(self) -> None:
        """Test the centre ray direction."""
        camera = Camera(position=np.array([0.0, 0.0, 50.0]), target=np.zeros(3))
        ray = camera.ray_from_ndc(0.0, 0.0)
        np.testing.assert_allclose(ray.direction, [0.0, 0.0, -1.0])
        np.testing.assert_allclose(ray.at(50.0), [0.0, 0.0, 0.0], atol=1e-9)

    def test_project_matches_ray(self) -> None:
        """Test that a projected point lies on the ray through its NDC."""
        camera = Camera(position=np.array([30.0, 20.0, 40.0]), target=np.array([1.0, 2.0, 3.0]), aspect=4 / 3)
        point = np.array([5.0, -3.0, 8.0])
        ndc = camera.project(point)
        assert ndc is not None
        ray = camera.ray_from_ndc(*ndc)
        to_point = point - ray.origin
        np.testing.assert_allclose(ray.direction, to_point / np.linalg.norm(to_point), atol=1e-9)

    def test_project_behind_is_none(self) -> None:
        """Test points behind the eye."""
        camera = Camera(position=np.array([0.0, 0.0, 50.0]), target=np.zeros(3))
        assert camera.project(np.array([0.0, 0.0, 100.0])) is None

    def test_pan_moves_eye_and_target(self) -> None:
        """Test translation keeps the view direction."""
        camera = Camera(position=np.array([0.0, 0.0, 50.0]), target=np.zeros(3))
        camera.pan(2.0, -2.0)
        np.testing.assert_allclose(camera.target, [2.0, -2.0, 0.0])
        np.testing.assert_allclose(camera.position, [2.0, -2.0, 50.0])

    def test_dolly_about_target(self) -> None:
        """Test zoom scales the eye-target distance."""
        camera = Camera(position=np.array([0.0, 0.0, 100.0]), target=np.array([0.0, 0.0, 20.0]))
        camera.dolly(0.5)
        assert camera.distance == pytest.approx(40.0)
        np.testing.assert_allclose(camera.target, [0.0, 0.0, 20.0])

    def test_basis_looking_straight_down(self) -> None:
        """Test the up-vector fallback."""
        camera = Camera(position=np.array([0.0, 50.0, 0.0]), target=np.zeros(3))
        forward, right, up = camera.basis()
        assert np.isfinite(right).all()
        assert np.linalg.norm(right) == pytest.approx(1.0)
        assert float(np.dot(forward, up)) == pytest.approx(0.0, abs=1e-9)
