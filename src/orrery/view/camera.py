"""Perspective camera model, framing geometry and animated transitions."""

import math
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import numpy as np

from orrery.config import settings

# Fixed oblique viewing directions
FRAME_ALL_DIRECTION = np.array([0.5, 0.5, 0.7])
FOCUS_DIRECTION = np.array([0.5, 0.5, 1.0]) / np.linalg.norm([0.5, 0.5, 1.0])

WORLD_UP = np.array([0.0, 1.0, 0.0])


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


def ease_in_out(t: float) -> float:
    """Quadratic ease-in-ease-out on [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    if t < 0.5:
        return 2 * t * t
    return 1 - ((-2 * t + 2) ** 2) / 2


def _normalize(v: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(v))
    return v / norm if norm > 0 else v


@dataclass
class Ray:
    """Half-line origin + t * direction, t >= 0 (direction is unit length)."""

    origin: np.ndarray
    direction: np.ndarray

    def at(self, t: float) -> np.ndarray:
        return self.origin + t * self.direction


@dataclass
class Viewport:
    """Screen rectangle the scene is drawn into, in pixels."""

    width: float
    height: float
    left: float = 0.0
    top: float = 0.0

    @property
    def aspect(self) -> float:
        return self.width / self.height if self.height else 1.0

    def to_ndc(self, x: float, y: float) -> tuple[float, float]:
        """Pixel coordinates -> normalized device coordinates (y up)."""
        if self.width <= 0 or self.height <= 0:
            return 0.0, 0.0
        return (
            ((x - self.left) / self.width) * 2 - 1,
            -((y - self.top) / self.height) * 2 + 1,
        )

    def to_pixels(self, ndc_x: float, ndc_y: float) -> tuple[float, float]:
        """Normalized device coordinates -> pixel coordinates."""
        return (
            self.left + (ndc_x + 1) / 2 * self.width,
            self.top + (1 - ndc_y) / 2 * self.height,
        )


@dataclass
class Camera:
    """Perspective camera looking from ``position`` at ``target``."""

    position: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 100.0]))
    target: np.ndarray = field(default_factory=lambda: np.zeros(3))
    fov: float = field(default_factory=lambda: settings.camera_fov)  # vertical, degrees
    aspect: float = 1.0
    near: float = field(default_factory=lambda: settings.camera_near)
    far: float = field(default_factory=lambda: settings.camera_far)

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=np.float64).copy()
        self.target = np.asarray(self.target, dtype=np.float64).copy()

    @property
    def distance(self) -> float:
        """Distance from eye to target."""
        return float(np.linalg.norm(self.position - self.target))

    def set_pose(self, target: np.ndarray, eye: np.ndarray) -> None:
        self.target = np.asarray(target, dtype=np.float64).copy()
        self.position = np.asarray(eye, dtype=np.float64).copy()

    def basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return (forward, right, up) unit vectors."""
        forward = _normalize(self.target - self.position)
        if not forward.any():
            forward = np.array([0.0, 0.0, -1.0])
        world_up = WORLD_UP
        if abs(float(np.dot(forward, world_up))) > 0.999:
            world_up = np.array([0.0, 0.0, 1.0])
        right = _normalize(np.cross(forward, world_up))
        up = np.cross(right, forward)
        return forward, right, up

    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> Ray:
        """Ray from the eye through a point in normalized device coordinates."""
        forward, right, up = self.basis()
        half_height = math.tan(math.radians(self.fov) / 2)
        half_width = half_height * self.aspect
        direction = forward + ndc_x * half_width * right + ndc_y * half_height * up
        return Ray(origin=self.position.copy(), direction=_normalize(direction))

    def project(self, point: np.ndarray) -> tuple[float, float] | None:
        """World point -> normalized device coordinates; None if behind the eye."""
        forward, right, up = self.basis()
        rel = np.asarray(point, dtype=np.float64) - self.position
        depth = float(np.dot(rel, forward))
        if depth <= 0:
            return None
        half_height = math.tan(math.radians(self.fov) / 2)
        half_width = half_height * self.aspect
        return (
            float(np.dot(rel, right)) / (depth * half_width),
            float(np.dot(rel, up)) / (depth * half_height),
        )

    def pan(self, dx: float, dy: float) -> None:
        """Translate eye and target together along the world X/Y axes."""
        offset = np.array([dx, dy, 0.0])
        self.target = self.target + offset
        self.position = self.position + offset

    def dolly(self, factor: float) -> None:
        """Scale the eye's offset from the target."""
        self.position = self.target + (self.position - self.target) * factor


@dataclass
class Framing:
    """Camera pose that frames a set of positions."""

    target: np.ndarray
    eye: np.ndarray
    distance: float


def frame_all(positions: Iterable[np.ndarray] | np.ndarray, padding: float | None = None) -> Framing | None:
    """
    Frame every position.

    target = bounding-box centre, distance = max(sx, sy, sz, 1) * padding,
    eye = target + distance * (0.5, 0.5, 0.7). Returns None for no positions.
    """
    padding = padding if padding is not None else settings.frame_padding
    points = np.asarray(list(positions) if not isinstance(positions, np.ndarray) else positions, dtype=np.float64)
    if points.size == 0:
        return None
    points = points.reshape(-1, 3)

    low = points.min(axis=0)
    high = points.max(axis=0)
    target = (low + high) / 2
    size = high - low
    max_extent = max(float(size[0]), float(size[1]), float(size[2]), 1.0)
    distance = max_extent * padding
    return Framing(target=target, eye=target + distance * FRAME_ALL_DIRECTION, distance=distance)


@dataclass
class CameraTransition:
    """Resumable camera animation from one pose to another."""

    start_target: np.ndarray
    start_eye: np.ndarray
    end_target: np.ndarray
    end_eye: np.ndarray
    started_at: float  # ms
    duration_ms: float
    easing: Callable[[float], float] = ease_in_out

    def progress(self, now_ms: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return min(max((now_ms - self.started_at) / self.duration_ms, 0.0), 1.0)

    def finished(self, now_ms: float) -> bool:
        return self.progress(now_ms) >= 1.0

    def sample(self, now_ms: float) -> tuple[np.ndarray, np.ndarray]:
        """Interpolated (target, eye) at ``now_ms``."""
        k = self.easing(self.progress(now_ms))
        target = self.start_target + (self.end_target - self.start_target) * k
        eye = self.start_eye + (self.end_eye - self.start_eye) * k
        return target, eye


def frame_entity(
    position: np.ndarray,
    current_target: np.ndarray,
    current_eye: np.ndarray,
    now_ms: float,
    duration_ms: float | None = None,
) -> CameraTransition:
    """
    Animate toward an entity.

    New target = entity position; new eye sits along normalize(0.5, 0.5, 1)
    at max(30, 0.6 * current distance).
    """
    duration_ms = duration_ms if duration_ms is not None else settings.focus_duration_ms
    current_target = np.asarray(current_target, dtype=np.float64)
    current_eye = np.asarray(current_eye, dtype=np.float64)
    end_target = np.asarray(position, dtype=np.float64).copy()

    current_distance = float(np.linalg.norm(current_eye - current_target))
    new_distance = max(settings.focus_min_distance, current_distance * settings.focus_distance_factor)

    return CameraTransition(
        start_target=current_target.copy(),
        start_eye=current_eye.copy(),
        end_target=end_target,
        end_eye=end_target + FOCUS_DIRECTION * new_distance,
        started_at=now_ms,
        duration_ms=duration_ms,
    )
