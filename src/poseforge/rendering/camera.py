"""Perspective camera with an orbit target and bounds-based framing."""

import math

import numpy as np

from poseforge.core.events import EventBus, EventType
from poseforge.core.math_utils import (
    Mat4, Vec3, mat4_identity, mat4_look_at, normalize, vec3,
)
from poseforge.coordination.bounds import SceneBounds


class Camera:
    """A perspective camera looking at an orbit target.

    Parameters
    ----------
    fov : float
        Vertical field-of-view in degrees.
    near : float
        Near clipping plane distance.
    far : float
        Far clipping plane distance.
    """

    def __init__(self, fov: float = 50.0, near: float = 0.1, far: float = 1000.0) -> None:
        self.fov = fov
        self.near = near
        self.far = far

        self.position: Vec3 = vec3(0.0, 0.0, 5.0)
        self.target: Vec3 = vec3()
        self.up: Vec3 = vec3(0.0, 1.0, 0.0)
        self.framed_count = 0

        self._view_dirty: bool = True
        self._view: Mat4 = mat4_identity()

    def get_view_matrix(self) -> Mat4:
        if self._view_dirty:
            self._view = mat4_look_at(self.position, self.target, self.up)
            self._view_dirty = False
        return self._view

    def look_at(self, eye: Vec3, target: Vec3) -> None:
        self.position = np.asarray(eye, dtype=np.float64).copy()
        self.target = np.asarray(target, dtype=np.float64).copy()
        self._view_dirty = True

    def fit_distance(self, radius: float, margin: float = 1.2) -> float:
        """Distance at which a sphere of *radius* fills the vertical field of view."""
        half_fov = math.radians(self.fov) / 2.0
        return radius * margin / math.sin(half_fov)

    def frame_bounds(self, bounds: SceneBounds, margin: float = 1.2) -> None:
        """Move the camera and orbit target so the whole sphere is in view.

        Keeps the current viewing direction.
        """
        center = vec3(*bounds.center)
        direction = normalize(self.position - self.target)
        if not direction.any():
            direction = vec3(0.0, 0.0, 1.0)
        distance = self.fit_distance(bounds.radius, margin)
        self.look_at(center + direction * distance, center)
        self.near = max(distance / 100.0, 1e-3)
        self.far = max(distance * 100.0, self.near * 10.0)
        self.framed_count += 1

    def attach(self, event_bus: EventBus) -> None:
        """Reframe whenever scene bounds are published."""
        event_bus.subscribe(EventType.SCENE_BOUNDS_READY, lambda bounds: self.frame_bounds(bounds))
