"""One-shot scene bounding sphere for camera framing."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

import numpy as np

from poseforge.core.events import EventBus, EventType
from poseforge.core.math_utils import transform_points
from poseforge.core.scene_graph import Scene

logger = logging.getLogger(__name__)


class BoundsState(Enum):
    NOT_COMPUTED = auto()
    SENT = auto()


@dataclass(frozen=True)
class SceneBounds:
    center: tuple[float, float, float]
    radius: float


def compute_scene_bounds(scene: Scene) -> Optional[SceneBounds]:
    """World-space AABB of every visible mesh reduced to a sphere.

    Center is the box center, radius half the box diagonal.  Returns None
    when there is no geometry yet.
    """
    lo = np.full(3, np.inf)
    hi = np.full(3, -np.inf)
    for mesh, world in scene.collect_meshes():
        if mesh.geometry.vertex_count == 0:
            continue
        pts = transform_points(world, mesh.geometry.as_points())
        lo = np.minimum(lo, pts.min(axis=0))
        hi = np.maximum(hi, pts.max(axis=0))
    if not np.all(np.isfinite(lo)) or not np.all(np.isfinite(hi)):
        return None
    center = (lo + hi) / 2.0
    radius = float(np.linalg.norm(hi - lo) / 2.0)
    return SceneBounds(center=tuple(float(v) for v in center), radius=radius)


class SceneBoundsReporter:
    """Publishes SCENE_BOUNDS_READY exactly once per load.

    Empty or zero-radius bounds mean the geometry is not ready; the state
    stays NOT_COMPUTED and the next traversal tries again.
    """

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self.state = BoundsState.NOT_COMPUTED
        self.bounds: Optional[SceneBounds] = None

    def report(self, scene: Scene) -> Optional[SceneBounds]:
        """Compute and publish bounds if not already sent.  Returns them when sent now."""
        if self.state is BoundsState.SENT:
            return None
        bounds = compute_scene_bounds(scene)
        if bounds is None or not bounds.radius > 0.0:
            logger.debug("Scene bounds not ready yet")
            return None
        self.bounds = bounds
        self.state = BoundsState.SENT
        logger.info("Scene bounds: center=%s radius=%.3f", bounds.center, bounds.radius)
        self.event_bus.publish(EventType.SCENE_BOUNDS_READY, bounds=bounds)
        return bounds

    def reset(self) -> None:
        """Only used when the asset is reloaded."""
        self.state = BoundsState.NOT_COMPUTED
        self.bounds = None
