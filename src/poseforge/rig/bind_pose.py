"""Bind-pose registry: each bone's rest transform, captured once per load."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

import numpy as np

from poseforge.core.math_utils import Vec3, as_vec3
from poseforge.core.scene_graph import SceneNode

logger = logging.getLogger(__name__)


class BindPoseState(Enum):
    UNINITIALIZED = auto()
    POPULATED = auto()


@dataclass(frozen=True)
class BindPose:
    rotation: tuple[float, float, float]
    position: tuple[float, float, float]

    @property
    def rotation_vec(self) -> Vec3:
        return np.array(self.rotation, dtype=np.float64)

    @property
    def position_vec(self) -> Vec3:
        return np.array(self.position, dtype=np.float64)


class BindPoseRegistry:
    """First-write-wins store of rest rotations/positions keyed by bone name."""

    def __init__(self):
        self._poses: dict[str, BindPose] = {}
        self.state = BindPoseState.UNINITIALIZED

    def register(self, bone_name: str, rotation, position) -> bool:
        """Record a bind pose.  Returns False if one already exists."""
        if bone_name in self._poses:
            return False
        self._poses[bone_name] = BindPose(
            rotation=tuple(float(v) for v in as_vec3(rotation)),
            position=tuple(float(v) for v in as_vec3(position)),
        )
        return True

    def get(self, bone_name: str) -> Optional[BindPose]:
        return self._poses.get(bone_name)

    def populate(self, bones: Iterable[SceneNode]) -> None:
        """Capture every bone of a freshly loaded skeleton.

        Only the UNINITIALIZED -> POPULATED transition does work; later calls
        are no-ops until :meth:`reset`.
        """
        if self.state is BindPoseState.POPULATED:
            return
        count = 0
        for node in bones:
            if self.register(node.name, node.rotation, node.position):
                count += 1
        self.state = BindPoseState.POPULATED
        logger.info("Captured bind pose for %d bones", count)

    def get_or_capture(self, node: SceneNode) -> BindPose:
        """Return the bind pose, capturing the live transform if never seen."""
        pose = self._poses.get(node.name)
        if pose is None:
            logger.debug("Bone %r not in bind-pose registry, capturing live transform", node.name)
            self.register(node.name, node.rotation, node.position)
            pose = self._poses[node.name]
        return pose

    def reset(self) -> None:
        """Drop every entry.  Only used when the asset is reloaded."""
        self._poses.clear()
        self.state = BindPoseState.UNINITIALIZED

    def __contains__(self, bone_name: str) -> bool:
        return bone_name in self._poses

    def __len__(self) -> int:
        return len(self._poses)
