"""User-authored per-bone offsets from the control surface."""

import logging
import math
from typing import Iterable

from poseforge.core.config_loader import load_config
from poseforge.core.math_utils import clamp
from poseforge.core.state import BoneTransform
from poseforge.constants import POSITION_LIMIT, ROTATION_LIMIT_DEG

logger = logging.getLogger(__name__)

ZERO_TRANSFORM = BoneTransform()


class ManualOffsetLayer:
    """Bone name -> BoneTransform map with clamped, whole-entry updates.

    Every change bumps :attr:`version` so the compositor can tell when the
    manual layer needs to be re-applied.
    """

    def __init__(
        self,
        rotation_limit: float = ROTATION_LIMIT_DEG,
        position_limit: float = POSITION_LIMIT,
    ):
        self.rotation_limit = rotation_limit
        self.position_limit = position_limit
        self.version = 0
        self._transforms: dict[str, BoneTransform] = {}

    @classmethod
    def from_config(cls, name: str = "pose_engine.json") -> "ManualOffsetLayer":
        try:
            data = load_config(name)
        except FileNotFoundError as e:
            logger.warning("Pose engine config not found, using default offset limits: %s", e)
            return cls()
        limits = data.get("manual_limits", {})
        return cls(
            rotation_limit=float(limits.get("rotation_deg", ROTATION_LIMIT_DEG)),
            position_limit=float(limits.get("position", POSITION_LIMIT)),
        )

    def ensure(self, bone_names: Iterable[str]) -> None:
        """Create zero entries for newly discovered bones."""
        for name in bone_names:
            self._transforms.setdefault(name, ZERO_TRANSFORM)

    def get(self, bone: str) -> BoneTransform:
        return self._transforms.get(bone, ZERO_TRANSFORM)

    def _clamp(self, kind: str, value: float) -> float:
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Non-finite {kind} offset: {value}")
        limit = self.rotation_limit if kind == "rotation" else self.position_limit
        return clamp(value, -limit, limit)

    def set_component(self, bone: str, kind: str, axis: int, value: float) -> BoneTransform:
        """Replace one rotation/position component, clamped to the layer limits."""
        updated = self.get(bone).with_axis(kind, axis, self._clamp(kind, value))
        self._transforms[bone] = updated
        self.version += 1
        return updated

    def set(self, bone: str, transform: BoneTransform) -> BoneTransform:
        """Replace a bone's whole entry (components are clamped)."""
        clamped = BoneTransform(
            rotation=tuple(self._clamp("rotation", v) for v in transform.rotation),
            position=tuple(self._clamp("position", v) for v in transform.position),
        )
        self._transforms[bone] = clamped
        self.version += 1
        return clamped

    def reset_bone(self, bone: str) -> None:
        self._transforms[bone] = ZERO_TRANSFORM
        self.version += 1

    def reset_all(self) -> None:
        for bone in self._transforms:
            self._transforms[bone] = ZERO_TRANSFORM
        self.version += 1

    @property
    def transforms(self) -> dict[str, BoneTransform]:
        """Snapshot of the full map."""
        return dict(self._transforms)

    def active_bones(self) -> list[str]:
        """Bones with an entry (zero or not)."""
        return list(self._transforms)

    def __contains__(self, bone: str) -> bool:
        return bone in self._transforms
