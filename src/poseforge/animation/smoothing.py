"""Per-channel exponential smoothing toward pose targets.

Each tick moves a channel a fixed fraction of the remaining distance:
``current = lerp(current, target, alpha)``, so the error after n ticks is
``|current_0 - target| * (1 - alpha) ** n``.
"""

import logging
from dataclasses import dataclass

import numpy as np

from poseforge.core.config_loader import load_config
from poseforge.core.math_utils import Vec3, lerp, vec3
from poseforge.constants import EMOTION_BLEND, RETARGET_BLEND

logger = logging.getLogger(__name__)

SOURCE_RETARGET = "retarget"
SOURCE_EMOTION = "emotion"


@dataclass
class SmoothingProfile:
    """Blend factor per pose source (fraction per tick, 0 < alpha <= 1)."""
    retarget: float = RETARGET_BLEND
    emotion: float = EMOTION_BLEND

    def __post_init__(self):
        for name in (SOURCE_RETARGET, SOURCE_EMOTION):
            alpha = getattr(self, name)
            if not 0.0 < alpha <= 1.0:
                raise ValueError(f"{name} blend factor must be in (0, 1], got {alpha}")

    def alpha_for(self, source: str) -> float:
        return getattr(self, source)

    @classmethod
    def load(cls, name: str = "pose_engine.json") -> "SmoothingProfile":
        try:
            data = load_config(name)
        except FileNotFoundError as e:
            logger.warning("Pose engine config not found, using default blend factors: %s", e)
            return cls()
        blend = data.get("smoothing", {})
        return cls(
            retarget=float(blend.get(SOURCE_RETARGET, RETARGET_BLEND)),
            emotion=float(blend.get(SOURCE_EMOTION, EMOTION_BLEND)),
        )


def smooth_toward(current: float, target: float, alpha: float, steps: int = 1) -> float:
    """Apply *steps* smoothing ticks toward a constant target."""
    for _ in range(steps):
        current = lerp(current, target, alpha)
    return current


class ChannelSmoother:
    """Holds the smoothed Euler delta of every automatically driven bone.

    Channels that get no target on a tick keep their value, which freezes
    the last pose when a signal drops out.
    """

    def __init__(self):
        self._values: dict[str, Vec3] = {}

    def step(self, bone: str, axis: int, target: float, alpha: float) -> float:
        values = self._values.setdefault(bone, vec3())
        values[axis] = lerp(values[axis], target, alpha)
        return float(values[axis])

    def value(self, bone: str) -> Vec3:
        values = self._values.get(bone)
        return vec3() if values is None else values.copy()

    def bones(self) -> list[str]:
        return list(self._values)

    def __contains__(self, bone: str) -> bool:
        return bone in self._values

    def reset(self) -> None:
        self._values.clear()

    def snapshot(self) -> dict[str, np.ndarray]:
        return {bone: v.copy() for bone, v in self._values.items()}
