"""Per-frame pose composition: bind pose + smoothed layers + manual offsets.

Layer rules:
  - Bind pose is the base for every bone.
  - Retarget and emotion targets are smoothed per channel at their own
    blend factor.  When both target the same bone (the head), retargeting
    owns that bone for the tick and the emotion contribution is dropped.
    Without a landmark frame the emotion layer drives the head again.
  - Manual offsets are added unsmoothed (degrees → radians for rotation).

The result is a value (bone name → BonePose); writing it into the scene is
the SceneApplier's job.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

import numpy as np

from poseforge.animation.manual_offsets import ManualOffsetLayer
from poseforge.animation.smoothing import (
    SOURCE_EMOTION, SOURCE_RETARGET, ChannelSmoother, SmoothingProfile,
)
from poseforge.core.state import FrameInputs
from poseforge.pose.emotion import EmotionPoser
from poseforge.pose.retargeter import PoseRetargeter, RetargetResult
from poseforge.rig.bind_pose import BindPoseRegistry
from poseforge.rig.skeleton import TargetMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BonePose:
    """Final local transform for one bone (rotation in radians)."""
    rotation: tuple[float, float, float]
    position: tuple[float, float, float]


class PoseCompositor:
    """Combines every pose layer into final bone transforms once per tick."""

    def __init__(
        self,
        retargeter: PoseRetargeter,
        emotion_poser: EmotionPoser,
        smoothing: Optional[SmoothingProfile] = None,
    ):
        self.retargeter = retargeter
        self.emotion_poser = emotion_poser
        self.smoothing = smoothing or SmoothingProfile()
        self.smoother = ChannelSmoother()
        self.last_retarget: Optional[RetargetResult] = None
        self._offsets_version: Optional[int] = None

    def reset(self) -> None:
        """Forget smoothing state; called when the rig is reloaded."""
        self.smoother.reset()
        self.last_retarget = None
        self._offsets_version = None

    def _advance(self, targets: TargetMap, source: str) -> None:
        alpha = self.smoothing.alpha_for(source)
        for bone, axes in targets.items():
            for axis, value in axes.items():
                self.smoother.step(bone, axis, value, alpha)

    def compose(
        self,
        inputs: FrameInputs,
        bones: Mapping,
        bind_poses: BindPoseRegistry,
        offsets: ManualOffsetLayer,
    ) -> dict[str, BonePose]:
        """Advance smoothing one tick and return the transforms to write.

        Automatically driven bones are returned every tick.  Bones that only
        carry a manual offset are returned when the offset map has changed
        since the previous call.
        """
        retarget = self.retargeter.retarget(inputs.landmarks, bones)
        emotion_targets = self.emotion_poser.targets(inputs.emotion, bones)

        if retarget is not None:
            self._advance(retarget.targets, SOURCE_RETARGET)
            emotion_targets = {
                bone: axes for bone, axes in emotion_targets.items()
                if bone not in retarget.targets
            }
            self.last_retarget = retarget
        self._advance(emotion_targets, SOURCE_EMOTION)

        wanted = {b for b in self.smoother.bones() if b in bones}
        if offsets.version != self._offsets_version:
            wanted.update(b for b in offsets.active_bones() if b in bones)
            self._offsets_version = offsets.version

        poses: dict[str, BonePose] = {}
        for name in bones:
            if name not in wanted:
                continue
            bind = bind_poses.get_or_capture(bones[name])
            offset = offsets.get(name)
            rotation = (
                bind.rotation_vec
                + self.smoother.value(name)
                + np.radians(np.asarray(offset.rotation, dtype=np.float64))
            )
            position = bind.position_vec + np.asarray(offset.position, dtype=np.float64)
            poses[name] = BonePose(
                rotation=tuple(float(v) for v in rotation),
                position=tuple(float(v) for v in position),
            )
        return poses
