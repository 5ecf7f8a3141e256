"""Landmark → joint rotation retargeting for arms and head.

Displacements are measured in detector space (``LandmarkFrame.points``:
image fractions, y down, z growing away from the camera) and scaled by
``pi * gain``, so a full-frame displacement maps to a bounded multiple of
pi.  The elbow angle uses normalized points; it does not depend on axis
direction.

Channel signals
---------------
arm raise     (elbow.y - shoulder.y) * pi * 2
arm forward   (elbow.z - shoulder.z) * pi * 2
arm side      (elbow.x - shoulder.x) * pi * 2   (reported, not applied)
forearm bend  pi - angle(shoulder, elbow, wrist)
head yaw      (nose.x - shoulder_center.x) * pi * 3
head pitch    (nose.y - ear_center.y) * pi * 2
head roll     (right_ear.y - left_ear.y) * pi * 2

The rig profile decides which bone axis each signal lands on and with
which sign (arm raise and forearm bend are mirrored between the sides,
yaw is negated).
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from poseforge.pose.landmarks import LandmarkFrame, angle_between
from poseforge.rig.skeleton import (
    HEAD, LEFT_FOREARM, LEFT_UPPER_ARM, RIGHT_FOREARM, RIGHT_UPPER_ARM,
    RigProfile, TargetMap,
)
from poseforge.constants import (
    ARM_GAIN, HEAD_PITCH_GAIN, HEAD_ROLL_GAIN, HEAD_YAW_GAIN,
    LEFT_EAR, LEFT_ELBOW, LEFT_SHOULDER, LEFT_WRIST, NOSE,
    RIGHT_EAR, RIGHT_ELBOW, RIGHT_SHOULDER, RIGHT_WRIST,
)

logger = logging.getLogger(__name__)

_SIDES = {
    "left": (LEFT_SHOULDER, LEFT_ELBOW, LEFT_WRIST),
    "right": (RIGHT_SHOULDER, RIGHT_ELBOW, RIGHT_WRIST),
}

_MIN_SEGMENT = 1e-9


@dataclass
class RetargetResult:
    """Output of one retarget pass.

    signals: channel name -> radians before the rig's axis/sign mapping
    targets: bone name -> {axis index -> radians}
    arm_side: side -> radians; computed for every frame but not wired to
        any rotation channel.
    """
    signals: dict[str, float] = field(default_factory=dict)
    targets: TargetMap = field(default_factory=dict)
    arm_side: dict[str, float] = field(default_factory=dict)


class PoseRetargeter:
    """Maps a LandmarkFrame onto upper arm, forearm and head rotations."""

    REQUIRED_ROLES = (LEFT_UPPER_ARM, RIGHT_UPPER_ARM, LEFT_FOREARM, RIGHT_FOREARM, HEAD)

    def __init__(self, profile: RigProfile):
        self.profile = profile

    @property
    def required_bones(self) -> list[str]:
        return self.profile.names_for(*self.REQUIRED_ROLES)

    def compute_signals(self, frame: LandmarkFrame) -> tuple[dict[str, float], dict[str, float]]:
        """Return (channel signals, arm side signals) for a frame."""
        p = frame.points
        n = frame.normalized
        signals: dict[str, float] = {}
        arm_side: dict[str, float] = {}

        for side, (shoulder_idx, elbow_idx, wrist_idx) in _SIDES.items():
            delta = p[elbow_idx] - p[shoulder_idx]
            shoulder, elbow, wrist = n[shoulder_idx], n[elbow_idx], n[wrist_idx]
            signals[f"{side}_arm_raise"] = float(delta[1] * math.pi * ARM_GAIN)
            signals[f"{side}_arm_forward"] = float(delta[2] * math.pi * ARM_GAIN)
            arm_side[side] = float(delta[0] * math.pi * ARM_GAIN)

            # A collapsed segment has no direction; leave the elbow as it was.
            if (np.linalg.norm(elbow - shoulder) > _MIN_SEGMENT
                    and np.linalg.norm(wrist - elbow) > _MIN_SEGMENT):
                bend = math.pi - angle_between(shoulder, elbow, wrist)
                signals[f"{side}_forearm_bend"] = bend

        nose = p[NOSE]
        shoulder_center = (p[LEFT_SHOULDER] + p[RIGHT_SHOULDER]) / 2.0
        ear_center = (p[LEFT_EAR] + p[RIGHT_EAR]) / 2.0
        signals["head_yaw"] = float((nose[0] - shoulder_center[0]) * math.pi * HEAD_YAW_GAIN)
        signals["head_pitch"] = float((nose[1] - ear_center[1]) * math.pi * HEAD_PITCH_GAIN)
        signals["head_roll"] = float(
            (p[RIGHT_EAR][1] - p[LEFT_EAR][1]) * math.pi * HEAD_ROLL_GAIN
        )
        return signals, arm_side

    def map_signals(self, signals: dict[str, float]) -> TargetMap:
        """Route channel signals onto bone axes using the rig profile."""
        targets: TargetMap = {}
        for channel, value in signals.items():
            mapping = self.profile.channels.get(channel)
            if mapping is None:
                continue
            bone = self.profile.bone_name(mapping.role)
            targets.setdefault(bone, {})[mapping.axis] = mapping.sign * value
        return targets

    def retarget(self, frame: Optional[LandmarkFrame], bones: Mapping) -> Optional[RetargetResult]:
        """Compute targets for the frame.

        Returns None when there is no frame or when any retargeted bone is
        missing from the rig; nothing is written in either case.
        """
        if frame is None:
            return None
        missing = [name for name in self.required_bones if name not in bones]
        if missing:
            logger.debug("Retarget skipped, missing bones: %s", missing)
            return None
        signals, arm_side = self.compute_signals(frame)
        return RetargetResult(signals=signals, targets=self.map_signals(signals), arm_side=arm_side)
