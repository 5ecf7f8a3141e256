"""Emotion-driven head/neck/spine posture."""

import logging
from collections.abc import Mapping
from typing import Optional

from poseforge.core.config_loader import load_config
from poseforge.core.state import Emotion
from poseforge.rig.skeleton import AXES, HEAD, NECK, SPINE, RigProfile, TargetMap

logger = logging.getLogger(__name__)

# Built-in table (radians); emotion_poses.json overrides it.
DEFAULT_EMOTION_POSES: dict[str, dict[str, dict[str, float]]] = {
    "neutral": {HEAD: {"x": 0.0, "y": 0.0}, SPINE: {"x": 0.0}},
    "happy": {HEAD: {"x": -0.25, "y": 0.0}, SPINE: {"x": 0.15}},
    "sad": {HEAD: {"x": 0.4, "y": 0.0}, SPINE: {"x": -0.25}},
    "angry": {HEAD: {"x": 0.15, "y": 0.25}, SPINE: {"x": -0.2}},
}


def load_emotion_poses(name: str = "emotion_poses.json") -> dict[str, dict[str, dict[str, float]]]:
    """Load the emotion table from config, falling back to the built-in one."""
    try:
        data = load_config(name)
    except FileNotFoundError as e:
        logger.warning("Emotion poses config not found, using built-in table: %s", e)
        return DEFAULT_EMOTION_POSES
    missing = [e.value for e in Emotion if e.value not in data]
    if missing:
        raise ValueError(f"Emotion table is missing entries for: {', '.join(missing)}")
    return data


class EmotionPoser:
    """Maps the current emotion to head pitch/yaw and spine pitch targets.

    Head, neck and spine must all be present in the rig; otherwise no targets
    are produced (a partial rig is not an error).  The neck is only checked
    for presence, the table does not drive it.
    """

    REQUIRED_ROLES = (HEAD, NECK, SPINE)

    def __init__(self, profile: RigProfile, poses: Optional[dict] = None):
        self.profile = profile
        self._table: dict[Emotion, TargetMap] = {}
        for key, roles in (poses or DEFAULT_EMOTION_POSES).items():
            self._table[Emotion(key)] = {
                profile.bone_name(role): {AXES[axis]: float(v) for axis, v in channels.items()}
                for role, channels in roles.items()
            }

    @classmethod
    def load(cls, profile: RigProfile) -> "EmotionPoser":
        return cls(profile, load_emotion_poses())

    @property
    def required_bones(self) -> list[str]:
        return self.profile.names_for(*self.REQUIRED_ROLES)

    def targets(self, emotion: Emotion, bones: Mapping) -> TargetMap:
        """Return target rotations for *emotion*, or {} if the rig lacks a bone."""
        missing = [name for name in self.required_bones if name not in bones]
        if missing:
            logger.debug("Emotion pose skipped, missing bones: %s", missing)
            return {}
        table = self._table.get(Emotion(emotion), {})
        return {bone: dict(axes) for bone, axes in table.items()}
