"""Rig profile (fixed bone-name mapping) and the per-load bone lookup."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Iterator, Optional

from poseforge.core.config_loader import load_config
from poseforge.core.scene_graph import SceneNode

logger = logging.getLogger(__name__)

AXES = {"x": 0, "y": 1, "z": 2}

# bone name -> {axis index -> radians}
TargetMap = dict[str, dict[int, float]]

# Bone roles used by the retargeter and the emotion poser
HEAD = "head"
NECK = "neck"
SPINE = "spine"
LEFT_UPPER_ARM = "left_upper_arm"
RIGHT_UPPER_ARM = "right_upper_arm"
LEFT_FOREARM = "left_forearm"
RIGHT_FOREARM = "right_forearm"

_DEFAULT_BONES = {
    HEAD: "Bip001_Head_087",
    NECK: "Bip001_Neck_086",
    SPINE: "Bip001_Spine2_052",
    LEFT_UPPER_ARM: "Bip001_L_UpperArm_061",
    RIGHT_UPPER_ARM: "Bip001_R_UpperArm_092",
    LEFT_FOREARM: "Bip001_L_Forearm_062",
    RIGHT_FOREARM: "Bip001_R_Forearm_093",
}

# channel -> (bone role, axis, sign).  Left/right signs are mirrored
# because the rig's local arm axes are mirrored.
_DEFAULT_CHANNELS = {
    "left_arm_raise": (LEFT_UPPER_ARM, "z", 1.0),
    "left_arm_forward": (LEFT_UPPER_ARM, "x", 1.0),
    "right_arm_raise": (RIGHT_UPPER_ARM, "z", -1.0),
    "right_arm_forward": (RIGHT_UPPER_ARM, "x", 1.0),
    "left_forearm_bend": (LEFT_FOREARM, "y", -1.0),
    "right_forearm_bend": (RIGHT_FOREARM, "y", 1.0),
    "head_yaw": (HEAD, "y", -1.0),
    "head_pitch": (HEAD, "x", 1.0),
    "head_roll": (HEAD, "z", 1.0),
}


@dataclass(frozen=True)
class ChannelMapping:
    """Where a retargeted scalar lands: bone role, Euler axis index, sign."""
    role: str
    axis: int
    sign: float = 1.0


@dataclass
class RigProfile:
    """Fixed mapping from semantic bone roles to the skeleton's bone names."""
    bones: dict[str, str] = field(default_factory=lambda: dict(_DEFAULT_BONES))
    channels: dict[str, ChannelMapping] = field(default_factory=lambda: {
        name: ChannelMapping(role, AXES[axis], sign)
        for name, (role, axis, sign) in _DEFAULT_CHANNELS.items()
    })

    @classmethod
    def from_dict(cls, data: dict) -> "RigProfile":
        profile = cls()
        profile.bones.update(data.get("bones", {}))
        for name, spec in data.get("channels", {}).items():
            axis = spec.get("axis", "x").lower()
            if axis not in AXES:
                raise ValueError(f"Channel {name!r}: unknown axis {axis!r}")
            role = spec["bone"]
            if role not in profile.bones:
                raise ValueError(f"Channel {name!r}: unknown bone role {role!r}")
            profile.channels[name] = ChannelMapping(role, AXES[axis], float(spec.get("sign", 1.0)))
        return profile

    def bone_name(self, role: str) -> str:
        return self.bones[role]

    def names_for(self, *roles: str) -> list[str]:
        return [self.bones[r] for r in roles]


def load_rig_profile(name: str = "rig_profile.json") -> RigProfile:
    """Load the rig profile from config.  Falls back to built-in names."""
    try:
        data = load_config(name)
    except FileNotFoundError as e:
        logger.warning("Rig profile not found, using built-in bone names: %s", e)
        return RigProfile()
    return RigProfile.from_dict(data)


class BoneLookup(Mapping):
    """Non-owning name -> bone node index into a loaded scene.

    Rebuilt on every (re)load; never mutated in between.
    """

    def __init__(self, bones: Optional[dict[str, SceneNode]] = None):
        self._bones: dict[str, SceneNode] = dict(bones or {})

    @classmethod
    def from_scene(cls, root: SceneNode) -> "BoneLookup":
        bones: dict[str, SceneNode] = {}

        def _visit(node: SceneNode):
            if node.is_bone and node.name:
                if node.name in bones:
                    logger.warning("Duplicate bone name %r, keeping first", node.name)
                    return
                bones[node.name] = node

        root.traverse(_visit)
        return cls(bones)

    def __getitem__(self, name: str) -> SceneNode:
        return self._bones[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bones)

    def __len__(self) -> int:
        return len(self._bones)

    @property
    def names(self) -> list[str]:
        """Bone names in traversal order."""
        return list(self._bones)

    def require(self, names: list[str]) -> Optional[dict[str, SceneNode]]:
        """Return the named nodes, or None if any of them is missing."""
        found = {}
        for name in names:
            node = self._bones.get(name)
            if node is None:
                return None
            found[name] = node
        return found
