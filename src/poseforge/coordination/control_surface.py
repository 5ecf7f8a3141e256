"""Adapter between the bone-offset control panel and the manual offset layer."""

import logging
from typing import Any, Optional

from poseforge.animation.manual_offsets import ManualOffsetLayer
from poseforge.core.events import EventBus, EventType
from poseforge.core.state import BoneTransform

logger = logging.getLogger(__name__)


class ControlSurfaceBridge:
    """Read model and callbacks for an external control panel.

    The panel reads ``bone_names``, ``selected_bone`` and ``transforms``
    and reports edits through ``on_change`` / ``on_reset_bone`` /
    ``on_reset_all``.  It never touches engine state directly.
    """

    def __init__(self, offsets: ManualOffsetLayer, event_bus: EventBus):
        self.offsets = offsets
        self.event_bus = event_bus
        self.bone_names: list[str] = []
        self.selected_bone: Optional[str] = None
        event_bus.subscribe(EventType.BONES_DISCOVERED, self._on_bones_discovered)

    def _on_bones_discovered(self, bone_names: list[str]) -> None:
        self.bone_names = list(bone_names)
        self.offsets.ensure(self.bone_names)
        if self.selected_bone not in self.bone_names:
            self.select(self.bone_names[0] if self.bone_names else None)

    @property
    def transforms(self) -> dict[str, BoneTransform]:
        return self.offsets.transforms

    def select(self, bone: Optional[str]) -> None:
        if bone is not None and bone not in self.bone_names:
            logger.warning("Cannot select unknown bone %r", bone)
            return
        self.selected_bone = bone
        self.event_bus.publish(EventType.BONE_SELECTED, bone=bone)

    def on_change(self, bone: str, kind: str, axis_index: int, value: float) -> Optional[BoneTransform]:
        """Apply one slider edit.  Out-of-range values are clamped."""
        if bone not in self.bone_names:
            logger.warning("Ignoring edit for unknown bone %r", bone)
            return None
        transform = self.offsets.set_component(bone, kind, axis_index, value)
        self.event_bus.publish(EventType.TRANSFORM_CHANGED, bone=bone, transform=transform)
        return transform

    def on_reset_bone(self, bone: str) -> None:
        self.offsets.reset_bone(bone)
        self.event_bus.publish(EventType.BONE_RESET, bone=bone)

    def on_reset_all(self) -> None:
        self.offsets.reset_all()
        self.event_bus.publish(EventType.ALL_BONES_RESET)

    def view(self) -> dict[str, Any]:
        """Plain-data snapshot for the panel."""
        return {
            "boneNames": list(self.bone_names),
            "selectedBone": self.selected_bone,
            "transforms": {name: t.to_dict() for name, t in self.transforms.items()},
        }
