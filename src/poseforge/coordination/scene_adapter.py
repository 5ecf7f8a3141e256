"""Writes composed bone poses into the live scene graph."""

from collections.abc import Mapping

from poseforge.coordination.compositor import BonePose


class SceneApplier:
    """The only place the engine mutates bone nodes."""

    def apply(self, poses: dict[str, BonePose], bones: Mapping) -> int:
        """Write each pose onto its node; returns the number of bones written."""
        written = 0
        for name, pose in poses.items():
            node = bones.get(name)
            if node is None:
                continue
            node.set_transform(pose.rotation, pose.position)
            written += 1
        return written
