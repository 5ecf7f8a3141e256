"""Per-frame orchestrator: inputs → compositor → scene."""

import logging
from typing import Optional

from poseforge.animation.manual_offsets import ManualOffsetLayer
from poseforge.core.events import EventBus, EventType
from poseforge.core.state import InputState
from poseforge.coordination.compositor import BonePose, PoseCompositor
from poseforge.coordination.loading_pipeline import LoadingPipeline
from poseforge.coordination.render_context import RenderContextMonitor
from poseforge.coordination.scene_adapter import SceneApplier

logger = logging.getLogger(__name__)


class Simulation:
    """Drives one engine tick per rendered frame.

    Call order:
      1. Skip if no rig is loaded or the render context is lost
      2. Reset smoothing after a reload
      3. Snapshot inputs (emotion + latest landmark frame)
      4. Compose poses (retarget, emotion, manual offsets, smoothing)
      5. Write poses into the scene and commit world matrices
      6. Retry the bounds report until it has been sent
    """

    def __init__(
        self,
        inputs: InputState,
        pipeline: LoadingPipeline,
        compositor: PoseCompositor,
        offsets: ManualOffsetLayer,
        event_bus: EventBus,
        context: Optional[RenderContextMonitor] = None,
    ):
        self.inputs = inputs
        self.pipeline = pipeline
        self.compositor = compositor
        self.offsets = offsets
        self.event_bus = event_bus
        self.context = context
        self.applier = SceneApplier()

        self.frame_count = 0
        self.elapsed = 0.0
        self.last_poses: dict[str, BonePose] = {}
        self._generation: Optional[int] = None

    def step(self, dt: float) -> int:
        """Advance one frame.  Returns the number of bones written."""
        if self.context is not None and not self.context.is_active:
            return 0
        rig = self.pipeline.rig
        if rig is None:
            return 0

        if rig.generation != self._generation:
            self.compositor.reset()
            self.offsets.ensure(rig.bones.names)
            self._generation = rig.generation
            logger.debug("Simulation bound to rig generation %d", rig.generation)

        frame_inputs = self.inputs.snapshot()
        poses = self.compositor.compose(frame_inputs, rig.bones, rig.bind_poses, self.offsets)
        written = self.applier.apply(poses, rig.bones)
        rig.scene.update()
        self.pipeline.bounds.report(rig.scene)

        self.last_poses = poses
        self.frame_count += 1
        self.elapsed += dt
        self.event_bus.publish(EventType.FRAME_UPDATE, frame=self.frame_count, bones_written=written)
        return written
