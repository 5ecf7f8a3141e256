"""Rig loading: scene, bone lookup and bind poses are built together."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from poseforge.core.events import EventBus, EventType
from poseforge.core.scene_graph import Scene
from poseforge.coordination.bounds import SceneBoundsReporter
from poseforge.rig.bind_pose import BindPoseRegistry
from poseforge.rig.skeleton import BoneLookup

logger = logging.getLogger(__name__)


class LoadState(Enum):
    IDLE = auto()
    LOADING = auto()
    READY = auto()
    FAILED = auto()


@dataclass
class RigContext:
    """Everything derived from one successful load.

    Replaced as a whole on reload, never patched.
    """
    scene: Scene
    bones: BoneLookup
    bind_poses: BindPoseRegistry
    generation: int


class LoadingPipeline:
    """Runs the model loader and rebuilds the per-load rig state.

    A loader failure is the one user-visible error: the pipeline enters
    FAILED, keeps the message for display and waits for :meth:`retry`.
    """

    def __init__(
        self,
        loader: Callable[[], Scene],
        event_bus: EventBus,
        bounds: Optional[SceneBoundsReporter] = None,
    ):
        self.loader = loader
        self.event_bus = event_bus
        self.bounds = bounds or SceneBoundsReporter(event_bus)
        self.state = LoadState.IDLE
        self.error: Optional[str] = None
        self.rig: Optional[RigContext] = None
        self._generation = 0

    def load(self) -> bool:
        """(Re)load the model.  Returns True on success."""
        self.state = LoadState.LOADING
        self.error = None
        self.event_bus.publish(EventType.LOADING_STARTED)

        try:
            scene = self.loader()
        except Exception as e:
            logger.exception("Model load failed")
            self.rig = None
            self.state = LoadState.FAILED
            self.error = str(e) or type(e).__name__
            self.event_bus.publish(EventType.LOAD_FAILED, error=self.error)
            return False

        scene.update_world_matrix(force=True)
        bones = BoneLookup.from_scene(scene)
        bind_poses = BindPoseRegistry()
        bind_poses.populate(bones.values())
        self.bounds.reset()

        self._generation += 1
        self.rig = RigContext(
            scene=scene, bones=bones, bind_poses=bind_poses, generation=self._generation,
        )
        self.state = LoadState.READY
        logger.info("Rig loaded: %d bones (generation %d)", len(bones), self._generation)

        self.event_bus.publish(EventType.BONES_DISCOVERED, bone_names=bones.names)
        self.event_bus.publish(EventType.LOADING_COMPLETE, bone_count=len(bones))
        self.bounds.report(scene)
        return True

    def retry(self) -> bool:
        """Reload after a failure.  No-op when already loaded."""
        if self.state is LoadState.READY:
            return True
        return self.load()

    @property
    def is_ready(self) -> bool:
        return self.state is LoadState.READY
