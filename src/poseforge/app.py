"""PoseForge application entry point.

Wires together all systems: event bus, input state, rig loading, pose
compositing, the control-surface bridge and camera framing.  Rendering and
landmark capture stay outside; they talk to the app through ``tick`` and
``on_landmarks``.
"""

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any, Callable, Optional

from poseforge.animation.manual_offsets import ManualOffsetLayer
from poseforge.animation.smoothing import SmoothingProfile
from poseforge.constants import MIN_LANDMARK_VISIBILITY
from poseforge.core.clock import DeltaClock
from poseforge.core.config_loader import load_config, load_json
from poseforge.core.events import EventBus, EventType
from poseforge.core.scene_graph import Scene
from poseforge.core.state import Emotion, InputState
from poseforge.coordination.compositor import PoseCompositor
from poseforge.coordination.control_surface import ControlSurfaceBridge
from poseforge.coordination.loading_pipeline import LoadingPipeline
from poseforge.coordination.render_context import RenderContextMonitor
from poseforge.coordination.simulation import Simulation
from poseforge.loaders.rig_parser import load_rig
from poseforge.pose.emotion import EmotionPoser
from poseforge.pose.landmarks import LandmarkFrame, MalformedFrameError
from poseforge.pose.retargeter import PoseRetargeter
from poseforge.rendering.camera import Camera
from poseforge.rig.skeleton import RigProfile, load_rig_profile

logger = logging.getLogger(__name__)


def _load_min_visibility() -> float:
    try:
        return float(load_config("pose_engine.json").get(
            "min_landmark_visibility", MIN_LANDMARK_VISIBILITY))
    except FileNotFoundError:
        return MIN_LANDMARK_VISIBILITY


class PoseForgeApp:
    """Headless engine facade used by a render loop and input callbacks."""

    def __init__(
        self,
        loader: Callable[[], Scene],
        profile: Optional[RigProfile] = None,
        smoothing: Optional[SmoothingProfile] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.profile = profile or load_rig_profile()
        self.inputs = InputState()
        self.offsets = ManualOffsetLayer.from_config()
        self.min_visibility = _load_min_visibility()

        self.pipeline = LoadingPipeline(loader, self.event_bus)
        self.context = RenderContextMonitor(self.event_bus)
        self.compositor = PoseCompositor(
            PoseRetargeter(self.profile),
            EmotionPoser.load(self.profile),
            smoothing or SmoothingProfile.load(),
        )
        self.simulation = Simulation(
            self.inputs, self.pipeline, self.compositor, self.offsets,
            self.event_bus, context=self.context,
        )
        self.controls = ControlSurfaceBridge(self.offsets, self.event_bus)
        self.camera = Camera()
        self.camera.attach(self.event_bus)
        self.clock = DeltaClock()

    @classmethod
    def from_rig_file(cls, path: Path, **kwargs: Any) -> "PoseForgeApp":
        return cls(lambda: load_rig(path), **kwargs)

    # ── Lifecycle ─────────────────────────────────────────────────────

    def load(self) -> bool:
        ok = self.pipeline.load()
        self.clock.reset()
        return ok

    def retry(self) -> bool:
        return self.pipeline.retry()

    @property
    def load_error(self) -> Optional[str]:
        return self.pipeline.error

    def tick(self, dt: Optional[float] = None) -> int:
        """Run one frame.  Uses the wall clock when *dt* is not given."""
        if dt is None:
            dt = self.clock.get_delta()
        return self.simulation.step(dt)

    def on_context_lost(self) -> None:
        self.context.on_lost()

    def on_context_restored(self) -> None:
        self.context.on_restored()
        self.clock.reset()

    # ── Inputs ────────────────────────────────────────────────────────

    def on_landmarks(self, raw: Any) -> bool:
        """Landmark push callback.  Returns True if the frame was accepted."""
        try:
            frame = LandmarkFrame.from_points(raw, min_visibility=self.min_visibility)
        except MalformedFrameError as e:
            logger.debug("Landmark frame rejected: %s", e)
            self.inputs.mark_lost(str(e))
            self.event_bus.publish(EventType.LANDMARKS_RECEIVED, detected=False)
            return False
        self.inputs.set_landmarks(frame)
        self.event_bus.publish(EventType.LANDMARKS_RECEIVED, detected=True)
        return True

    def set_emotion(self, emotion: Emotion) -> None:
        self.inputs.set_emotion(emotion)
        self.event_bus.publish(EventType.EMOTION_SET, emotion=self.inputs.emotion)

    def on_key(self, key: str) -> bool:
        """Keyboard emotion selection.  Returns True if the key was handled."""
        emotion = Emotion.from_key(key)
        if emotion is None:
            return False
        self.set_emotion(emotion)
        return True

    def replay(self, frames: list, ticks_per_frame: int = 1, dt: float = 1.0 / 30.0) -> int:
        """Feed recorded frames (``None`` = no detection) and tick after each.

        Returns the number of accepted frames.
        """
        accepted = 0
        for raw in frames:
            if self.on_landmarks(raw):
                accepted += 1
            for _ in range(ticks_per_frame):
                self.tick(dt)
        return accepted


def main(argv=None) -> int:
    """Replay a landmark recording against a rig and print the final pose."""
    parser = argparse.ArgumentParser(description="Replay landmark recordings through PoseForge")
    parser.add_argument("rig", type=Path, help="JSON rig description")
    parser.add_argument("recording", type=Path, help="JSON list of landmark frames")
    parser.add_argument("--emotion", choices=[e.value for e in Emotion], default="neutral")
    parser.add_argument("--ticks-per-frame", type=int, default=1)
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    # Enable logging so load failures and config warnings are visible
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(name)s: %(message)s",
    )

    app = PoseForgeApp.from_rig_file(args.rig)
    if not app.load():
        print(f"Model load failed: {app.load_error}", file=sys.stderr)
        return 1
    app.set_emotion(Emotion(args.emotion))

    frames = load_json(args.recording)
    accepted = app.replay(frames, args.ticks_per_frame)
    logger.info("Replayed %d frames (%d accepted)", len(frames), accepted)

    result = {
        name: [round(math.degrees(v), 3) for v in pose.rotation]
        for name, pose in app.simulation.last_poses.items()
    }
    if args.json:
        print(json.dumps(result, indent=2))
    else:
        for name, degrees in result.items():
            print(f"{name:32s} {degrees[0]:9.3f} {degrees[1]:9.3f} {degrees[2]:9.3f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
