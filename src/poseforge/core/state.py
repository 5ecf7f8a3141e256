"""Input state shared between the capture callbacks and the frame tick."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from poseforge.pose.landmarks import LandmarkFrame


class Emotion(str, Enum):
    NEUTRAL = "neutral"
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"

    @classmethod
    def from_key(cls, key: str) -> Optional["Emotion"]:
        """Map a key press (``1``-``4`` or an initial letter) to an emotion."""
        return _KEY_MAP.get(key.lower()) if key else None


_KEY_MAP = {
    "1": Emotion.NEUTRAL, "n": Emotion.NEUTRAL,
    "2": Emotion.HAPPY, "h": Emotion.HAPPY,
    "3": Emotion.SAD, "s": Emotion.SAD,
    "4": Emotion.ANGRY, "a": Emotion.ANGRY,
}


TRANSFORM_KINDS = ("rotation", "position")


@dataclass(frozen=True)
class BoneTransform:
    """Manual per-bone offset: rotation in degrees, position in scene units."""
    rotation: tuple[float, float, float] = (0.0, 0.0, 0.0)
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def with_axis(self, kind: str, axis: int, value: float) -> "BoneTransform":
        """Return a copy with one component replaced."""
        if kind not in TRANSFORM_KINDS:
            raise ValueError(f"Unknown transform kind: {kind!r}")
        if not 0 <= axis <= 2:
            raise ValueError(f"Axis index out of range: {axis}")
        values = list(getattr(self, kind))
        values[axis] = float(value)
        if kind == "rotation":
            return BoneTransform(rotation=tuple(values), position=self.position)
        return BoneTransform(rotation=self.rotation, position=tuple(values))

    @property
    def is_zero(self) -> bool:
        return not any(self.rotation) and not any(self.position)

    def to_dict(self) -> dict[str, list[float]]:
        return {"rotation": list(self.rotation), "position": list(self.position)}


@dataclass(frozen=True)
class FrameInputs:
    """Inputs read by value at the start of a frame tick."""
    emotion: Emotion = Emotion.NEUTRAL
    landmarks: Optional[LandmarkFrame] = None

    @property
    def has_detection(self) -> bool:
        return self.landmarks is not None


@dataclass
class InputState:
    """Latest emotion and landmark frame, last-value-wins.

    Written by input callbacks at their own rate, read once per tick via
    :meth:`snapshot`.
    """
    emotion: Emotion = Emotion.NEUTRAL
    landmarks: Optional[LandmarkFrame] = None
    frames_received: int = 0
    frames_rejected: int = 0
    _last_error: Optional[str] = field(default=None, repr=False)

    def set_emotion(self, emotion: Emotion) -> None:
        self.emotion = Emotion(emotion)

    def set_landmarks(self, frame: Optional[LandmarkFrame]) -> None:
        self.landmarks = frame
        self.frames_received += 1

    def mark_lost(self, reason: str) -> None:
        """Record a rejected or empty frame as a detection loss."""
        self.landmarks = None
        self.frames_rejected += 1
        self._last_error = reason

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def snapshot(self) -> FrameInputs:
        return FrameInputs(emotion=self.emotion, landmarks=self.landmarks)
