"""Landmark records, frame validation and the detector-space normalizer.

Detector space: x, y are image fractions in [0, 1] with y pointing down,
z is relative depth where more negative means closer to the camera.
Normalized space centers the image, makes "up" positive and makes
"toward the camera" positive.
"""

import math
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Iterable, Sequence

import numpy as np
from numpy.typing import NDArray

from poseforge.core.math_utils import Vec3, normalize as normalize_vec, vec3
from poseforge.constants import (
    MIN_LANDMARK_COUNT, MIN_LANDMARK_VISIBILITY, REQUIRED_LANDMARKS,
)


class MalformedFrameError(ValueError):
    """Raised when raw estimator output cannot form a LandmarkFrame."""


@dataclass(frozen=True)
class Landmark:
    x: float
    y: float
    z: float = 0.0
    visibility: float = 1.0

    @classmethod
    def from_raw(cls, raw: Any) -> "Landmark":
        """Build from a tuple, a dict or an object with x/y/z attributes."""
        if isinstance(raw, Landmark):
            return raw
        if isinstance(raw, dict):
            values = (raw.get("x"), raw.get("y"), raw.get("z", 0.0),
                      raw.get("visibility", 1.0))
        elif isinstance(raw, (tuple, list, np.ndarray)):
            if not 2 <= len(raw) <= 4:
                raise MalformedFrameError(f"Landmark needs 2-4 components, got {len(raw)}")
            values = tuple(raw) + (0.0, 1.0)[len(raw) - 2:]
        elif hasattr(raw, "x") and hasattr(raw, "y"):
            values = (raw.x, raw.y, getattr(raw, "z", 0.0),
                      getattr(raw, "visibility", 1.0))
        else:
            raise MalformedFrameError(f"Unsupported landmark type: {type(raw).__name__}")

        try:
            x, y, z, vis = (float(v) for v in values)
        except (TypeError, ValueError) as e:
            raise MalformedFrameError(f"Non-numeric landmark component: {e}") from e
        if not all(math.isfinite(v) for v in (x, y, z, vis)):
            raise MalformedFrameError("Landmark contains a non-finite component")
        return cls(x, y, z, vis)


def normalize(landmark: Landmark) -> Vec3:
    """Map detector coordinates to centered, up-positive, toward-camera-positive."""
    return vec3(landmark.x - 0.5, -(landmark.y - 0.5), -landmark.z)


def angle_between(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> float:
    """Angle at vertex *b* between rays b→a and b→c, in [0, pi].

    Returns 0.0 when either ray has zero length.
    """
    va = normalize_vec(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64))
    vc = normalize_vec(np.asarray(c, dtype=np.float64) - np.asarray(b, dtype=np.float64))
    if not va.any() or not vc.any():
        return 0.0
    return float(np.arccos(np.clip(np.dot(va, vc), -1.0, 1.0)))


class LandmarkFrame:
    """Validated, immutable sequence of landmarks in anatomical index order."""

    def __init__(self, landmarks: Iterable[Landmark]):
        self._landmarks: tuple[Landmark, ...] = tuple(landmarks)
        if len(self._landmarks) < MIN_LANDMARK_COUNT:
            raise MalformedFrameError(
                f"Frame has {len(self._landmarks)} landmarks, need {MIN_LANDMARK_COUNT}"
            )

    @classmethod
    def from_points(
        cls,
        points: Any,
        min_visibility: float = MIN_LANDMARK_VISIBILITY,
    ) -> "LandmarkFrame":
        """Validate raw estimator output.

        Raises MalformedFrameError for short frames, bad components, or
        when any landmark the retargeter needs falls below *min_visibility*.
        """
        if points is None:
            raise MalformedFrameError("No landmarks")
        try:
            raw = list(points)
        except TypeError as e:
            raise MalformedFrameError(f"Landmarks are not a sequence: {e}") from e
        frame = cls(Landmark.from_raw(p) for p in raw)
        for idx in REQUIRED_LANDMARKS:
            if frame[idx].visibility < min_visibility:
                raise MalformedFrameError(
                    f"Landmark {idx} visibility {frame[idx].visibility:.2f} "
                    f"below {min_visibility:.2f}"
                )
        return frame

    def __len__(self) -> int:
        return len(self._landmarks)

    def __getitem__(self, index: int) -> Landmark:
        return self._landmarks[index]

    def __iter__(self):
        return iter(self._landmarks)

    @cached_property
    def points(self) -> NDArray[np.float64]:
        """(N, 3) array of every landmark in detector space."""
        return np.array([(lm.x, lm.y, lm.z) for lm in self._landmarks], dtype=np.float64)

    @cached_property
    def normalized(self) -> NDArray[np.float64]:
        """(N, 3) array of every landmark in normalized space."""
        return np.array([normalize(lm) for lm in self._landmarks], dtype=np.float64)

    def point(self, index: int) -> Vec3:
        """Normalized position of one landmark."""
        return self.normalized[index].copy()
