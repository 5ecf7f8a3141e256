"""Mesh data structures for geometry storage (no renderer dependencies)."""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray


@dataclass
class BufferGeometry:
    """Stores vertex positions for a mesh.

    positions: flat or (N, 3) float32 array (x,y,z per vertex)
    indices: triangle index array (uint32), optional
    """
    positions: NDArray[np.float32]
    indices: Optional[NDArray[np.uint32]] = None
    vertex_count: int = 0

    def __post_init__(self):
        self.positions = np.asarray(self.positions, dtype=np.float32).ravel()
        if self.indices is not None:
            self.indices = np.asarray(self.indices, dtype=np.uint32).ravel()
        if self.vertex_count == 0:
            self.vertex_count = len(self.positions) // 3

    def as_points(self) -> NDArray[np.float32]:
        return self.positions.reshape(-1, 3)

    def get_bounding_box(self) -> Optional[tuple[NDArray, NDArray]]:
        """Return (min, max) corners in local space, or None when empty."""
        if self.vertex_count == 0:
            return None
        pts = self.as_points().astype(np.float64)
        return pts.min(axis=0), pts.max(axis=0)


@dataclass
class MeshInstance:
    """Geometry attached to a scene node."""
    name: str
    geometry: BufferGeometry
    visible: bool = True
