"""NumPy helpers for Euler-rotated bone transforms.

Vectors are float64 arrays of shape (3,).  Matrices are 4x4 with column
vectors and the translation in the last column.  Euler angles are radians
applied in the named order the way Three.js does it: order "XYZ" means
``R = Rx @ Ry @ Rz``.
"""

import numpy as np
from numpy.typing import NDArray

# Type aliases
Vec3 = NDArray[np.float64]
Mat3 = NDArray[np.float64]
Mat4 = NDArray[np.float64]

EULER_ORDERS = ("XYZ", "XZY", "YXZ", "YZX", "ZXY", "ZYX")


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Vec3:
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(values) -> Vec3:
    """Coerce any 3-sequence into a fresh float64 vector."""
    v = np.asarray(values, dtype=np.float64).reshape(-1)
    if v.shape != (3,):
        raise ValueError(f"Expected 3 components, got {v.shape[0]}")
    return v.copy()


def mat4_identity() -> Mat4:
    return np.eye(4, dtype=np.float64)


def axis_rotation(axis: str, angle: float) -> Mat3:
    """3x3 rotation of *angle* radians about a principal axis."""
    c, s = np.cos(angle), np.sin(angle)
    if axis == "X":
        rows = [[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]]
    elif axis == "Y":
        rows = [[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]]
    elif axis == "Z":
        rows = [[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]]
    else:
        raise ValueError(f"Unknown axis: {axis!r}")
    return np.array(rows, dtype=np.float64)


def euler_to_mat3(angles, order: str = "XYZ") -> Mat3:
    """Rotation matrix for Euler *angles* (x, y, z) in the given order."""
    if order not in EULER_ORDERS:
        raise ValueError(f"Unsupported Euler order: {order}")
    by_axis = dict(zip("XYZ", as_vec3(angles)))
    m = np.eye(3, dtype=np.float64)
    for axis in order:
        m = m @ axis_rotation(axis, by_axis[axis])
    return m


def mat4_compose(position, rotation, scale, order: str = "XYZ") -> Mat4:
    """TRS matrix from a position, Euler rotation and per-axis scale."""
    m = mat4_identity()
    m[:3, :3] = euler_to_mat3(rotation, order) * as_vec3(scale)
    m[:3, 3] = as_vec3(position)
    return m


# Vector operations

def normalize(v: Vec3) -> Vec3:
    n = np.linalg.norm(v)
    if n < 1e-10:
        return np.zeros_like(v)
    return v / n


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def transform_points(m: Mat4, points) -> NDArray[np.float64]:
    """Transform (N, 3) points by a 4x4 matrix."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    return pts @ m[:3, :3].T + m[:3, 3]


def transform_point(m: Mat4, p) -> Vec3:
    return transform_points(m, p)[0]


def mat4_look_at(eye: Vec3, target: Vec3, up: Vec3) -> Mat4:
    """View matrix for a camera at *eye* looking at *target*."""
    eye = as_vec3(eye)
    forward = normalize(as_vec3(target) - eye)
    side = normalize(np.cross(forward, up))
    if not side.any():
        # Looking along *up*: any perpendicular will do.
        fallback = vec3(0.0, 0.0, 1.0) if abs(forward[2]) < 0.9 else vec3(1.0, 0.0, 0.0)
        side = normalize(np.cross(forward, fallback))
    true_up = np.cross(side, forward)

    view = mat4_identity()
    view[:3, :3] = np.stack([side, true_up, -forward])
    view[:3, 3] = -view[:3, :3] @ eye
    return view
