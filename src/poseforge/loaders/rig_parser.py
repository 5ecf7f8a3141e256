"""JSON rig description → Scene.

A rig file describes a node tree::

    {
      "name": "character",
      "nodes": [
        {"name": "Bip001_Pelvis", "bone": true,
         "position": [0, 1, 0], "rotation": [0, 0, 0],
         "mesh": {"positions": [[x, y, z], ...]},
         "children": [...]}
      ]
    }

``rotation`` is XYZ Euler in radians.  ``mesh`` is optional and only used
for scene bounds.
"""

from pathlib import Path
from typing import Any

from poseforge.core.config_loader import load_json
from poseforge.core.mesh import BufferGeometry, MeshInstance
from poseforge.core.scene_graph import Scene, SceneNode


class RigFormatError(ValueError):
    """Raised when a rig description is structurally invalid."""


def _vector(node_def: dict, key: str, default: tuple[float, float, float]) -> tuple[float, ...]:
    value = node_def.get(key, default)
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise RigFormatError(f"Node {node_def.get('name')!r}: {key} must have 3 components")
    try:
        return tuple(float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise RigFormatError(f"Node {node_def.get('name')!r}: bad {key}: {e}") from e


def _build_node(node_def: Any) -> SceneNode:
    if not isinstance(node_def, dict):
        raise RigFormatError(f"Node definition must be an object, got {type(node_def).__name__}")
    node = SceneNode(name=str(node_def.get("name", "")), is_bone=bool(node_def.get("bone", False)))
    node.set_position(*_vector(node_def, "position", (0.0, 0.0, 0.0)))
    node.set_rotation(*_vector(node_def, "rotation", (0.0, 0.0, 0.0)))
    node.set_scale(*_vector(node_def, "scale", (1.0, 1.0, 1.0)))
    node.visible = bool(node_def.get("visible", True))

    mesh_def = node_def.get("mesh")
    if mesh_def is not None:
        try:
            geometry = BufferGeometry(
                positions=mesh_def["positions"], indices=mesh_def.get("indices"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RigFormatError(f"Node {node.name!r}: bad mesh: {e}") from e
        node.mesh = MeshInstance(name=mesh_def.get("name", node.name), geometry=geometry)

    for child_def in node_def.get("children", []):
        node.add(_build_node(child_def))
    return node


def parse_rig(data: dict) -> Scene:
    """Build a Scene from a parsed rig description."""
    if not isinstance(data, dict) or "nodes" not in data:
        raise RigFormatError("Rig description needs a top-level 'nodes' list")
    scene = Scene()
    for node_def in data["nodes"]:
        scene.add(_build_node(node_def))
    scene.update_world_matrix(force=True)
    return scene


def load_rig(path: Path) -> Scene:
    """Load a rig description file from disk."""
    return parse_rig(load_json(Path(path)))
