"""Minimal scene graph for a skinned character, shaped like Three.js Object3D.

Bones are ordinary nodes flagged with ``is_bone``.  Rotation is kept as
Euler angles (radians, ``rotation_order``) exactly like ``Object3D.rotation``
so bind poses and offsets can be added channel by channel.
"""

from typing import Callable, Optional

from poseforge.core.math_utils import (
    Mat4, Vec3, as_vec3, mat4_compose, mat4_identity, vec3,
)
from poseforge.core.mesh import MeshInstance


class SceneNode:
    """One node of the hierarchy.

    Local matrix = T(position) · R(rotation) · S(scale);
    world matrix = parent.world_matrix @ local matrix.
    """

    def __init__(self, name: str = "", is_bone: bool = False):
        self.name = name
        self.is_bone = is_bone
        self.parent: Optional["SceneNode"] = None
        self.children: list["SceneNode"] = []

        self.position: Vec3 = vec3()
        self.rotation: Vec3 = vec3()
        self.rotation_order = "XYZ"
        self.scale: Vec3 = vec3(1.0, 1.0, 1.0)

        self.local_matrix: Mat4 = mat4_identity()
        self.world_matrix: Mat4 = mat4_identity()

        self.visible = True
        self.mesh: Optional[MeshInstance] = None

        self._dirty = True

    # ── Hierarchy ─────────────────────────────────────────────────────

    def add(self, child: "SceneNode") -> "SceneNode":
        """Attach *child*, detaching it from any previous parent."""
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        child._dirty = True
        return self

    def remove(self, child: "SceneNode") -> "SceneNode":
        if child in self.children:
            self.children.remove(child)
            child.parent = None
        return self

    def traverse(self, callback: Callable[["SceneNode"], None], visible_only: bool = False) -> None:
        """Depth-first visit; hidden subtrees are skipped with *visible_only*."""
        if visible_only and not self.visible:
            return
        callback(self)
        for child in self.children:
            child.traverse(callback, visible_only)

    def find(self, name: str) -> Optional["SceneNode"]:
        """First node named *name* in depth-first order."""
        found: list[SceneNode] = []

        def _match(node: "SceneNode"):
            if not found and node.name == name:
                found.append(node)

        self.traverse(_match)
        return found[0] if found else None

    # ── Transform ─────────────────────────────────────────────────────

    def set_position(self, x: float, y: float, z: float) -> "SceneNode":
        return self.set_transform(self.rotation, (x, y, z))

    def set_rotation(self, x: float, y: float, z: float) -> "SceneNode":
        return self.set_transform((x, y, z), self.position)

    def set_scale(self, x: float, y: float, z: float) -> "SceneNode":
        self.scale = vec3(x, y, z)
        self._dirty = True
        return self

    def set_transform(self, rotation, position) -> "SceneNode":
        """Overwrite local rotation and position in one step."""
        self.rotation = as_vec3(rotation)
        self.position = as_vec3(position)
        self._dirty = True
        return self

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def update_local_matrix(self) -> None:
        self.local_matrix = mat4_compose(self.position, self.rotation, self.scale, self.rotation_order)
        self._dirty = False

    def update_world_matrix(self, force: bool = False) -> None:
        """Refresh this subtree's world matrices, rebuilding dirty local ones."""
        if force or self._dirty:
            self.update_local_matrix()
        parent_world = self.parent.world_matrix if self.parent is not None else mat4_identity()
        self.world_matrix = parent_world @ self.local_matrix
        for child in self.children:
            child.update_world_matrix(force)

    def get_world_position(self) -> Vec3:
        return self.world_matrix[:3, 3].copy()


class Scene(SceneNode):
    """Root node of a loaded character."""

    def __init__(self):
        super().__init__(name="scene")

    def update(self) -> None:
        """Commit pending transform edits to world matrices."""
        self.update_world_matrix()

    def collect_bones(self) -> list[SceneNode]:
        """Bone nodes in depth-first order."""
        bones: list[SceneNode] = []
        self.traverse(lambda node: bones.append(node) if node.is_bone else None)
        return bones

    def collect_meshes(self) -> list[tuple[MeshInstance, Mat4]]:
        """Visible meshes paired with their world matrices."""
        meshes: list[tuple[MeshInstance, Mat4]] = []

        def _collect(node: SceneNode):
            if node.mesh is not None and node.mesh.visible:
                meshes.append((node.mesh, node.world_matrix))

        self.traverse(_collect, visible_only=True)
        return meshes
