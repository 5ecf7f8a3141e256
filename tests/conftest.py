"""Shared fixtures: a small rig matching the default rig profile."""

import pytest

from poseforge.core.mesh import BufferGeometry, MeshInstance
from poseforge.core.scene_graph import Scene, SceneNode
from poseforge.rig.skeleton import RigProfile

BONE_NAMES = [
    "Bip001_Pelvis",
    "Bip001_Spine2_052",
    "Bip001_Neck_086",
    "Bip001_Head_087",
    "Bip001_L_UpperArm_061",
    "Bip001_L_Forearm_062",
    "Bip001_R_UpperArm_092",
    "Bip001_R_Forearm_093",
]


def build_rig_scene(skip: tuple[str, ...] = (), with_mesh: bool = True) -> Scene:
    """Pelvis → spine → neck → head, spine → arms.  Bones in *skip* are left out."""
    scene = Scene()
    nodes = {name: SceneNode(name, is_bone=True) for name in BONE_NAMES if name not in skip}

    def link(parent: str, child: str):
        if parent in nodes and child in nodes:
            nodes[parent].add(nodes[child])

    link("Bip001_Pelvis", "Bip001_Spine2_052")
    link("Bip001_Spine2_052", "Bip001_Neck_086")
    link("Bip001_Neck_086", "Bip001_Head_087")
    link("Bip001_Spine2_052", "Bip001_L_UpperArm_061")
    link("Bip001_L_UpperArm_061", "Bip001_L_Forearm_062")
    link("Bip001_Spine2_052", "Bip001_R_UpperArm_092")
    link("Bip001_R_UpperArm_092", "Bip001_R_Forearm_093")

    for name, node in nodes.items():
        if node.parent is None:
            scene.add(node)

    if with_mesh:
        body = SceneNode("body_mesh")
        body.mesh = MeshInstance(
            name="body",
            geometry=BufferGeometry(positions=[[-1, 0, -0.5], [1, 2, 0.5]]),
        )
        scene.add(body)

    scene.update_world_matrix(force=True)
    return scene


def make_points(overrides: dict[int, tuple] | None = None, count: int = 33) -> list[tuple]:
    """Landmark list with every point at the image center unless overridden."""
    points = [(0.5, 0.5, 0.0)] * count
    points = list(points)
    for idx, value in (overrides or {}).items():
        points[idx] = value
    return points


@pytest.fixture
def profile() -> RigProfile:
    return RigProfile()


@pytest.fixture
def rig_scene() -> Scene:
    return build_rig_scene()
