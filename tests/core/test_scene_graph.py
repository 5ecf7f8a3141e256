"""Tests for scene graph module."""

import numpy as np

from poseforge.core.scene_graph import SceneNode, Scene
from poseforge.core.mesh import BufferGeometry, MeshInstance


def _make_mesh(name="test"):
    geom = BufferGeometry(positions=np.array([0, 0, 0, 1, 0, 0, 0, 1, 0], dtype=np.float32))
    return MeshInstance(name=name, geometry=geom)


def test_node_hierarchy():
    parent = SceneNode(name="parent")
    child = SceneNode(name="child")
    parent.add(child)
    assert child.parent is parent
    assert child in parent.children


def test_node_reparent():
    p1 = SceneNode(name="p1")
    p2 = SceneNode(name="p2")
    child = SceneNode(name="child")
    p1.add(child)
    p2.add(child)
    assert child.parent is p2
    assert child not in p1.children


def test_find():
    root = SceneNode(name="root")
    a = SceneNode(name="a")
    target = SceneNode(name="target")
    root.add(a)
    a.add(target)
    assert root.find("target") is target
    assert root.find("nonexistent") is None


def test_world_matrix_propagation():
    root = SceneNode(name="root")
    root.set_position(10, 0, 0)
    child = SceneNode(name="child")
    child.set_position(5, 0, 0)
    root.add(child)
    root.update_world_matrix(force=True)
    np.testing.assert_array_almost_equal(child.get_world_position(), [15, 0, 0])


def test_euler_rotation_propagates():
    root = SceneNode(name="root")
    root.set_rotation(0, 0, np.pi / 2)
    child = SceneNode(name="child")
    child.set_position(1, 0, 0)
    root.add(child)
    root.update_world_matrix(force=True)
    np.testing.assert_array_almost_equal(child.get_world_position(), [0, 1, 0])


def test_set_transform_marks_dirty():
    node = SceneNode(name="bone", is_bone=True)
    node.update_local_matrix()
    assert not node.is_dirty
    node.set_transform((0.1, 0.2, 0.3), (1, 2, 3))
    assert node.is_dirty
    np.testing.assert_array_almost_equal(node.rotation, [0.1, 0.2, 0.3])
    np.testing.assert_array_almost_equal(node.position, [1, 2, 3])


def test_collect_bones_in_traversal_order():
    scene = Scene()
    a = SceneNode("a", is_bone=True)
    b = SceneNode("b")
    c = SceneNode("c", is_bone=True)
    scene.add(a)
    a.add(b)
    b.add(c)
    assert [n.name for n in scene.collect_bones()] == ["a", "c"]


def test_invisible_node_not_collected():
    scene = Scene()
    node = SceneNode(name="hidden")
    node.mesh = _make_mesh()
    node.visible = False
    scene.add(node)
    scene.update()
    assert scene.collect_meshes() == []


def test_scale_propagation():
    root = SceneNode(name="root")
    root.set_scale(2, 2, 2)
    child = SceneNode(name="child")
    child.set_position(1, 0, 0)
    root.add(child)
    root.update_world_matrix(force=True)
    np.testing.assert_array_almost_equal(child.get_world_position(), [2, 0, 0])


def test_geometry_bounding_box():
    geom = BufferGeometry(positions=[[-1, 0, 2], [3, -4, 5]])
    lo, hi = geom.get_bounding_box()
    np.testing.assert_array_almost_equal(lo, [-1, -4, 2])
    np.testing.assert_array_almost_equal(hi, [3, 0, 5])
    assert BufferGeometry(positions=[]).get_bounding_box() is None
