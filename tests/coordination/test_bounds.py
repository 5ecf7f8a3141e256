"""Tests for one-shot scene bounds reporting."""

import pytest

from conftest import build_rig_scene
from poseforge.core.events import EventBus, EventType
from poseforge.core.mesh import BufferGeometry, MeshInstance
from poseforge.core.scene_graph import Scene, SceneNode
from poseforge.coordination.bounds import (
    BoundsState, SceneBoundsReporter, compute_scene_bounds,
)


def _collect(bus):
    received = []
    bus.subscribe(EventType.SCENE_BOUNDS_READY, lambda bounds: received.append(bounds))
    return received


def test_compute_bounds():
    bounds = compute_scene_bounds(build_rig_scene())
    assert bounds.center == pytest.approx((0.0, 1.0, 0.0))
    assert bounds.radius == pytest.approx(1.5)


def test_bounds_use_world_transform():
    scene = Scene()
    node = SceneNode("mesh")
    node.set_position(10.0, 0.0, 0.0)
    node.mesh = MeshInstance("m", BufferGeometry(positions=[[-1, -1, -1], [1, 1, 1]]))
    scene.add(node)
    scene.update_world_matrix(force=True)
    assert compute_scene_bounds(scene).center == pytest.approx((10.0, 0.0, 0.0))


def test_no_geometry():
    assert compute_scene_bounds(build_rig_scene(with_mesh=False)) is None


def test_single_emission():
    bus = EventBus()
    received = _collect(bus)
    reporter = SceneBoundsReporter(bus)
    scene = build_rig_scene()
    first = reporter.report(scene)
    for _ in range(5):
        assert reporter.report(scene) is None
    assert received == [first]
    assert reporter.state is BoundsState.SENT


def test_zero_radius_not_sent():
    bus = EventBus()
    received = _collect(bus)
    reporter = SceneBoundsReporter(bus)
    scene = Scene()
    node = SceneNode("point")
    node.mesh = MeshInstance("p", BufferGeometry(positions=[[1, 1, 1]]))
    scene.add(node)
    scene.update_world_matrix(force=True)
    assert reporter.report(scene) is None
    assert received == []
    assert reporter.state is BoundsState.NOT_COMPUTED


def test_retries_until_geometry_present():
    bus = EventBus()
    received = _collect(bus)
    reporter = SceneBoundsReporter(bus)
    scene = build_rig_scene(with_mesh=False)
    assert reporter.report(scene) is None

    body = SceneNode("late_mesh")
    body.mesh = MeshInstance("body", BufferGeometry(positions=[[0, 0, 0], [0, 2, 0]]))
    scene.add(body)
    scene.update_world_matrix(force=True)
    assert reporter.report(scene).radius == pytest.approx(1.0)
    assert len(received) == 1


def test_reset_allows_new_report():
    bus = EventBus()
    received = _collect(bus)
    reporter = SceneBoundsReporter(bus)
    scene = build_rig_scene()
    reporter.report(scene)
    reporter.reset()
    assert reporter.bounds is None
    reporter.report(scene)
    assert len(received) == 2
