"""Tests for the manual offset layer."""

import math

import pytest

from poseforge.animation.manual_offsets import ZERO_TRANSFORM, ManualOffsetLayer
from poseforge.core.state import BoneTransform


def test_get_unknown_bone_is_zero():
    assert ManualOffsetLayer().get("Head") == ZERO_TRANSFORM


def test_ensure_does_not_bump_version():
    layer = ManualOffsetLayer()
    layer.ensure(["A", "B"])
    assert layer.version == 0
    assert layer.active_bones() == ["A", "B"]


def test_ensure_keeps_existing_entries():
    layer = ManualOffsetLayer()
    layer.set_component("A", "rotation", 0, 10.0)
    layer.ensure(["A"])
    assert layer.get("A").rotation == (10.0, 0.0, 0.0)


def test_set_component_clamps():
    layer = ManualOffsetLayer(rotation_limit=90.0, position_limit=0.2)
    assert layer.set_component("A", "rotation", 1, 400.0).rotation == (0.0, 90.0, 0.0)
    assert layer.set_component("A", "position", 2, -3.0).position == (0.0, 0.0, -0.2)
    assert layer.get("A").rotation == (0.0, 90.0, 0.0)


def test_set_component_rejects_non_finite():
    layer = ManualOffsetLayer()
    with pytest.raises(ValueError):
        layer.set_component("A", "rotation", 0, math.nan)
    assert layer.version == 0


def test_set_whole_entry():
    layer = ManualOffsetLayer()
    t = layer.set("A", BoneTransform(rotation=(10.0, 200.0, -5.0), position=(0.1, 0.0, 0.0)))
    assert t.rotation == (10.0, 90.0, -5.0)
    assert layer.get("A") == t


def test_every_change_bumps_version():
    layer = ManualOffsetLayer()
    layer.set_component("A", "rotation", 0, 1.0)
    layer.reset_bone("A")
    layer.reset_all()
    assert layer.version == 3


def test_reset_all_is_idempotent():
    layer = ManualOffsetLayer()
    layer.set_component("A", "rotation", 0, 45.0)
    layer.set_component("B", "position", 1, 0.1)
    layer.reset_all()
    once = layer.transforms
    layer.reset_all()
    assert layer.transforms == once
    assert all(t.is_zero for t in once.values())
    assert set(once) == {"A", "B"}


def test_reset_bone_only_touches_one():
    layer = ManualOffsetLayer()
    layer.set_component("A", "rotation", 0, 45.0)
    layer.set_component("B", "rotation", 0, 30.0)
    layer.reset_bone("A")
    assert layer.get("A").is_zero
    assert layer.get("B").rotation[0] == 30.0


def test_transforms_is_a_snapshot():
    layer = ManualOffsetLayer()
    layer.ensure(["A"])
    snap = layer.transforms
    snap["A"] = BoneTransform(rotation=(1.0, 1.0, 1.0))
    assert layer.get("A").is_zero


def test_limits_from_config():
    layer = ManualOffsetLayer.from_config()
    assert layer.rotation_limit == 90.0
    assert layer.position_limit == 0.2
