"""Tests for input state, emotions and bone transforms."""

import pytest

from conftest import make_points
from poseforge.core.state import BoneTransform, Emotion, FrameInputs, InputState
from poseforge.pose.landmarks import LandmarkFrame


def test_emotion_from_key():
    assert Emotion.from_key("1") is Emotion.NEUTRAL
    assert Emotion.from_key("H") is Emotion.HAPPY
    assert Emotion.from_key("3") is Emotion.SAD
    assert Emotion.from_key("a") is Emotion.ANGRY
    assert Emotion.from_key("x") is None
    assert Emotion.from_key("") is None


def test_bone_transform_defaults_zero():
    t = BoneTransform()
    assert t.is_zero
    assert t.to_dict() == {"rotation": [0.0, 0.0, 0.0], "position": [0.0, 0.0, 0.0]}


def test_bone_transform_with_axis_returns_copy():
    t = BoneTransform()
    r = t.with_axis("rotation", 1, 30.0)
    p = r.with_axis("position", 2, 0.1)
    assert t.is_zero
    assert r.rotation == (0.0, 30.0, 0.0)
    assert p.rotation == (0.0, 30.0, 0.0)
    assert p.position == (0.0, 0.0, 0.1)


@pytest.mark.parametrize("kind,axis", [("scale", 0), ("rotation", 3), ("position", -1)])
def test_bone_transform_rejects_bad_component(kind, axis):
    with pytest.raises(ValueError):
        BoneTransform().with_axis(kind, axis, 1.0)


def test_input_state_last_value_wins():
    state = InputState()
    first = LandmarkFrame.from_points(make_points())
    second = LandmarkFrame.from_points(make_points({0: (0.6, 0.4, 0.0)}))
    state.set_landmarks(first)
    state.set_landmarks(second)
    snap = state.snapshot()
    assert snap.landmarks is second
    assert state.frames_received == 2


def test_input_state_mark_lost():
    state = InputState()
    state.set_landmarks(LandmarkFrame.from_points(make_points()))
    state.mark_lost("tracking lost")
    assert state.snapshot().landmarks is None
    assert not state.snapshot().has_detection
    assert state.last_error == "tracking lost"


def test_snapshot_is_independent_of_later_writes():
    state = InputState()
    state.set_emotion(Emotion.SAD)
    snap = state.snapshot()
    state.set_emotion(Emotion.HAPPY)
    assert snap.emotion is Emotion.SAD


def test_frame_inputs_defaults():
    inputs = FrameInputs()
    assert inputs.emotion is Emotion.NEUTRAL
    assert not inputs.has_detection
