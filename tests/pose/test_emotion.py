"""Tests for emotion-driven posture."""

import pytest

from conftest import BONE_NAMES
from poseforge.core.state import Emotion
from poseforge.pose import emotion as emotion_module
from poseforge.pose.emotion import DEFAULT_EMOTION_POSES, EmotionPoser, load_emotion_poses

HEAD = "Bip001_Head_087"
NECK = "Bip001_Neck_086"
SPINE = "Bip001_Spine2_052"


@pytest.fixture
def bones():
    return {name: object() for name in BONE_NAMES}


@pytest.mark.parametrize("emotion,head_x,head_y,spine_x", [
    (Emotion.NEUTRAL, 0.0, 0.0, 0.0),
    (Emotion.HAPPY, -0.25, 0.0, 0.15),
    (Emotion.SAD, 0.4, 0.0, -0.25),
    (Emotion.ANGRY, 0.15, 0.25, -0.2),
])
def test_emotion_table(profile, bones, emotion, head_x, head_y, spine_x):
    targets = EmotionPoser(profile).targets(emotion, bones)
    assert targets[HEAD] == {0: head_x, 1: head_y}
    assert targets[SPINE] == {0: spine_x}
    assert NECK not in targets


def test_emotion_by_value(profile, bones):
    assert EmotionPoser(profile).targets("sad", bones)[HEAD][0] == 0.4


@pytest.mark.parametrize("missing", [HEAD, NECK, SPINE])
def test_missing_bone_gives_no_targets(profile, bones, missing):
    del bones[missing]
    assert EmotionPoser(profile).targets(Emotion.HAPPY, bones) == {}


def test_targets_are_copies(profile, bones):
    poser = EmotionPoser(profile)
    poser.targets(Emotion.HAPPY, bones)[HEAD][0] = 99.0
    assert poser.targets(Emotion.HAPPY, bones)[HEAD][0] == -0.25


def test_config_table_matches_builtin():
    assert load_emotion_poses() == DEFAULT_EMOTION_POSES


def test_missing_config_falls_back(monkeypatch):
    def raise_missing(name):
        raise FileNotFoundError(name)

    monkeypatch.setattr(emotion_module, "load_config", raise_missing)
    assert load_emotion_poses() is DEFAULT_EMOTION_POSES


def test_incomplete_config_rejected(monkeypatch):
    monkeypatch.setattr(emotion_module, "load_config", lambda name: {"neutral": {}})
    with pytest.raises(ValueError):
        load_emotion_poses()
