"""Tests for the frame delta clock."""

from types import SimpleNamespace

from poseforge.core import clock as clock_module
from poseforge.core.clock import DeltaClock


def _fake_time(monkeypatch, *values):
    times = iter(values)
    monkeypatch.setattr(clock_module, "time", SimpleNamespace(perf_counter=lambda: next(times)))


def test_delta_is_clamped(monkeypatch):
    _fake_time(monkeypatch, 0.0, 5.0)
    clock = DeltaClock(max_delta=0.1)
    assert clock.get_delta() == 0.1
    assert clock.frame_count == 1


def test_delta_small_step(monkeypatch):
    _fake_time(monkeypatch, 1.0, 1.016)
    clock = DeltaClock()
    assert abs(clock.get_delta() - 0.016) < 1e-9


def test_reset_restarts_interval(monkeypatch):
    _fake_time(monkeypatch, 0.0, 10.0, 10.02)
    clock = DeltaClock()
    clock.reset()
    assert abs(clock.get_delta() - 0.02) < 1e-9
