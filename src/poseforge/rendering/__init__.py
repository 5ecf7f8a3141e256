"""Rendering-side consumers of engine events (camera framing)."""

from poseforge.rendering.camera import Camera
