"""Replay a recorded landmark stream against a rig, headless.

Usage::

    python tools/replay_landmarks.py rig.json recording.json --emotion happy

The recording is a JSON list of frames; each frame is a list of
``[x, y, z]`` / ``[x, y, z, visibility]`` points or ``null`` for a frame
with no detection.  Prints the final rotation of every driven bone.
"""

import sys

from poseforge.app import main

if __name__ == "__main__":
    sys.exit(main())
