"""Shared constants and paths for PoseForge."""

from pathlib import Path

# Package paths
PACKAGE_DIR = Path(__file__).parent
CONFIG_DIR = PACKAGE_DIR / "config"

# Landmark indices (MediaPipe Pose numbering)
NOSE = 0
LEFT_EAR = 7
RIGHT_EAR = 8
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_ELBOW = 13
RIGHT_ELBOW = 14
LEFT_WRIST = 15
RIGHT_WRIST = 16

REQUIRED_LANDMARKS = (
    NOSE, LEFT_EAR, RIGHT_EAR,
    LEFT_SHOULDER, RIGHT_SHOULDER,
    LEFT_ELBOW, RIGHT_ELBOW,
    LEFT_WRIST, RIGHT_WRIST,
)
MIN_LANDMARK_COUNT = max(REQUIRED_LANDMARKS) + 1  # 17

# Detector confidence below which a required landmark counts as lost
MIN_LANDMARK_VISIBILITY = 0.5

# Retarget gains (multiples of pi per unit of normalized displacement)
ARM_GAIN = 2.0
HEAD_YAW_GAIN = 3.0
HEAD_PITCH_GAIN = 2.0
HEAD_ROLL_GAIN = 2.0

# Smoothing blend factors (fraction of the remaining distance per tick)
RETARGET_BLEND = 0.2
EMOTION_BLEND = 0.1

# Manual offset ranges (control surface hints, enforced by clamping)
ROTATION_LIMIT_DEG = 90.0
POSITION_LIMIT = 0.2

# Frame clock
MAX_DELTA_TIME = 0.1  # Clamp dt to avoid large jumps after a stall
