"""
Motion Capture Configuration Settings

All configuration constants for the skeletal animation system.
Modify these values to change parsing and playback behavior.
"""

from pathlib import Path

# ============================================================================
# Project Paths
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ASSETS_DIR = PROJECT_ROOT / "assets"
MOCAP_DIR = ASSETS_DIR / "mocap"

# ============================================================================
# Units
# ============================================================================

# Acclaim mocap files store distances in inches scaled by 1/0.45.
# Multiplying by this factor converts root positions and bone lengths to meters.
MOCAP_UNITS_TO_METERS = 0.056444

# ============================================================================
# Skeleton File (ASF) Format
# ============================================================================

# The only root channel order the parser accepts
ASF_ROOT_CHANNEL_ORDER = ("TX", "TY", "TZ", "RX", "RY", "RZ")

# Euler angles in axis/orientation lines are listed X, Y, Z
ASF_AXIS_ORDER = "XYZ"

# ============================================================================
# Motion File (AMC) Format
# ============================================================================

AMC_ROOT_NAME = "root"        # Synthetic bone carrying root translation/orientation
AMC_RADIANS_HEADER = ":RADIANS"  # Header flag that disables degree conversion

# ============================================================================
# Playback Settings
# ============================================================================

DEFAULT_ANIMATION_FPS = 60  # Frames per second of the source mocap data
DEFAULT_USE_ABSOLUTE_ROOT_MOTION = True  # False = accumulate root deltas instead

# Added to time * fps before flooring so accumulated 1/fps steps
# land on the intended frame despite float drift
FRAME_TIME_EPSILON = 1e-6
