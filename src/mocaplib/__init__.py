"""
MocapLib - Skeletal Animation for Acclaim Motion Capture

Parses ASF skeletons and AMC motion clips, and plays them back on a
skeleton with crossfaded overlay clips and configurable root motion.
"""

# Configuration
from .config.settings import *

# Core
from .core.transform import PoseTarget, Transform3

# Animation
from .animation import (
    Animation,
    AnimationController,
    Bone,
    Keyframe,
    OverlayEntry,
    Skeleton,
    overlay_blend_weight,
)

# Loaders
from .loaders import (
    AnimationLoader,
    FormatError,
    LoadStatus,
    MocapParseError,
    NumericParseError,
    UnknownBoneReference,
    parse_amc,
    parse_asf,
)

__version__ = "0.1.0"
__all__ = [
    # Config (exported via *)
    # Core
    "PoseTarget",
    "Transform3",
    # Animation
    "Animation",
    "AnimationController",
    "Bone",
    "Keyframe",
    "OverlayEntry",
    "Skeleton",
    "overlay_blend_weight",
    # Loaders
    "AnimationLoader",
    "LoadStatus",
    "MocapParseError",
    "FormatError",
    "NumericParseError",
    "UnknownBoneReference",
    "parse_asf",
    "parse_amc",
]
