"""
Animation System

Provides skeletal animation support for Acclaim motion capture data.
"""

from .skeleton import Bone, Skeleton
from .animation import Keyframe, Animation
from .animation_controller import AnimationController, OverlayEntry, overlay_blend_weight

__all__ = [
    'Bone',
    'Skeleton',
    'Keyframe',
    'Animation',
    'AnimationController',
    'OverlayEntry',
    'overlay_blend_weight',
]
