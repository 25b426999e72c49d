"""Core scene-graph and math helpers"""
from .transform import PoseTarget, Transform3
from .rotation_utils import (
    degrees_to_radians,
    euler_zyx,
    lerp_vector,
    quaternions_close,
    rotate_vector,
    slerp,
)

__all__ = [
    "PoseTarget",
    "Transform3",
    "degrees_to_radians",
    "euler_zyx",
    "lerp_vector",
    "quaternions_close",
    "rotate_vector",
    "slerp",
]
