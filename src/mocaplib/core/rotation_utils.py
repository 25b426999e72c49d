"""
Rotation Utilities

Quaternion and vector helpers shared by the parsers and the animation system.
"""

import math
from typing import Sequence

import numpy as np
from pyrr import Quaternion, Vector3, quaternion


def euler_zyx(x: float, y: float, z: float) -> Quaternion:
    """
    Build an orientation from Euler angles listed X, Y, Z.

    The rotations are composed Z∘Y∘X: X is applied first, then Y, then Z.

    Args:
        x: Rotation about X (radians)
        y: Rotation about Y (radians)
        z: Rotation about Z (radians)

    Returns:
        Unit quaternion
    """
    return (
        Quaternion.from_z_rotation(z)
        * Quaternion.from_y_rotation(y)
        * Quaternion.from_x_rotation(x)
    )


def degrees_to_radians(angles: Sequence[float]) -> list:
    """Convert a sequence of angles from degrees to radians."""
    return [math.radians(a) for a in angles]


def rotate_vector(rotation: Quaternion, vector: Vector3) -> Vector3:
    """Rotate a vector by a quaternion."""
    return Vector3(
        quaternion.apply_to_vector(np.asarray(rotation, dtype=float), np.asarray(vector, dtype=float))
    )


def slerp(q0: Quaternion, q1: Quaternion, t: float) -> Quaternion:
    """
    Spherical linear interpolation along the shortest arc, renormalised.

    q1 is negated when it lies in the opposite hemisphere from q0, so
    orientations stored with opposite signs (yaw wrapping past 180 degrees)
    blend through the short way.
    """
    if t <= 0.0:
        return Quaternion(np.array(q0, dtype=float))
    if t >= 1.0:
        return Quaternion(np.array(q1, dtype=float))
    start = np.asarray(q0, dtype=float)
    end = np.asarray(q1, dtype=float)
    if np.dot(start, end) < 0.0:
        end = -end
    result = quaternion.slerp(start, end, t)
    return Quaternion(quaternion.normalize(result))


def lerp_vector(v0: Vector3, v1: Vector3, t: float) -> Vector3:
    """Linear interpolation between two vectors."""
    return Vector3(np.asarray(v0, dtype=float) * (1.0 - t) + np.asarray(v1, dtype=float) * t)


def quaternions_close(q0: Quaternion, q1: Quaternion, atol: float = 1e-6) -> bool:
    """True when two unit quaternions describe the same orientation (q and -q are equal)."""
    a = np.asarray(q0, dtype=float)
    b = np.asarray(q1, dtype=float)
    return bool(np.allclose(a, b, atol=atol) or np.allclose(a, -b, atol=atol))
