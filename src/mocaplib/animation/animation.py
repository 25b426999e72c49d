"""
Animation

Keyframe poses and clips of consecutive poses.
"""

from typing import Dict, Iterator, List

import numpy as np
from pyrr import Quaternion, Vector3

from ..core.rotation_utils import lerp_vector, slerp


class Keyframe:
    """
    Single pose in an animation.

    Stores the root position/rotation and one joint rotation per bone name.
    Bones without an entry are in their identity orientation.
    """

    def __init__(self, frame: int = 0):
        """
        Initialize keyframe.

        Args:
            frame: Frame number (informational)
        """
        self.frame = frame
        self.root_position = Vector3([0.0, 0.0, 0.0])
        self.root_rotation = Quaternion()
        self.joint_rotations: Dict[str, Quaternion] = {}

    @property
    def bone_names(self) -> List[str]:
        return list(self.joint_rotations)

    def get_joint_rotation(self, bone_name: str) -> Quaternion:
        """Joint rotation for a bone, identity if the bone has no entry."""
        rotation = self.joint_rotations.get(bone_name)
        if rotation is None:
            return Quaternion()
        return rotation

    def set_joint_rotation(self, bone_name: str, rotation: Quaternion):
        self.joint_rotations[bone_name] = rotation

    def lerp(self, other: 'Keyframe', alpha: float):
        """
        Blend this keyframe toward another in place.

        Args:
            other: Target keyframe
            alpha: Blend weight, 0 keeps this pose and 1 becomes the other
        """
        self.frame = int(round(self.frame + (other.frame - self.frame) * alpha))
        self.root_position = lerp_vector(self.root_position, other.root_position, alpha)
        self.root_rotation = slerp(self.root_rotation, other.root_rotation, alpha)

        names = list(self.joint_rotations)
        names.extend(name for name in other.joint_rotations if name not in self.joint_rotations)
        for name in names:
            self.joint_rotations[name] = slerp(
                self.get_joint_rotation(name), other.get_joint_rotation(name), alpha
            )

    def clone(self) -> 'Keyframe':
        """Deep copy of this keyframe."""
        pose = Keyframe(self.frame)
        pose.root_position = Vector3(np.array(self.root_position, dtype=float))
        pose.root_rotation = Quaternion(np.array(self.root_rotation, dtype=float))
        pose.joint_rotations = {
            name: Quaternion(np.array(rotation, dtype=float))
            for name, rotation in self.joint_rotations.items()
        }
        return pose

    def __repr__(self):
        return f"Keyframe(frame={self.frame}, joints={len(self.joint_rotations)})"


class Animation:
    """
    Complete animation clip.

    An ordered sequence of keyframes sampled at a fixed frame rate, with
    editing operations for trimming and loop smoothing.
    """

    def __init__(self, name: str = "Animation"):
        """
        Initialize animation.

        Args:
            name: Animation name
        """
        self.name = name
        self.frames: List[Keyframe] = []

    def __len__(self) -> int:
        return len(self.frames)

    def __getitem__(self, index: int) -> Keyframe:
        return self.frames[index]

    def __iter__(self) -> Iterator[Keyframe]:
        return iter(self.frames)

    def get_duration(self, fps: float) -> float:
        """Clip length in seconds at the given frame rate."""
        return len(self.frames) / fps

    def trim_front(self, num_frames: int):
        """Remove up to num_frames keyframes from the start."""
        del self.frames[:max(num_frames, 0)]

    def trim_back(self, num_frames: int):
        """Remove up to num_frames keyframes from the end."""
        if num_frames > 0:
            del self.frames[-num_frames:]

    def prepend_keyframe(self, frame: Keyframe):
        self.frames.insert(0, frame)

    def append_keyframe(self, frame: Keyframe):
        self.frames.append(frame)

    def make_loop(self, num_blend_frames: int):
        """
        Smooth the seam between the last and first frame for looping playback.

        The final num_blend_frames keyframes are removed and blended, in
        order, into the first num_blend_frames keyframes. The blend weight
        toward the original early frame ramps from 0 to 1, so the new first
        frame continues directly from the new last frame.

        Args:
            num_blend_frames: Number of frames in the blend window

        Raises:
            ValueError: If the clip is shorter than two blend windows
        """
        if num_blend_frames <= 0:
            return
        if 2 * num_blend_frames > len(self.frames):
            raise ValueError(
                f"Cannot loop '{self.name}': {len(self.frames)} frames is fewer than "
                f"twice the {num_blend_frames} blend frames"
            )

        tail = self.frames[-num_blend_frames:]
        del self.frames[-num_blend_frames:]

        for i, frame in enumerate(tail):
            alpha = i / (num_blend_frames - 1) if num_blend_frames > 1 else 1.0
            frame.lerp(self.frames[i], alpha)
            self.frames[i] = frame

    def __repr__(self):
        return f"Animation(name='{self.name}', frames={len(self.frames)})"
