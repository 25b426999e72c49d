"""
Skeleton

Represents a hierarchical skeleton structure with bones, plus the per-bone
conversions between each bone's own axis convention and the shared rotation
space that all joint orientations are stored in.
"""

from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

import numpy as np
from pyrr import Quaternion, Vector3

from ..core.rotation_utils import rotate_vector
from ..core.transform import Transform3

if TYPE_CHECKING:
    from .animation import Keyframe


class Bone(Transform3):
    """
    Represents a single bone in a skeleton hierarchy.

    Each bone has:
    - A rest direction and length (the rest offset is direction * length)
    - Degree-of-freedom flags for the X/Y/Z rotation channels
    - A stable index assigned by the skeleton that owns it
    """

    def __init__(self, name: str = "", index: int = -1):
        """
        Initialize a bone.

        Args:
            name: Bone name (the key used by skeletons and keyframes)
            index: Bone index in skeleton
        """
        super().__init__(name)
        self.index = index
        self.direction = Vector3([0.0, 0.0, 0.0])
        self.length = 0.0
        self.dofs = [False, False, False]

    @property
    def rest_offset(self) -> Vector3:
        """Local position of the bone in its rest pose."""
        return Vector3(np.asarray(self.direction, dtype=float) * self.length)

    @property
    def active_dof_count(self) -> int:
        return sum(1 for dof in self.dofs if dof)

    def update_pose(self, pose: 'Keyframe'):
        """
        Apply a keyframe to this bone and, recursively, to its children.

        Args:
            pose: Keyframe holding joint rotations by bone name
        """
        joint_rotation = pose.get_joint_rotation(self.name)

        self.set_local_position(rotate_vector(joint_rotation, self.rest_offset))
        self.set_local_rotation(joint_rotation)

        for child in self.children:
            if isinstance(child, Bone):
                child.update_pose(pose)

    def reset_pose(self):
        """Reset this bone and its children to the rest pose."""
        self.set_local_position(self.rest_offset)
        self.set_local_rotation(Quaternion())

        for child in self.children:
            if isinstance(child, Bone):
                child.reset_pose()

    def __repr__(self):
        return f"Bone(name='{self.name}', index={self.index}, children={len(self.children)})"


class Skeleton(Transform3):
    """
    Hierarchical skeleton structure.

    Bones are created by the skeleton (so every bone gets a stable index) and
    looked up by name. The skeleton node itself carries the root transform;
    top-level bones are its direct children.
    """

    def __init__(self, name: str = "Skeleton"):
        """
        Initialize skeleton.

        Args:
            name: Skeleton name for debugging
        """
        super().__init__(name)
        self.version = ""
        self.documentation: List[str] = []

        self.bones: Dict[str, Bone] = {}
        self.bone_to_rotation_space: Dict[str, Quaternion] = {}
        self.rotation_to_bone_space: Dict[str, Quaternion] = {}

        # Rest-pose placement of the root (meters / orientation)
        self.root_position = Vector3([0.0, 0.0, 0.0])
        self.root_rotation = Quaternion()

    @property
    def bone_count(self) -> int:
        return len(self.bones)

    def create_bone(self, name: str) -> Bone:
        """
        Create a bone and register it under its name.

        Args:
            name: Unique bone name

        Returns:
            The new bone (not yet attached to the hierarchy)

        Raises:
            ValueError: If a bone with this name already exists
        """
        if name in self.bones:
            raise ValueError(f"Duplicate bone name: {name}")

        bone = Bone(name, index=len(self.bones))
        self.bones[name] = bone
        return bone

    def get_bone(self, name: str) -> Optional[Bone]:
        """
        Find a bone by name.

        Returns:
            Bone if found, None otherwise
        """
        return self.bones.get(name)

    def set_bone_axis(self, name: str, rotation_to_bone_space: Quaternion):
        """
        Store a bone's axis conversion together with its inverse.

        Args:
            name: Bone name
            rotation_to_bone_space: Rotation built from the bone's axis declaration
        """
        rotation = Quaternion(np.array(rotation_to_bone_space, dtype=float))
        self.rotation_to_bone_space[name] = rotation
        self.bone_to_rotation_space[name] = rotation.inverse

    def get_bone_to_rotation_space(self, name: str) -> Quaternion:
        return self.bone_to_rotation_space.get(name, Quaternion())

    def get_rotation_to_bone_space(self, name: str) -> Quaternion:
        return self.rotation_to_bone_space.get(name, Quaternion())

    def iter_bones(self) -> Iterator[Bone]:
        """Walk the attached bone hierarchy depth-first."""
        stack = [child for child in reversed(self.children) if isinstance(child, Bone)]
        while stack:
            bone = stack.pop()
            yield bone
            stack.extend(child for child in reversed(bone.children) if isinstance(child, Bone))

    def reset_pose(self):
        """Reset the skeleton to its rest pose."""
        self.set_local_position(self.root_position)
        self.set_local_rotation(self.root_rotation)

        for child in self.children:
            if isinstance(child, Bone):
                child.reset_pose()

    def __repr__(self):
        return f"Skeleton(name='{self.name}', bones={len(self.bones)}, roots={len(self.children)})"
