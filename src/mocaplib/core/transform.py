"""
Transform

Minimal scene-graph node used by skeletons and bones.
"""

from typing import List, Optional, Protocol

import numpy as np
from pyrr import Quaternion, Vector3

from .rotation_utils import rotate_vector


class PoseTarget(Protocol):
    """Anything that can receive a local position and rotation (e.g. a renderer node)."""

    def set_local_position(self, position: Vector3) -> None:
        ...

    def set_local_rotation(self, rotation: Quaternion) -> None:
        ...


class Transform3:
    """
    Node with a local position/rotation relative to its parent.

    Each node has:
    - Local transform (position + rotation, relative to parent)
    - World transform (computed from the hierarchy on demand)
    - Parent-child relationships
    - Optional external targets mirroring every local write
    """

    def __init__(self, name: str = "Node"):
        """
        Initialize node.

        Args:
            name: Node name (for debugging)
        """
        self.name = name
        self.parent: Optional['Transform3'] = None
        self.children: List['Transform3'] = []

        self.position = Vector3([0.0, 0.0, 0.0])
        self.rotation = Quaternion()

        self.world_position = Vector3([0.0, 0.0, 0.0])
        self.world_rotation = Quaternion()

        self._targets: List[PoseTarget] = []

    def add(self, child: 'Transform3'):
        """
        Attach a child node.

        Raises:
            ValueError: If the child already has a parent
        """
        if child.parent is not None:
            raise ValueError(
                f"'{child.name}' is already attached to '{child.parent.name}'"
            )
        self.children.append(child)
        child.parent = self

    def attach_target(self, target: PoseTarget):
        """Mirror every subsequent local position/rotation write to an external node."""
        self._targets.append(target)

    def set_local_position(self, position: Vector3):
        self.position = Vector3(np.array(position, dtype=float))
        for target in self._targets:
            target.set_local_position(self.position)

    def set_local_rotation(self, rotation: Quaternion):
        self.rotation = Quaternion(np.array(rotation, dtype=float))
        for target in self._targets:
            target.set_local_rotation(self.rotation)

    def update_world_transforms(self):
        """
        Update world transforms for this node and its subtree.

        A root node's world transform equals its local transform.
        """
        if self.parent is None:
            self._update_recursive(Vector3([0.0, 0.0, 0.0]), Quaternion())
        else:
            self._update_recursive(self.parent.world_position, self.parent.world_rotation)

    def _update_recursive(self, parent_position: Vector3, parent_rotation: Quaternion):
        self.world_rotation = parent_rotation * self.rotation
        self.world_position = Vector3(
            np.asarray(parent_position) + rotate_vector(parent_rotation, self.position)
        )

        for child in self.children:
            child._update_recursive(self.world_position, self.world_rotation)

    def __repr__(self):
        return f"{type(self).__name__}(name='{self.name}', children={len(self.children)})"
