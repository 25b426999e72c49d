"""
Animation Controller

Manages animation playback, overlay blending, and root motion.
"""

import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional

import numpy as np
from pyrr import Vector3

from ..config.settings import (
    DEFAULT_ANIMATION_FPS,
    DEFAULT_USE_ABSOLUTE_ROOT_MOTION,
    FRAME_TIME_EPSILON,
)
from ..core.rotation_utils import lerp_vector
from .animation import Animation, Keyframe
from .skeleton import Bone, Skeleton

logger = logging.getLogger(__name__)


@dataclass
class OverlayEntry:
    """Queued overlay clip with the width of its fade windows (in frames)."""
    animation: Animation
    transition_frames: int


def overlay_blend_weight(frame: int, length: int, transition_frames: int) -> float:
    """
    Weight pulling an overlay pose back toward the primary pose.

    1 at the first overlay frame, ramping to 0 after transition_frames,
    0 through the middle of the clip, then ramping back up over the last
    transition_frames frames. When the two windows overlap the fade-out
    value is used.

    Args:
        frame: Current overlay frame
        length: Overlay clip length in frames
        transition_frames: Width of each fade window

    Returns:
        Blend weight in [0, 1]
    """
    alpha = 0.0
    if frame < transition_frames:
        alpha = 1.0 - frame / transition_frames
    if frame > length - transition_frames:
        alpha = 1.0 - (length - frame) / transition_frames
    return alpha


class AnimationController:
    """
    Controls animation playback for a skeleton.

    Manages:
    - One primary animation, looping
    - A queue of overlay animations played one after another on top of it
    - Absolute or accumulated (relative) root motion
    - Applying the resolved pose to the skeleton
    """

    def __init__(
        self,
        skeleton: Skeleton,
        fps: float = DEFAULT_ANIMATION_FPS,
        use_absolute_position: bool = DEFAULT_USE_ABSOLUTE_ROOT_MOTION
    ):
        """
        Initialize animation controller.

        Args:
            skeleton: Skeleton to animate
            fps: Frame rate the animations were sampled at
            use_absolute_position: Apply root translation as an absolute offset
                from the rest root position (True) or accumulate per-frame
                deltas into the skeleton position (False)
        """
        self.skeleton = skeleton
        self.fps = fps
        self.use_absolute_position = use_absolute_position

        self._animation: Optional[Animation] = None
        self._current_time = 0.0
        self._current_frame = 0
        self._last_pose: Optional[Keyframe] = None

        self._overlay_queue: Deque[OverlayEntry] = deque()
        self._overlay_time = 0.0
        self._overlay_frame = 0
        self._last_overlay_pose: Optional[Keyframe] = None

        self._blend_alpha = 0.0
        self._pose: Optional[Keyframe] = None

    @property
    def is_playing(self) -> bool:
        return self._animation is not None

    @property
    def current_animation(self) -> Optional[Animation]:
        return self._animation

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def current_frame(self) -> int:
        return self._current_frame

    @property
    def overlay_time(self) -> float:
        return self._overlay_time

    @property
    def overlay_frame(self) -> int:
        return self._overlay_frame

    @property
    def blend_alpha(self) -> float:
        """Weight toward the primary pose used for the last overlay blend."""
        return self._blend_alpha

    @property
    def current_pose(self) -> Optional[Keyframe]:
        """Pose applied by the last play/update call."""
        return self._pose

    def get_queue_count(self) -> int:
        return len(self._overlay_queue)

    def play(self, animation: Animation):
        """
        Start playing an animation as the primary track.

        Clears the overlay queue and snaps the skeleton to the first frame.

        Args:
            animation: Animation to play
        """
        self.stop()

        if len(animation) == 0:
            logger.warning("Ignoring play request for empty animation '%s'", animation.name)
            return

        self._animation = animation
        self._last_pose = animation[0]
        self._pose = animation[0]
        self.apply_pose(animation[0])

    def stop(self, reset_pose: bool = False):
        """
        Stop playback and clear all overlay state.

        Args:
            reset_pose: Also return the skeleton to its rest pose
        """
        self._animation = None
        self._current_time = 0.0
        self._current_frame = 0
        self._last_pose = None

        self._overlay_queue.clear()
        self._overlay_time = 0.0
        self._overlay_frame = 0
        self._last_overlay_pose = None
        self._blend_alpha = 0.0
        self._pose = None

        if reset_pose:
            self.skeleton.reset_pose()

    def overlay(self, animation: Animation, transition_frames: int):
        """
        Queue an animation to play on top of the primary track.

        Args:
            animation: Overlay animation
            transition_frames: Width of the fade-in and fade-out windows
        """
        if len(animation) == 0:
            logger.warning("Ignoring empty overlay animation '%s'", animation.name)
            return

        self._overlay_queue.append(OverlayEntry(animation, max(int(transition_frames), 0)))

    def update(self, delta_time: float):
        """
        Update animation playback.

        Args:
            delta_time: Time elapsed since last frame (seconds)
        """
        if self._animation is None:
            return

        # Advance the primary track, wrapping to the first frame
        self._current_time += delta_time
        current_frame = self._time_to_frame(self._current_time)

        if current_frame >= len(self._animation):
            current_frame = 0
            self._current_time = 0.0
            self._last_pose = self._animation[0]

        # Advance the overlay track, moving to the next queued clip when done
        overlay_frame = 0
        if self._overlay_queue:
            self._overlay_time += delta_time
            overlay_frame = self._time_to_frame(self._overlay_time)

            if overlay_frame >= len(self._overlay_queue[0].animation):
                self._overlay_queue.popleft()
                self._overlay_time = 0.0
                overlay_frame = 0
                self._last_overlay_pose = None

        self._current_frame = current_frame
        self._overlay_frame = overlay_frame

        pose = self._compute_pose(current_frame, overlay_frame)
        self._pose = pose
        self.apply_pose(pose)

    def apply_pose(self, pose: Keyframe):
        """
        Apply a pose to the skeleton.

        Args:
            pose: Resolved keyframe
        """
        # Rest rotation followed by the pose's root rotation
        self.skeleton.set_local_rotation(pose.root_rotation * self.skeleton.root_rotation)

        # Relative root motion is accumulated in _compute_pose instead
        if self.use_absolute_position:
            self.skeleton.set_local_position(
                Vector3(np.asarray(self.skeleton.root_position) + np.asarray(pose.root_position))
            )

        for child in self.skeleton.children:
            if isinstance(child, Bone):
                child.update_pose(pose)

    def _time_to_frame(self, time: float) -> int:
        return int(math.floor(time * self.fps + FRAME_TIME_EPSILON))

    def _compute_pose(self, current_frame: int, overlay_frame: int) -> Keyframe:
        """
        Resolve the pose for this update.

        Args:
            current_frame: Primary track frame
            overlay_frame: Head overlay frame (ignored without overlays)

        Returns:
            Keyframe to apply
        """
        primary_pose = self._animation[current_frame]

        # Motion is entirely from the primary track
        if not self._overlay_queue:
            self._blend_alpha = 0.0

            if not self.use_absolute_position:
                self._accumulate_root_motion(self._root_delta(primary_pose, self._last_pose))
                self._last_pose = primary_pose

            return primary_pose

        entry = self._overlay_queue[0]
        source_pose = entry.animation[overlay_frame]

        # Start out with the unmodified overlay pose
        pose = source_pose.clone()

        alpha = overlay_blend_weight(overlay_frame, len(entry.animation), entry.transition_frames)
        if alpha > 0.0:
            pose.lerp(primary_pose, alpha)
        self._blend_alpha = alpha

        if not self.use_absolute_position:
            # A freshly started overlay measures its motion from its first frame
            previous_overlay = self._last_overlay_pose or entry.animation[0]
            overlay_delta = self._root_delta(source_pose, previous_overlay)
            primary_delta = self._root_delta(primary_pose, self._last_pose)
            self._accumulate_root_motion(lerp_vector(overlay_delta, primary_delta, alpha))

            self._last_overlay_pose = source_pose
            self._last_pose = primary_pose

        return pose

    @staticmethod
    def _root_delta(pose: Keyframe, previous: Optional[Keyframe]) -> Vector3:
        """Root translation since the previous frame of the same track."""
        if previous is None:
            return Vector3([0.0, 0.0, 0.0])
        return Vector3(np.asarray(pose.root_position) - np.asarray(previous.root_position))

    def _accumulate_root_motion(self, delta: Vector3):
        self.skeleton.set_local_position(
            Vector3(np.asarray(self.skeleton.position) + np.asarray(delta))
        )

    def __repr__(self):
        anim_name = self._animation.name if self._animation else "None"
        return (
            f"AnimationController(animation='{anim_name}', time={self._current_time:.2f}s, "
            f"overlays={len(self._overlay_queue)})"
        )
