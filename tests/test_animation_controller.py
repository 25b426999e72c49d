"""Tests for AnimationController playback and blending"""

import math

import numpy as np
import pytest
from pyrr import Quaternion, Vector3

from mocaplib.animation import Animation, AnimationController, overlay_blend_weight
from mocaplib.core.rotation_utils import lerp_vector, quaternions_close, slerp


FPS = 30
DT = 1.0 / FPS


@pytest.fixture
def anim_a(animation_factory):
    return animation_factory("a", 10, root_start=0.0, root_step=1.0, angle_step=0.1)


@pytest.fixture
def anim_b(animation_factory):
    return animation_factory("b", 10, root_start=100.0, root_step=2.0, angle_step=-0.05)


@pytest.fixture
def controller(arm_skeleton):
    return AnimationController(arm_skeleton, fps=FPS)


def run(controller, updates):
    for _ in range(updates):
        controller.update(DT)


# ---------------------------------------------------------------------------
# Overlay blend weight
# ---------------------------------------------------------------------------

def test_blend_weight_windows():
    length, transition = 10, 3

    assert overlay_blend_weight(0, length, transition) == 1.0
    assert overlay_blend_weight(transition, length, transition) == 0.0
    assert overlay_blend_weight(5, length, transition) == 0.0
    assert overlay_blend_weight(length - 1, length, transition) == pytest.approx(1 - 1 / 3)


def test_blend_weight_monotonic():
    length, transition = 20, 5
    fade_in = [overlay_blend_weight(f, length, transition) for f in range(transition + 1)]
    fade_out = [overlay_blend_weight(f, length, transition) for f in range(length - transition, length)]

    assert fade_in == sorted(fade_in, reverse=True)
    assert fade_out == sorted(fade_out)
    assert all(0.0 <= a <= 1.0 for a in fade_in + fade_out)


def test_blend_weight_overlapping_windows():
    """When both windows cover a frame the fade-out value is used"""
    assert overlay_blend_weight(1, 3, 3) == pytest.approx(1 - 2 / 3)


def test_blend_weight_without_transition():
    assert [overlay_blend_weight(f, 5, 0) for f in range(5)] == [0.0] * 5


# ---------------------------------------------------------------------------
# Playback state
# ---------------------------------------------------------------------------

def test_update_while_stopped_is_noop(controller, arm_skeleton):
    position = np.array(arm_skeleton.position)
    controller.update(DT)

    assert not controller.is_playing
    assert controller.current_pose is None
    assert np.allclose(np.asarray(arm_skeleton.position), np.asarray(position))


def test_play_snaps_to_first_frame(controller, anim_a, arm_skeleton):
    anim_a[0].set_joint_rotation("lowerarm", Quaternion.from_x_rotation(0.3))
    controller.play(anim_a)

    assert controller.is_playing
    assert controller.current_pose is anim_a[0]
    lowerarm = arm_skeleton.get_bone("lowerarm")
    assert quaternions_close(lowerarm.rotation, Quaternion.from_x_rotation(0.3))


def test_play_twice_matches_play_once(controller, anim_a, anim_b):
    controller.play(anim_a)
    controller.overlay(anim_b, 3)
    run(controller, 4)

    controller.play(anim_a)
    controller.play(anim_a)

    assert controller.get_queue_count() == 0
    assert controller.current_time == 0.0
    assert controller.current_frame == 0
    assert controller.current_pose is anim_a[0]


def test_play_empty_animation(controller):
    controller.play(Animation("empty"))
    assert not controller.is_playing


def test_stop_clears_overlays(controller, anim_a, anim_b):
    controller.play(anim_a)
    controller.overlay(anim_b, 3)
    run(controller, 2)

    controller.stop()

    assert not controller.is_playing
    assert controller.get_queue_count() == 0
    assert controller.overlay_time == 0.0


def test_stop_can_reset_pose(controller, anim_a, arm_skeleton):
    anim_a[0].set_joint_rotation("upperarm", Quaternion.from_y_rotation(1.0))
    controller.play(anim_a)
    controller.stop(reset_pose=True)

    assert quaternions_close(arm_skeleton.get_bone("upperarm").rotation, Quaternion())


def test_overlay_before_play_is_cleared(controller, anim_a, anim_b):
    controller.overlay(anim_b, 3)
    assert controller.get_queue_count() == 1

    controller.update(DT)
    assert controller.get_queue_count() == 1

    controller.play(anim_a)
    assert controller.get_queue_count() == 0


def test_empty_overlay_is_ignored(controller):
    controller.overlay(Animation("empty"), 2)
    assert controller.get_queue_count() == 0


def test_frame_advance(controller, anim_a):
    controller.play(anim_a)
    run(controller, 4)

    assert controller.current_frame == 4
    assert controller.current_pose is anim_a[4]


def test_primary_wraps_to_first_frame(controller, anim_a):
    controller.play(anim_a)
    run(controller, 9)
    assert controller.current_frame == 9

    controller.update(DT)

    assert controller.current_frame == 0
    assert controller.current_time == 0.0
    assert controller.current_pose is anim_a[0]


def test_large_step_wraps_to_zero(controller, anim_a):
    controller.play(anim_a)
    controller.update(5.0)
    assert controller.current_frame == 0


# ---------------------------------------------------------------------------
# Overlays
# ---------------------------------------------------------------------------

def test_overlay_middle_frame_is_unmodified(controller, anim_a, anim_b):
    """Outside both fade windows the overlay pose is used as-is"""
    controller.play(anim_a)
    controller.overlay(anim_b, 3)
    run(controller, 5)

    assert controller.overlay_frame == 5
    assert controller.blend_alpha == 0.0

    pose = controller.current_pose
    assert pose is not anim_b[5]
    assert np.allclose(np.asarray(pose.root_position), np.asarray(anim_b[5].root_position))
    assert quaternions_close(
        pose.get_joint_rotation("lowerarm"), anim_b[5].get_joint_rotation("lowerarm")
    )


def test_overlay_fade_in_blend(controller, anim_a, anim_b):
    controller.play(anim_a)
    controller.overlay(anim_b, 3)
    controller.update(DT)

    alpha = 1 - 1 / 3
    assert controller.overlay_frame == 1
    assert controller.current_frame == 1
    assert controller.blend_alpha == pytest.approx(alpha)

    pose = controller.current_pose
    expected_root = lerp_vector(anim_b[1].root_position, anim_a[1].root_position, alpha)
    assert np.allclose(np.asarray(pose.root_position), np.asarray(expected_root))

    expected_joint = slerp(
        anim_b[1].get_joint_rotation("lowerarm"), anim_a[1].get_joint_rotation("lowerarm"), alpha
    )
    assert quaternions_close(pose.get_joint_rotation("lowerarm"), expected_joint)


def test_overlay_crossfade_across_yaw_wrap(controller, anim_a, anim_b, arm_skeleton):
    """Root yaw of 179 and -179 degrees crossfades to 180, not to identity"""
    anim_a[1].root_rotation = Quaternion.from_z_rotation(math.radians(-179.0))
    anim_b[1].root_rotation = Quaternion.from_z_rotation(math.radians(179.0))
    controller.play(anim_a)
    controller.overlay(anim_b, 2)
    controller.update(DT)

    assert controller.blend_alpha == pytest.approx(0.5)
    assert quaternions_close(arm_skeleton.rotation, Quaternion.from_z_rotation(math.pi))


def test_overlay_does_not_mutate_source(controller, anim_a, anim_b):
    before = np.array(anim_b[1].root_position)
    controller.play(anim_a)
    controller.overlay(anim_b, 3)
    controller.update(DT)

    assert np.allclose(np.asarray(anim_b[1].root_position), np.asarray(before))


def test_overlay_queue_drains_in_order(controller, anim_a, anim_b, animation_factory):
    anim_c = animation_factory("c", 4, root_start=-50.0)
    controller.play(anim_a)
    controller.overlay(anim_b, 0)
    controller.overlay(anim_c, 0)

    run(controller, 9)
    assert controller.get_queue_count() == 2
    assert controller.overlay_frame == 9

    # Overlay b ends; c starts at its first frame
    controller.update(DT)
    assert controller.get_queue_count() == 1
    assert controller.overlay_frame == 0
    root = np.asarray(controller.current_pose.root_position)
    assert np.allclose(root, np.asarray(anim_c[0].root_position))

    run(controller, 4)
    assert controller.get_queue_count() == 0
    assert controller.overlay_frame == 0


def test_primary_resumes_after_overlay(controller, anim_a, animation_factory):
    short = animation_factory("short", 3, root_start=500.0)
    controller.play(anim_a)
    controller.overlay(short, 0)

    run(controller, 3)

    assert controller.get_queue_count() == 0
    assert controller.current_pose is anim_a[3]


# ---------------------------------------------------------------------------
# Root motion
# ---------------------------------------------------------------------------

def test_absolute_root_motion(controller, anim_a, arm_skeleton):
    arm_skeleton.root_position = Vector3([0.0, 1.0, 0.0])
    arm_skeleton.root_rotation = Quaternion.from_y_rotation(0.5)
    anim_a[3].root_rotation = Quaternion.from_x_rotation(0.2)

    controller.play(anim_a)
    run(controller, 3)

    assert np.allclose(np.asarray(arm_skeleton.position), [3.0, 1.0, 0.0])
    assert quaternions_close(
        arm_skeleton.rotation, Quaternion.from_x_rotation(0.2) * Quaternion.from_y_rotation(0.5)
    )


def test_relative_root_motion_accumulates(arm_skeleton, anim_a):
    controller = AnimationController(arm_skeleton, fps=FPS, use_absolute_position=False)
    arm_skeleton.set_local_position(Vector3([10.0, 0.0, 0.0]))

    controller.play(anim_a)
    assert np.allclose(np.asarray(arm_skeleton.position), [10.0, 0.0, 0.0])

    run(controller, 9)
    assert np.allclose(np.asarray(arm_skeleton.position), [19.0, 0.0, 0.0])

    # Wrapping back to frame 0 adds no backwards jump
    controller.update(DT)
    assert np.allclose(np.asarray(arm_skeleton.position), [19.0, 0.0, 0.0])

    controller.update(DT)
    assert np.allclose(np.asarray(arm_skeleton.position), [20.0, 0.0, 0.0])


def test_relative_root_motion_follows_overlay(arm_skeleton, anim_a, anim_b):
    controller = AnimationController(arm_skeleton, fps=FPS, use_absolute_position=False)
    controller.play(anim_a)
    controller.overlay(anim_b, 0)

    run(controller, 3)

    # Overlay b moves 2 units per frame and fully replaces the primary motion
    assert np.allclose(np.asarray(arm_skeleton.position), [6.0, 0.0, 0.0])


def test_relative_root_motion_blends_deltas(arm_skeleton, anim_a, anim_b):
    controller = AnimationController(arm_skeleton, fps=FPS, use_absolute_position=False)
    controller.play(anim_a)
    controller.overlay(anim_b, 3)

    controller.update(DT)

    alpha = 1 - 1 / 3
    assert np.allclose(np.asarray(arm_skeleton.position), [2.0 * (1 - alpha) + 1.0 * alpha, 0.0, 0.0])


# ---------------------------------------------------------------------------
# Pose application
# ---------------------------------------------------------------------------

def test_apply_pose_reaches_external_targets(controller, anim_a, arm_skeleton):
    received = []

    class Target:
        def set_local_position(self, position):
            received.append(("position", np.array(position)))

        def set_local_rotation(self, rotation):
            received.append(("rotation", np.array(rotation)))

    arm_skeleton.get_bone("lowerarm").attach_target(Target())
    controller.play(anim_a)
    controller.update(DT)

    assert [kind for kind, _ in received] == ["position", "rotation", "position", "rotation"]
    expected = np.asarray(anim_a[1].get_joint_rotation("lowerarm"))
    assert np.allclose(received[-1][1], expected)
