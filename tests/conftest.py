"""Shared fixtures for the animation tests"""

import math
from pathlib import Path

import pytest
from pyrr import Quaternion, Vector3

from mocaplib.animation import Animation, Keyframe, Skeleton


ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets" / "mocap"


ARM_ASF = """\
# Two-bone arm
:version 1.10
:name arm
:units
  mass 1.0
  length 0.45
  angle deg
:documentation
   Arm used by the parser tests.
:root
   order TX TY TZ RX RY RZ
   axis XYZ
   position 10 20 30
   orientation 0 0 90
:bonedata
  begin
     id 1
     name upperarm
     direction 1 0 0
     length 5
     axis 0 0 -90  XYZ
    dof rx ry rz
    limits (-60.0 90.0)
           (-90.0 90.0)
           (-90.0 90.0)
  end
  begin
     id 2
     name lowerarm
     direction 1 0 0
     length 4
     axis 30 0 -90  XYZ
    dof rx
    limits (-10.0 170.0)
  end
  begin
     id 3
     name hand
     direction 1 0 0
     length 1
     axis 0 45 0  XYZ
  end
:hierarchy
  begin
    root upperarm
    upperarm lowerarm
    lowerarm hand
  end
"""


ARM_AMC = """\
#!OML:ASF arm.asf
:FULLY-SPECIFIED
:DEGREES
1
root 1 2 3 0 0 90
upperarm 10 20 30
lowerarm 45.0
hand
2
root 2 2 3 0 0 90
upperarm 0 0 0
lowerarm 90
"""


@pytest.fixture
def arm_asf_text():
    return ARM_ASF


@pytest.fixture
def arm_amc_text():
    return ARM_AMC


@pytest.fixture
def sample_asf_path():
    return ASSETS_DIR / "sample.asf"


@pytest.fixture
def sample_amc_path():
    return ASSETS_DIR / "walk.amc"


@pytest.fixture
def arm_skeleton():
    """Hand-built skeleton: root -> upperarm -> lowerarm."""
    skeleton = Skeleton("arm")

    upperarm = skeleton.create_bone("upperarm")
    upperarm.direction = Vector3([1.0, 0.0, 0.0])
    upperarm.length = 2.0
    upperarm.dofs = [True, True, True]

    lowerarm = skeleton.create_bone("lowerarm")
    lowerarm.direction = Vector3([0.0, 1.0, 0.0])
    lowerarm.length = 1.5
    lowerarm.dofs = [True, False, False]

    skeleton.add(upperarm)
    upperarm.add(lowerarm)
    skeleton.reset_pose()
    return skeleton


def make_animation(name, num_frames, root_start=0.0, root_step=1.0, angle_step=0.1):
    """
    Build a clip whose root moves root_step along X per frame and whose
    lowerarm bends angle_step radians about X per frame.
    """
    animation = Animation(name)
    for i in range(num_frames):
        keyframe = Keyframe(i + 1)
        keyframe.root_position = Vector3([root_start + root_step * i, 0.0, 0.0])
        keyframe.set_joint_rotation("lowerarm", Quaternion.from_x_rotation(angle_step * i))
        animation.append_keyframe(keyframe)
    return animation


@pytest.fixture
def animation_factory():
    return make_animation


def rotation_angle(q0, q1):
    """Angle (radians) of the rotation taking q0 to q1."""
    dot = abs(float(sum(a * b for a, b in zip(q0, q1))))
    return 2.0 * math.acos(min(dot, 1.0))


@pytest.fixture
def angle_between():
    return rotation_angle
