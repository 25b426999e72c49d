"""
AMC Parser

Builds an Animation from Acclaim Motion Capture text, using a Skeleton to
convert each bone's channel data into the skeleton's rotation space.
"""

import logging
from typing import Optional, Set

from pyrr import Vector3

from ..animation import Animation, Keyframe, Skeleton
from ..animation.skeleton import Bone
from ..config.settings import AMC_RADIANS_HEADER, AMC_ROOT_NAME, MOCAP_UNITS_TO_METERS
from ..core.rotation_utils import degrees_to_radians, euler_zyx
from .errors import FormatError
from .token_stream import TokenLine, TokenStream

logger = logging.getLogger(__name__)


def _is_number(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


class AmcParser:
    """
    Parses Acclaim motion files.

    Header lines (starting with '#' or ':') are skipped. Every frame block
    starts with a line holding the frame number, followed by one line per
    bone. Bones the skeleton does not define are ignored.
    """

    def __init__(self):
        self.using_degrees = True
        self.unknown_bones: Set[str] = set()

    def parse(self, text: str, skeleton: Skeleton, animation: Optional[Animation] = None) -> Animation:
        """
        Parse motion text.

        Args:
            text: Contents of an AMC file
            skeleton: Skeleton the motion was captured for
            animation: Animation to append keyframes to (a new one is created if None)

        Returns:
            The animation with one keyframe per frame block

        Raises:
            FormatError: If a bone line appears outside a frame block or has the
                wrong number of values
            NumericParseError: If a value is not a number
        """
        if animation is None:
            animation = Animation()

        self.using_degrees = True
        self.unknown_bones = set()
        stream = TokenStream(text)
        keyframe: Optional[Keyframe] = None
        frame_count = 0

        while not stream.done():
            line = stream.next_line()
            keyword = line.keyword

            if keyword.startswith(':'):
                if keyword.upper() == AMC_RADIANS_HEADER:
                    self.using_degrees = False
                continue

            # Frame numbers start a new keyframe
            if _is_number(keyword):
                keyframe = Keyframe(line.read_int(0))
                animation.append_keyframe(keyframe)
                frame_count += 1
                continue

            if keyframe is None:
                raise FormatError(
                    f"bone '{keyword}' appears before the first frame number",
                    line=line.number, token=keyword,
                )

            if keyword == AMC_ROOT_NAME:
                self._parse_root(line, keyframe)
                continue

            bone = skeleton.get_bone(keyword)
            if bone is None:
                if keyword not in self.unknown_bones:
                    self.unknown_bones.add(keyword)
                    logger.warning("Ignoring unknown bone '%s' (line %d)", keyword, line.number)
                continue

            self._parse_bone(line, bone, skeleton, keyframe)

        logger.info("Parsed %d frames into '%s'", frame_count, animation.name)
        return animation

    def _read_values(self, line: TokenLine, count: int) -> list:
        if len(line) - 1 != count:
            raise FormatError(
                f"'{line.keyword}' expects {count} values, found {len(line) - 1}",
                line=line.number, token=line.keyword,
            )
        return line.read_floats(1, count)

    def _to_radians(self, angles: list) -> list:
        if self.using_degrees:
            return degrees_to_radians(angles)
        return angles

    def _parse_root(self, line: TokenLine, keyframe: Keyframe):
        values = self._read_values(line, 6)

        keyframe.root_position = Vector3(values[:3]) * MOCAP_UNITS_TO_METERS
        keyframe.root_rotation = euler_zyx(*self._to_radians(values[3:]))

    def _parse_bone(self, line: TokenLine, bone: Bone, skeleton: Skeleton, keyframe: Keyframe):
        values = iter(self._to_radians(self._read_values(line, bone.active_dof_count)))

        # Inactive axes carry no value in the file
        angles = [next(values) if active else 0.0 for active in bone.dofs]
        local_rotation = euler_zyx(*angles)

        # Bone-space channel data mapped into rotation space
        joint_rotation = (
            skeleton.get_rotation_to_bone_space(bone.name)
            * local_rotation
            * skeleton.get_bone_to_rotation_space(bone.name)
        )
        keyframe.set_joint_rotation(bone.name, joint_rotation)


def parse_amc(text: str, skeleton: Skeleton, animation: Optional[Animation] = None) -> Animation:
    """
    Parse Acclaim motion text.

    Args:
        text: Contents of an AMC file
        skeleton: Skeleton the motion was captured for
        animation: Animation to append keyframes to (a new one is created if None)

    Returns:
        The populated animation
    """
    return AmcParser().parse(text, skeleton, animation)
