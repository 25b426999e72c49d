"""
ASF Parser

Builds a Skeleton from Acclaim Skeleton File text.
"""

import logging
from typing import Optional

from pyrr import Quaternion, Vector3

from ..animation import Skeleton
from ..config.settings import ASF_AXIS_ORDER, ASF_ROOT_CHANNEL_ORDER, MOCAP_UNITS_TO_METERS
from ..core.rotation_utils import degrees_to_radians, euler_zyx
from .errors import FormatError, UnknownBoneReference
from .token_stream import TokenLine, TokenStream

logger = logging.getLogger(__name__)


class AsfParser:
    """
    Parses Acclaim skeleton files.

    The file is a sequence of ':section' blocks. Sections this parser does
    not know are skipped so newer files still load.
    """

    def __init__(self):
        self.using_degrees = False

    def parse(self, text: str, skeleton: Optional[Skeleton] = None) -> Skeleton:
        """
        Parse skeleton text.

        Args:
            text: Contents of an ASF file
            skeleton: Skeleton to populate (a new one is created if None)

        Returns:
            The populated skeleton

        Raises:
            FormatError: If the text violates the ASF structure
        """
        if skeleton is None:
            skeleton = Skeleton()

        self.using_degrees = False
        stream = TokenStream(text)

        while not stream.done():
            line = stream.next_line()
            keyword = line.keyword

            if keyword == ':version':
                skeleton.version = ' '.join(line.words[1:])
            elif keyword == ':name':
                skeleton.name = ' '.join(line.words[1:]) or skeleton.name
            elif keyword == ':units':
                self._parse_units(stream)
            elif keyword == ':documentation':
                self._parse_documentation(stream, skeleton)
            elif keyword == ':root':
                self._parse_root(stream, skeleton)
            elif keyword == ':bonedata':
                self._parse_bone_data(stream, skeleton)
            elif keyword == ':hierarchy':
                self._parse_hierarchy(stream, skeleton)
            elif keyword.startswith(':'):
                skipped = stream.skip_until_section()
                logger.debug("Skipping unknown section %s (%d lines)", keyword, skipped)
            else:
                raise FormatError(
                    f"expected a section keyword, found '{keyword}'", line=line.number, token=keyword
                )

        skeleton.reset_pose()
        logger.info("Parsed skeleton '%s' with %d bones", skeleton.name, skeleton.bone_count)
        return skeleton

    def _read_angles(self, line: TokenLine, start: int) -> list:
        angles = line.read_floats(start, 3)
        if self.using_degrees:
            angles = degrees_to_radians(angles)
        return angles

    def _parse_units(self, stream: TokenStream):
        while not self._at_section(stream):
            line = stream.next_line()
            if line.keyword == 'angle':
                self.using_degrees = line.token(1).text == 'deg'
            # mass and length are informational; lengths use a fixed scale

    def _parse_documentation(self, stream: TokenStream, skeleton: Skeleton):
        while not self._at_section(stream):
            skeleton.documentation.append(' '.join(stream.next_line().words))

    def _parse_root(self, stream: TokenStream, skeleton: Skeleton):
        while not self._at_section(stream):
            line = stream.next_line()

            if line.keyword == 'order':
                if tuple(line.words[1:]) != ASF_ROOT_CHANNEL_ORDER:
                    raise FormatError(
                        f"root order must be {' '.join(ASF_ROOT_CHANNEL_ORDER)}, "
                        f"found {' '.join(line.words[1:])}",
                        line=line.number,
                    )
            elif line.keyword == 'axis':
                if line.token(1).text != ASF_AXIS_ORDER:
                    raise FormatError(
                        f"root axis must be {ASF_AXIS_ORDER}", line=line.number, token=line.token(1).text
                    )
            elif line.keyword == 'position':
                position = line.read_floats(1, 3)
                skeleton.root_position = Vector3(position) * MOCAP_UNITS_TO_METERS
            elif line.keyword == 'orientation':
                skeleton.root_rotation = euler_zyx(*self._read_angles(line, 1))
            else:
                logger.debug("Ignoring root field '%s' (line %d)", line.keyword, line.number)

    def _parse_bone_data(self, stream: TokenStream, skeleton: Skeleton):
        while not self._at_section(stream):
            stream.expect_line('begin')
            self._parse_bone(stream, skeleton)

    def _parse_bone(self, stream: TokenStream, skeleton: Skeleton):
        """Parse one begin...end block (the 'begin' line is already consumed)."""
        name = None
        direction = Vector3([0.0, 0.0, 0.0])
        length = 0.0
        axis: Optional[Quaternion] = None
        dofs = [False, False, False]

        while True:
            line = stream.next_line()
            keyword = line.keyword

            if keyword == 'end':
                break
            elif keyword == 'name':
                name = line.token(1).text
            elif keyword == 'direction':
                direction = Vector3(line.read_floats(1, 3))
            elif keyword == 'length':
                length = line.read_float(1) * MOCAP_UNITS_TO_METERS
            elif keyword == 'axis':
                angles = self._read_angles(line, 1)
                if line.token(4).text != ASF_AXIS_ORDER:
                    raise FormatError(
                        f"bone axis must be {ASF_AXIS_ORDER}", line=line.number, token=line.token(4).text
                    )
                axis = euler_zyx(*angles)
            elif keyword == 'dof':
                channels = line.words[1:]
                dofs = ['rx' in channels, 'ry' in channels, 'rz' in channels]
            elif keyword == 'limits':
                # One limits line per active dof; the values do not constrain playback
                for _ in range(sum(dofs) - 1):
                    stream.next_line()
            elif keyword.startswith(':') or keyword == 'begin':
                raise FormatError(
                    f"bone block not closed before '{keyword}'", line=line.number, token=keyword
                )
            else:
                # id, bodymass, cofmass and other unused fields
                logger.debug("Ignoring bone field '%s' (line %d)", keyword, line.number)

        if name is None:
            raise FormatError("bone block without a name", line=line.number)

        try:
            bone = skeleton.create_bone(name)
        except ValueError as exc:
            raise FormatError(str(exc), line=line.number, token=name) from None

        bone.direction = direction
        bone.length = length
        bone.dofs = dofs
        if axis is not None:
            skeleton.set_bone_axis(name, axis)

        bone.set_local_position(bone.rest_offset)

    def _parse_hierarchy(self, stream: TokenStream, skeleton: Skeleton):
        stream.expect_line('begin')

        while True:
            line = stream.next_line()
            if line.keyword == 'end':
                break

            parent_name = line.keyword
            if parent_name == 'root':
                parent = skeleton
            else:
                parent = skeleton.get_bone(parent_name)
                if parent is None:
                    raise UnknownBoneReference(
                        f"hierarchy references undefined bone '{parent_name}'",
                        line=line.number, token=parent_name,
                    )

            for token in line.tokens[1:]:
                bone = skeleton.get_bone(token.text)
                if bone is None:
                    raise UnknownBoneReference(
                        f"hierarchy references undefined bone '{token.text}'",
                        line=token.line, token=token.text,
                    )
                if bone is parent:
                    raise FormatError(
                        f"bone '{bone.name}' cannot be its own parent", line=token.line, token=token.text
                    )
                if bone.parent is not None:
                    raise FormatError(
                        f"bone '{bone.name}' is already attached to '{bone.parent.name}'",
                        line=token.line, token=token.text,
                    )
                parent.add(bone)

    @staticmethod
    def _at_section(stream: TokenStream) -> bool:
        line = stream.peek_line()
        return line is None or line.keyword.startswith(':')


def parse_asf(text: str, skeleton: Optional[Skeleton] = None) -> Skeleton:
    """
    Parse Acclaim skeleton text.

    Args:
        text: Contents of an ASF file
        skeleton: Skeleton to populate (a new one is created if None)

    Returns:
        The populated skeleton
    """
    return AsfParser().parse(text, skeleton)
