"""
Parse Errors

Exceptions raised while reading skeleton and motion files.
"""

from typing import Optional


class MocapParseError(ValueError):
    """Base class for skeleton/motion file errors."""

    def __init__(self, message: str, line: Optional[int] = None, token: Optional[str] = None):
        self.message = message
        self.line = line
        self.token = token
        super().__init__(str(self))

    def __str__(self):
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


class FormatError(MocapParseError):
    """The file does not follow the expected section/token structure."""


class NumericParseError(FormatError):
    """A token that should be a number is not one."""


class UnknownBoneReference(FormatError):
    """A bone name was referenced that the skeleton does not define."""
