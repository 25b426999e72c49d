"""Loader utilities for Acclaim skeleton and motion files."""

from .errors import FormatError, MocapParseError, NumericParseError, UnknownBoneReference
from .token_stream import Token, TokenLine, TokenStream
from .asf_parser import AsfParser, parse_asf
from .amc_parser import AmcParser, parse_amc
from .animation_loader import AnimationLoader, LoadStatus

__all__ = [
    'MocapParseError',
    'FormatError',
    'NumericParseError',
    'UnknownBoneReference',
    'Token',
    'TokenLine',
    'TokenStream',
    'AsfParser',
    'parse_asf',
    'AmcParser',
    'parse_amc',
    'AnimationLoader',
    'LoadStatus',
]
