"""
Animation Loader

Reads ASF/AMC files from disk and hands their text to the parsers.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from ..animation import Animation, Skeleton
from .amc_parser import parse_amc
from .asf_parser import parse_asf
from .errors import MocapParseError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class LoadStatus(Enum):
    """Progress notifications sent to the loader's progress callback."""
    REQUESTED = "requested"
    LOADED = "loaded"
    FAILED = "failed"


class AnimationLoader:
    """
    Loads skeletons and motion clips from files.

    Asset bookkeeping stays with the caller: pass a progress_callback to be
    told when each file is requested, loaded, or fails.
    """

    def __init__(self, progress_callback: Optional[Callable[[Path, LoadStatus], None]] = None):
        """
        Initialize loader.

        Args:
            progress_callback: Called with (path, status) for every file
        """
        self.progress_callback = progress_callback

    def load_asf(
        self,
        filepath: PathLike,
        skeleton: Optional[Skeleton] = None,
        callback: Optional[Callable[[Skeleton], None]] = None
    ) -> Skeleton:
        """
        Load an Acclaim skeleton file.

        Args:
            filepath: Path to the .asf file
            skeleton: Skeleton object to populate (optional)
            callback: Called with the skeleton once it has loaded

        Returns:
            Skeleton containing the data loaded from the file

        Raises:
            FileNotFoundError: If the file does not exist
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not UTF-8 text
            MocapParseError: If the file cannot be parsed
        """
        filepath = Path(filepath)
        text = self._read(filepath)

        try:
            skeleton = parse_asf(text, skeleton)
        except MocapParseError as exc:
            self._fail(filepath, exc)
            raise

        if skeleton.name == "Skeleton":
            skeleton.name = filepath.stem

        self._notify(filepath, LoadStatus.LOADED)
        if callback:
            callback(skeleton)
        return skeleton

    def load_amc(
        self,
        filepath: PathLike,
        skeleton: Skeleton,
        callback: Optional[Callable[[Animation], None]] = None
    ) -> Animation:
        """
        Load an Acclaim motion file.

        Args:
            filepath: Path to the .amc file
            skeleton: Skeleton the motion was captured for
            callback: Called with the animation once it has loaded

        Returns:
            Animation named after the file

        Raises:
            FileNotFoundError: If the file does not exist
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not UTF-8 text
            MocapParseError: If the file cannot be parsed
        """
        filepath = Path(filepath)
        text = self._read(filepath)

        try:
            animation = parse_amc(text, skeleton, Animation(filepath.stem))
        except MocapParseError as exc:
            self._fail(filepath, exc)
            raise

        self._notify(filepath, LoadStatus.LOADED)
        if callback:
            callback(animation)
        return animation

    def _read(self, filepath: Path) -> str:
        self._notify(filepath, LoadStatus.REQUESTED)
        logger.info("Loading %s", filepath)

        if not filepath.exists():
            self._notify(filepath, LoadStatus.FAILED)
            raise FileNotFoundError(f"Mocap file not found: {filepath}")

        try:
            return filepath.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Unable to read %s: %s", filepath, exc)
            self._notify(filepath, LoadStatus.FAILED)
            raise

    def _fail(self, filepath: Path, exc: Exception):
        logger.error("Unable to parse %s: %s", filepath, exc)
        self._notify(filepath, LoadStatus.FAILED)

    def _notify(self, filepath: Path, status: LoadStatus):
        if self.progress_callback:
            self.progress_callback(filepath, status)
