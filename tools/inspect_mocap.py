#!/usr/bin/env python3
"""
Inspect Acclaim motion capture files.

Prints the bone tree of an ASF skeleton and a summary of each AMC clip
parsed against it. ``--simulate`` plays the clips back through an
AnimationController (first clip as primary, the rest as overlays) and
reports where the root ends up.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Sequence

import numpy as np

ROOT = Path(__file__).resolve().parents[1]

SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from mocaplib import (  # noqa: E402
    DEFAULT_ANIMATION_FPS,
    Animation,
    AnimationController,
    AnimationLoader,
    MocapParseError,
    Skeleton,
)

DOF_LABELS = ("rx", "ry", "rz")


# Reporting ---------------------------------------------------------------------

def _bone_depth(bone, skeleton: Skeleton) -> int:
    depth = 0
    node = bone.parent
    while node is not None and node is not skeleton:
        depth += 1
        node = node.parent
    return depth


def describe_skeleton(skeleton: Skeleton) -> List[str]:
    """Return one line per bone, indented by hierarchy depth."""

    lines = [f"Skeleton '{skeleton.name}' ({skeleton.bone_count} bones)"]
    for bone in skeleton.iter_bones():
        dofs = " ".join(label for label, active in zip(DOF_LABELS, bone.dofs) if active) or "-"
        indent = "  " * (_bone_depth(bone, skeleton) + 1)
        lines.append(f"{indent}{bone.name}  length={bone.length:.4f}  dof={dofs}")
    return lines


def describe_animation(animation: Animation, fps: float) -> str:
    if len(animation) == 0:
        return f"Clip '{animation.name}': empty"

    first = np.array(animation[0].root_position)
    last = np.array(animation[len(animation) - 1].root_position)
    travel = float(np.linalg.norm(last - first))
    return (
        f"Clip '{animation.name}': {len(animation)} frames, "
        f"{animation.get_duration(fps):.2f}s at {fps:g} fps, root travel {travel:.3f}"
    )


def simulate(skeleton: Skeleton, animations: Sequence[Animation], seconds: float,
             fps: float, relative: bool) -> str:
    """Play the clips for a fixed time and describe the final root placement."""

    controller = AnimationController(skeleton, fps=fps, use_absolute_position=not relative)
    controller.play(animations[0])
    for overlay in animations[1:]:
        controller.overlay(overlay, transition_frames=int(fps // 4))

    delta_time = 1.0 / fps
    steps = int(round(seconds * fps))
    for _ in range(steps):
        controller.update(delta_time)

    x, y, z = skeleton.position
    return (
        f"After {steps} updates: frame {controller.current_frame}, "
        f"{controller.get_queue_count()} overlay(s) queued, root at ({x:.3f}, {y:.3f}, {z:.3f})"
    )


# CLI ---------------------------------------------------------------------------

def cli(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("asf", type=Path, help="ASF skeleton file")
    parser.add_argument("amc", type=Path, nargs="*", help="AMC motion files for the skeleton")
    parser.add_argument("--fps", type=float, default=DEFAULT_ANIMATION_FPS,
                        help="Playback rate used for durations and simulation")
    parser.add_argument("--simulate", type=float, metavar="SECONDS",
                        help="Play the clips for SECONDS and report the final root position")
    parser.add_argument("--relative", action="store_true",
                        help="Accumulate root motion instead of copying it during simulation")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    loader = AnimationLoader()
    try:
        skeleton = loader.load_asf(args.asf)
        animations = [loader.load_amc(path, skeleton) for path in args.amc]
    except (OSError, UnicodeDecodeError, MocapParseError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for line in describe_skeleton(skeleton):
        print(line)
    for animation in animations:
        print(describe_animation(animation, args.fps))

    if args.simulate is not None:
        if not animations:
            parser.error("--simulate needs at least one AMC file")
        print(simulate(skeleton, animations, args.simulate, args.fps, args.relative))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLI-compatible entry point."""

    return cli(argv)


if __name__ == "__main__":
    raise SystemExit(cli())
