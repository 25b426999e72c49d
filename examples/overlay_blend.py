#!/usr/bin/env python3
"""
Overlay Blend Example

Loops the bundled walk clip, queues the wave clip as an overlay and
prints the blend weight and root position as playback crossfades in
and back out.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from mocaplib import MOCAP_DIR, AnimationController, AnimationLoader

FPS = 30


if __name__ == '__main__':
    loader = AnimationLoader()
    skeleton = loader.load_asf(MOCAP_DIR / "sample.asf")
    walk = loader.load_amc(MOCAP_DIR / "walk.amc", skeleton)
    wave = loader.load_amc(MOCAP_DIR / "wave.amc", skeleton)
    walk.make_loop(8)

    controller = AnimationController(skeleton, fps=FPS, use_absolute_position=False)
    controller.play(walk)
    controller.overlay(wave, transition_frames=10)

    print(f"Playing '{walk.name}' ({len(walk)} frames) with '{wave.name}' overlaid")
    for step in range(1, 61):
        controller.update(1.0 / FPS)
        if step % 5 == 0:
            x, y, z = skeleton.position
            print(f"  t={controller.current_time:5.2f}s  overlays={controller.get_queue_count()}  "
                  f"alpha={controller.blend_alpha:.2f}  root=({x:.3f}, {y:.3f}, {z:.3f})")
