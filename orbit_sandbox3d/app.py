#!/usr/bin/env python3
"""
app.py

Interactive 3D orbit viewer: a sun, an orbiting planet and its moon, seen
through a free-fly camera.

Usage
-----
    orbit-sandbox3d
    orbit-sandbox3d --width 1600 --height 900 --log-level debug
    python -m orbit_sandbox3d

Controls
--------
    Click the window to capture the mouse for mouse-look, Esc to release.
    W/A/S/D or arrows move, 1-4 toggle animations, [ ] and ; ' change orbit
    speeds, R resets, Q quits.
"""

import argparse
import logging
import sys
from typing import List, Optional

import pygame

from .compositor import FrameCompositor, SceneState
from .config import MOON_ID, PLANET_ID, SUN_ID, AppConfig, CameraConfig, WindowConfig
from .errors import BackendUnavailableError, SceneError
from .input import FrameInput, InputCollector
from .logging_config import parse_level, setup_logging

logger = logging.getLogger(__name__)


def create_gl_backend(width: int, height: int):
    # PyOpenGL loads the system GL library at import time
    try:
        from .gl_backend import GLBackend
    except ImportError as exc:
        raise BackendUnavailableError(f"PyOpenGL could not load an OpenGL library: {exc}") from exc
    return GLBackend(width, height)


# ---------- Viewer ----------


class OrbitViewer:
    def __init__(self, config: AppConfig, cache_meshes: bool = False):
        self.config = config
        win = config.window

        pygame.init()
        pygame.display.set_caption(win.title)
        pygame.display.gl_set_attribute(pygame.GL_DEPTH_SIZE, 24)
        pygame.display.gl_set_attribute(pygame.GL_DOUBLEBUFFER, 1)
        try:
            self.screen = pygame.display.set_mode((win.width, win.height), pygame.OPENGL | pygame.DOUBLEBUF)
        except pygame.error as exc:
            pygame.quit()
            raise BackendUnavailableError(f"Could not open an OpenGL window: {exc}") from exc
        logger.info("Window %dx%d opened", win.width, win.height)

        try:
            self.backend = create_gl_backend(win.width, win.height)
        except SceneError:
            pygame.quit()
            raise

        self.clock = pygame.time.Clock()
        self.state = SceneState.from_config(config)
        self.compositor = FrameCompositor(self.backend, cache_meshes=cache_meshes)
        self.input = InputCollector()
        self.aspect = win.aspect
        self.hint_until_ms = 0

    # --- main loop ---

    def run(self):
        logger.info("Entering frame loop")
        try:
            while True:
                self.handle_events()
                frame_input = self.input.snapshot()
                if frame_input.quit:
                    break
                self.apply_capture(frame_input)

                now_ms = pygame.time.get_ticks()
                self.compositor.render_frame(self.state, now_ms, frame_input, self.aspect)
                pygame.display.flip()
                self.update_caption(now_ms)

                self.clock.tick(self.config.window.fps)
        finally:
            self.shutdown()

    def handle_events(self):
        for event in pygame.event.get():
            self.input.handle_event(event)

    def apply_capture(self, frame_input: FrameInput):
        if frame_input.capture_changed is None:
            return
        captured = frame_input.capture_changed
        pygame.event.set_grab(captured)
        pygame.mouse.set_visible(not captured)
        if captured:
            self.hint_until_ms = pygame.time.get_ticks() + int(self.config.hint_seconds * 1000)

    # --- status ---

    def update_caption(self, now_ms: int):
        pygame.display.set_caption(self.caption_text(now_ms))

    def caption_text(self, now_ms: int) -> str:
        if self.input.captured and now_ms < self.hint_until_ms:
            return f"{self.config.window.title} - mouse captured, press Esc to release"

        scene = self.state.scene
        sun, planet, moon = scene[SUN_ID], scene[PLANET_ID], scene[MOON_ID]

        def flag(on: bool) -> str:
            return "on" if on else "off"

        return (
            f"{self.config.window.title} | "
            f"sun pulse {flag(sun.pulse_active)} | "
            f"planet x{planet.angular_speed:g} orbit {flag(planet.rotation_active)} | "
            f"moon x{moon.angular_speed:g} orbit {flag(moon.rotation_active)} "
            f"pulse {flag(moon.pulse_active)}"
        )

    def shutdown(self):
        logger.info("Shutting down after %d frames", self.compositor.frame_count)
        self.backend.release()
        pygame.quit()


# ---------- main ----------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive 3D sun/planet/moon orbit viewer")
    parser.add_argument("--width", type=int, default=WindowConfig.width, help="Window width in pixels.")
    parser.add_argument("--height", type=int, default=WindowConfig.height, help="Window height in pixels.")
    parser.add_argument("--fps", type=int, default=WindowConfig.fps, help="Frame rate cap.")
    parser.add_argument(
        "--move-speed",
        type=float,
        default=CameraConfig.move_speed,
        help="Camera movement per frame while a movement key is held.",
    )
    parser.add_argument(
        "--sensitivity",
        type=float,
        default=CameraConfig.mouse_sensitivity,
        help="Degrees of camera turn per pixel of mouse movement.",
    )
    parser.add_argument(
        "--cache-meshes",
        action="store_true",
        help="Reuse sphere meshes per radius instead of regenerating them every draw.",
    )
    parser.add_argument("--log-level", default="info", help="debug, info, warning or error.")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")
    return parser


def config_from_args(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        window=WindowConfig(width=args.width, height=args.height, fps=args.fps),
        camera=CameraConfig(move_speed=args.move_speed, mouse_sensitivity=args.sensitivity),
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        level = parse_level(args.log_level)
        config = config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    setup_logging(level, args.log_file)

    try:
        viewer = OrbitViewer(config, cache_meshes=args.cache_meshes)
    except SceneError as exc:
        logger.error("Startup failed: %s", exc)
        return 1

    viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
