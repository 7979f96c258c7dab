"""
input.py

Turns pygame events into a ``FrameInput`` snapshot that the frame loop
consumes exactly once per frame.

Key bindings
------------
    Click window     capture mouse (mouse-look)
    Esc              release mouse
    W/A/S/D, arrows  move camera
    1                toggle sun pulse
    2                toggle planet orbit
    3                toggle moon orbit
    4                toggle moon pulse
    [ / ]            planet orbit speed down / up
    ; / '            moon orbit speed down / up
    R                reset animation
    Q                quit
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Set, Tuple

import pygame

from .camera import BACK, FORWARD, LEFT, RIGHT
from .config import MOON_ID, PLANET_ID, SUN_ID

logger = logging.getLogger(__name__)

ROTATION = "rotation"
PULSE = "pulse"

MOVEMENT_KEYS = {
    pygame.K_w: FORWARD,
    pygame.K_UP: FORWARD,
    pygame.K_s: BACK,
    pygame.K_DOWN: BACK,
    pygame.K_a: LEFT,
    pygame.K_LEFT: LEFT,
    pygame.K_d: RIGHT,
    pygame.K_RIGHT: RIGHT,
}

TOGGLE_KEYS = {
    pygame.K_1: (PULSE, SUN_ID),
    pygame.K_2: (ROTATION, PLANET_ID),
    pygame.K_3: (ROTATION, MOON_ID),
    pygame.K_4: (PULSE, MOON_ID),
}

SPEED_KEYS = {
    pygame.K_LEFTBRACKET: (PLANET_ID, -1),
    pygame.K_RIGHTBRACKET: (PLANET_ID, 1),
    pygame.K_SEMICOLON: (MOON_ID, -1),
    pygame.K_QUOTE: (MOON_ID, 1),
}


@dataclass
class FrameInput:
    pressed: FrozenSet[str] = frozenset()
    mouse_dx: float = 0.0
    mouse_dy: float = 0.0
    toggles: List[Tuple[str, str]] = field(default_factory=list)
    speed_changes: List[Tuple[str, int]] = field(default_factory=list)
    reset: bool = False
    quit: bool = False
    # True = capture engaged this frame, False = released, None = unchanged
    capture_changed: Optional[bool] = None


class InputCollector:
    def __init__(self):
        # Raw key codes; W and the up arrow both mean forward
        self.pressed: Set[int] = set()
        self.captured = False
        self._pending = FrameInput()

    def handle_event(self, event: pygame.event.Event):
        if event.type == pygame.QUIT:
            self._pending.quit = True

        elif event.type == pygame.KEYDOWN:
            self.handle_keydown(event.key)

        elif event.type == pygame.KEYUP:
            self.pressed.discard(event.key)

        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if not self.captured:
                self._set_capture(True)

        elif event.type == pygame.MOUSEMOTION and self.captured:
            dx, dy = event.rel
            self._pending.mouse_dx += dx
            self._pending.mouse_dy += dy

    def handle_keydown(self, key: int):
        if key in MOVEMENT_KEYS:
            self.pressed.add(key)
        elif key in TOGGLE_KEYS:
            self._pending.toggles.append(TOGGLE_KEYS[key])
        elif key in SPEED_KEYS:
            self._pending.speed_changes.append(SPEED_KEYS[key])
        elif key == pygame.K_r:
            self._pending.reset = True
        elif key == pygame.K_q:
            self._pending.quit = True
        elif key == pygame.K_ESCAPE and self.captured:
            self._set_capture(False)

    def _set_capture(self, captured: bool):
        self.captured = captured
        self._pending.capture_changed = captured
        # Motion queued before the grab is not mouse-look
        self._pending.mouse_dx = 0.0
        self._pending.mouse_dy = 0.0
        logger.info("Pointer capture %s", "engaged" if captured else "released")

    def snapshot(self) -> FrameInput:
        """Hand over everything collected since the previous frame."""
        frame = self._pending
        frame.pressed = frozenset(MOVEMENT_KEYS[key] for key in self.pressed)
        self._pending = FrameInput()
        return frame
