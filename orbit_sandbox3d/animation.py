"""
animation.py

Per-body animation state (orbit angle, pulse scale, activity flags) and the
scene that advances it once per frame.

Orbit angles advance by a fixed amount per frame (``angular_speed *
orbit_step``), whereas pulse scales advance by elapsed milliseconds.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .config import RGBA, BodyConfig, SceneConfig
from .geometry import orbit_offset

logger = logging.getLogger(__name__)


# ---------- Data model ----------


class CelestialBody:
    def __init__(self, cfg: BodyConfig):
        self.id: str = cfg.id
        self.name: str = cfg.name
        self.parent_id: Optional[str] = cfg.parent
        self.parent: Optional["CelestialBody"] = None
        self.children: List["CelestialBody"] = []

        # Orbit
        self.orbit_radius: float = cfg.orbit_radius
        self.default_angular_speed: float = cfg.angular_speed
        self.angular_speed: float = cfg.angular_speed
        self.angle: float = 0.0
        self.rotation_active: bool = False

        # Pulse
        self.base_draw_radius: float = cfg.draw_radius
        self.pulse_range: Optional[Tuple[float, float]] = cfg.pulse_range
        self.pulse_rate: float = cfg.pulse_rate
        self.pulse_active: bool = False
        self.pulse_scale: float = 1.0
        self.pulse_direction: int = 1

        self.color: RGBA = cfg.color

        # world-space position, refreshed every frame
        self.position: np.ndarray = np.zeros(3)

    def __repr__(self):
        return f"CelestialBody({self.id!r}, angle={self.angle:.3f}, scale={self.pulse_scale:.3f})"

    def is_root(self) -> bool:
        return self.parent is None

    def can_orbit(self) -> bool:
        return not self.is_root()

    def can_pulse(self) -> bool:
        return self.pulse_range is not None

    @property
    def draw_radius(self) -> float:
        # A paused pulse snaps back to the base size.
        if self.pulse_active:
            return self.base_draw_radius * self.pulse_scale
        return self.base_draw_radius

    def update_angle(self, orbit_step: float):
        if self.rotation_active and self.angular_speed != 0:
            self.angle += self.angular_speed * orbit_step

    def update_pulse(self, delta_ms: float):
        if not self.pulse_active or self.pulse_range is None:
            return
        lo, hi = self.pulse_range
        self.pulse_scale += self.pulse_direction * self.pulse_rate * delta_ms
        if self.pulse_scale >= hi:
            self.pulse_scale = hi
            self.pulse_direction = -1
        elif self.pulse_scale <= lo:
            self.pulse_scale = lo
            self.pulse_direction = 1

    def reset(self):
        self.angle = 0.0
        self.rotation_active = False
        self.angular_speed = self.default_angular_speed
        self.pulse_active = False
        self.pulse_scale = 1.0
        self.pulse_direction = 1


class Scene:
    def __init__(self, cfg: SceneConfig):
        self.config = cfg
        self.bodies: Dict[str, CelestialBody] = {}

        for bc in cfg.bodies:
            self.bodies[bc.id] = CelestialBody(bc)

        # link parents/children
        for b in self.bodies.values():
            if b.parent_id:
                parent = self.bodies[b.parent_id]
                b.parent = parent
                parent.children.append(b)

        self.root: CelestialBody = next(b for b in self.bodies.values() if b.is_root())
        self.update_positions()

    def __iter__(self) -> Iterator[CelestialBody]:
        return iter(self.bodies.values())

    def __getitem__(self, body_id: str) -> CelestialBody:
        try:
            return self.bodies[body_id]
        except KeyError:
            raise KeyError(f"Unknown body id '{body_id}'.") from None

    # --- per-frame ---

    def advance(self, delta_ms: float):
        """Step every body's orbit angle (per frame) and pulse (per ms)."""
        for b in self.bodies.values():
            b.update_pulse(delta_ms)
            b.update_angle(self.config.orbit_step)

    def update_positions(self):
        """Recompute world positions top-down from the current angles."""
        self._update_positions_recursive(self.root)

    def _update_positions_recursive(self, body: CelestialBody):
        if body.is_root():
            body.position = np.zeros(3)
        else:
            body.position = body.parent.position + orbit_offset(body.orbit_radius, body.angle)
        for child in body.children:
            self._update_positions_recursive(child)

    # --- UI operations ---

    def toggle_rotation(self, body_id: str) -> bool:
        body = self[body_id]
        if not body.can_orbit():
            raise ValueError(f"Body '{body_id}' does not orbit anything.")
        body.rotation_active = not body.rotation_active
        logger.info("%s orbit %s", body.name, "on" if body.rotation_active else "off")
        return body.rotation_active

    def toggle_pulse(self, body_id: str) -> bool:
        body = self[body_id]
        if not body.can_pulse():
            raise ValueError(f"Body '{body_id}' has no pulse range.")
        body.pulse_active = not body.pulse_active
        logger.info("%s pulse %s", body.name, "on" if body.pulse_active else "off")
        return body.pulse_active

    def set_angular_speed(self, body_id: str, value: float) -> float:
        body = self[body_id]
        if not body.can_orbit():
            raise ValueError(f"Body '{body_id}' does not orbit anything.")
        body.angular_speed = max(self.config.speed_min, min(self.config.speed_max, float(value)))
        logger.debug("%s angular speed = %s", body.name, body.angular_speed)
        return body.angular_speed

    def nudge_angular_speed(self, body_id: str, steps: int) -> float:
        """Move a body's speed by whole slider steps."""
        body = self[body_id]
        return self.set_angular_speed(body_id, body.angular_speed + steps * self.config.speed_step)

    def reset(self):
        for b in self.bodies.values():
            b.reset()
        self.update_positions()
        logger.info("Scene reset to defaults")
