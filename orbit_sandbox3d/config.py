"""
config.py

Default parameters for the window, the camera and the three-body scene.

Every value here is a startup constant; nothing is read back from disk and
nothing is persisted between sessions.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .geometry import MAX_SPHERE_VERTICES

RGBA = Tuple[float, float, float, float]

SUN_ID = "sun"
PLANET_ID = "planet"
MOON_ID = "moon"


@dataclass
class WindowConfig:
    width: int = 1200
    height: int = 700
    fps: int = 60
    title: str = "orbit_sandbox3d"

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Window size must be positive, got {self.width}x{self.height}.")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}.")

    @property
    def aspect(self) -> float:
        return self.width / self.height


@dataclass
class CameraConfig:
    """Free-fly camera defaults. Angles in degrees except ``fov`` (radians)."""
    position: Tuple[float, float, float] = (0.0, 300.0, 1200.0)
    target: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    move_speed: float = 10.0
    mouse_sensitivity: float = 0.1
    fov: float = math.pi / 4
    near: float = 0.1
    far: float = 5000.0

    def __post_init__(self):
        if self.near <= 0 or self.far <= self.near:
            raise ValueError(f"Invalid clip planes near={self.near}, far={self.far}.")
        if not 0 < self.fov < math.pi:
            raise ValueError(f"fov must be in (0, pi) radians, got {self.fov}.")


@dataclass
class BodyConfig:
    id: str
    name: str
    draw_radius: float
    color: RGBA
    parent: Optional[str] = None
    orbit_radius: float = 0.0
    angular_speed: float = 0.0
    # (min, max) scale bounds, or None when the body never pulses
    pulse_range: Optional[Tuple[float, float]] = None
    pulse_rate: float = 0.0015  # scale units per millisecond

    def __post_init__(self):
        if self.draw_radius < 0:
            raise ValueError(f"{self.id}: draw_radius must be >= 0.")
        if self.orbit_radius < 0:
            raise ValueError(f"{self.id}: orbit_radius must be >= 0.")
        if self.parent is None and self.orbit_radius != 0.0:
            raise ValueError(f"{self.id}: a root body cannot have an orbit radius.")
        if self.pulse_range is not None:
            lo, hi = self.pulse_range
            if not lo <= 1.0 <= hi:
                raise ValueError(f"{self.id}: pulse range {self.pulse_range} must contain 1.0.")
        if len(self.color) != 4:
            raise ValueError(f"{self.id}: color must be RGBA.")


def _default_bodies() -> List[BodyConfig]:
    return [
        BodyConfig(
            id=SUN_ID,
            name="Sun",
            draw_radius=90.0,
            color=(0.988, 0.700, 0.0, 1.0),
            pulse_range=(0.5, 1.5),
        ),
        BodyConfig(
            id=PLANET_ID,
            name="Earth",
            parent=SUN_ID,
            orbit_radius=320.0,
            draw_radius=50.0,
            angular_speed=1.0,
            color=(0.196, 0.326, 0.604, 1.0),
        ),
        BodyConfig(
            id=MOON_ID,
            name="Moon",
            parent=PLANET_ID,
            orbit_radius=90.0,
            draw_radius=20.0,
            angular_speed=5.0,
            color=(1.0, 1.0, 0.616, 1.0),
            pulse_range=(0.75, 1.25),
        ),
    ]


@dataclass
class SceneConfig:
    bodies: List[BodyConfig] = field(default_factory=_default_bodies)
    orbit_color: RGBA = (1.0, 1.0, 1.0, 0.2)
    dash_count: int = 60
    dash_length: float = 0.03  # radians
    lat_bands: int = 20
    long_bands: int = 20
    # Angle advance per frame is angular_speed * orbit_step (frame-count-scaled)
    orbit_step: float = 0.01
    speed_min: float = 0.0
    speed_max: float = 10.0
    speed_step: float = 1.0

    def __post_init__(self):
        ids = [b.id for b in self.bodies]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate body ids in {ids}.")
        roots = [b for b in self.bodies if b.parent is None]
        if len(roots) != 1:
            raise ValueError("Scene must have exactly one root body.")
        seen = set()
        for b in self.bodies:
            if b.parent is not None and b.parent not in seen:
                raise ValueError(f"{b.id}: parent '{b.parent}' must be declared before it.")
            seen.add(b.id)
        if self.dash_count <= 0:
            raise ValueError("dash_count must be positive.")
        if self.dash_length < 0:
            raise ValueError("dash_length must be >= 0.")
        if self.lat_bands <= 0 or self.long_bands <= 0:
            raise ValueError(f"Band counts must be positive, got {self.lat_bands}x{self.long_bands}.")
        if (self.lat_bands + 1) * (self.long_bands + 1) > MAX_SPHERE_VERTICES:
            raise ValueError(f"{self.lat_bands}x{self.long_bands} bands exceed 16-bit indices.")
        if self.speed_min > self.speed_max:
            raise ValueError("speed_min must not exceed speed_max.")


@dataclass
class AppConfig:
    window: WindowConfig = field(default_factory=WindowConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    scene: SceneConfig = field(default_factory=SceneConfig)
    # Seconds the pointer-capture hint stays in the caption
    hint_seconds: float = 5.0
