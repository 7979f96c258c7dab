"""
compositor.py

One pass of the frame loop: timing, camera update, UI events, animation
advance, world positions, and the draw requests handed to the backend.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

import numpy as np

from . import math3d
from .animation import CelestialBody, Scene
from .camera import Camera
from .config import MOON_ID, PLANET_ID, RGBA, SUN_ID, AppConfig
from .geometry import cached_unit_sphere, generate_dashed_orbit, generate_flat_circle, generate_sphere
from .input import PULSE, ROTATION, FrameInput

logger = logging.getLogger(__name__)

TRIANGLES = "triangles"
LINES = "lines"
TRIANGLE_FAN = "triangle_fan"


# ---------- Data model ----------


@dataclass
class DrawRequest:
    kind: str
    label: str
    positions: np.ndarray
    indices: Optional[np.ndarray]
    model_view: np.ndarray
    color: RGBA


class RenderBackend(Protocol):
    def begin_frame(self, projection: np.ndarray) -> None: ...
    def draw(self, request: DrawRequest) -> None: ...
    def end_frame(self) -> None: ...
    def release(self) -> None: ...


@dataclass
class SceneState:
    camera: Camera
    scene: Scene
    last_frame_time: float = 0.0

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "SceneState":
        cam = cfg.camera
        camera = Camera.looking_at(
            cam.position,
            cam.target,
            move_speed=cam.move_speed,
            mouse_sensitivity=cam.mouse_sensitivity,
            fov=cam.fov,
            near=cam.near,
            far=cam.far,
        )
        return cls(camera=camera, scene=Scene(cfg.scene))


# ---------- Frame loop body ----------


class FrameCompositor:
    def __init__(self, backend: RenderBackend, cache_meshes: bool = False):
        self.backend = backend
        self.cache_meshes = cache_meshes
        self.frame_count = 0

    def render_frame(
        self,
        state: SceneState,
        now_ms: float,
        frame_input: Optional[FrameInput] = None,
        aspect: float = 1.0,
    ) -> List[DrawRequest]:
        frame_input = frame_input or FrameInput()

        delta_ms = now_ms - state.last_frame_time
        state.last_frame_time = now_ms

        # Movement uses the facing direction from before this frame's mouse-look
        camera = state.camera
        if frame_input.pressed:
            camera.apply_movement(frame_input.pressed)
        if frame_input.mouse_dx or frame_input.mouse_dy:
            camera.apply_mouse_delta(frame_input.mouse_dx, frame_input.mouse_dy)

        self.apply_ui(state.scene, frame_input)

        view = camera.view_matrix()
        projection = camera.projection_matrix(aspect)
        self.backend.begin_frame(projection)

        scene = state.scene
        scene.advance(delta_ms)
        scene.update_positions()

        requests = self.build_draw_requests(scene, view)
        for request in requests:
            self.backend.draw(request)
        self.backend.end_frame()

        self.frame_count += 1
        logger.debug(
            "frame %d dt=%.1fms %r planet=%.3f moon=%.3f",
            self.frame_count, delta_ms, camera, scene[PLANET_ID].angle, scene[MOON_ID].angle,
        )
        return requests

    @staticmethod
    def apply_ui(scene: Scene, frame_input: FrameInput):
        for action, body_id in frame_input.toggles:
            if action == ROTATION:
                scene.toggle_rotation(body_id)
            elif action == PULSE:
                scene.toggle_pulse(body_id)
        for body_id, steps in frame_input.speed_changes:
            scene.nudge_angular_speed(body_id, steps)
        if frame_input.reset:
            scene.reset()

    # --- draw requests ---

    def build_draw_requests(self, scene: Scene, view: np.ndarray) -> List[DrawRequest]:
        """
        Fixed draw order: planet orbit, moon orbit, moon, planet, sun.
        Occlusion is left to the depth test.
        """
        cfg = scene.config
        sun = scene[SUN_ID]
        planet = scene[PLANET_ID]
        moon = scene[MOON_ID]

        return [
            self.orbit_request(planet, cfg.orbit_color, cfg.dash_count, cfg.dash_length, view),
            self.orbit_request(moon, cfg.orbit_color, cfg.dash_count, cfg.dash_length, view),
            self.sphere_request(moon, cfg.lat_bands, cfg.long_bands, view),
            self.sphere_request(planet, cfg.lat_bands, cfg.long_bands, view),
            self.sphere_request(sun, cfg.lat_bands, cfg.long_bands, view),
        ]

    @staticmethod
    def orbit_request(body: CelestialBody, color: RGBA, dash_count: int,
                      dash_length: float, view: np.ndarray) -> DrawRequest:
        # The path is centered on the parent's position in this frame
        cx, cy, cz = body.parent.position
        mesh = generate_dashed_orbit(cx, cy, cz, body.orbit_radius, dash_count, dash_length)
        return DrawRequest(
            kind=LINES,
            label=f"{body.id}-orbit",
            positions=mesh.vertices,
            indices=None,
            model_view=view,
            color=color,
        )

    def sphere_request(self, body: CelestialBody, lat_bands: int, long_bands: int,
                       view: np.ndarray) -> DrawRequest:
        model = math3d.translation(body.position)
        if self.cache_meshes:
            # One shared unit mesh; the radius goes into the model matrix
            mesh = cached_unit_sphere(lat_bands, long_bands)
            model = model @ math3d.scaling(body.draw_radius)
        else:
            mesh = generate_sphere(body.draw_radius, lat_bands, long_bands)
        return DrawRequest(
            kind=TRIANGLES,
            label=body.id,
            positions=mesh.positions,
            indices=mesh.indices,
            model_view=view @ model,
            color=body.color,
        )

    @staticmethod
    def flat_circle_request(label: str, cx: float, cy: float, radius: float,
                            color: RGBA, view: np.ndarray) -> DrawRequest:
        """Filled disk in the z=0 plane, drawn as a triangle fan."""
        return DrawRequest(
            kind=TRIANGLE_FAN,
            label=label,
            positions=generate_flat_circle(cx, cy, radius),
            indices=None,
            model_view=view,
            color=color,
        )
