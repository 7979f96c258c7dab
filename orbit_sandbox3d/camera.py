"""
camera.py

Free-fly camera: mouse-look sets yaw/pitch, movement keys translate the
position along the current facing direction.
"""

import math
from typing import AbstractSet, Optional, Sequence

import numpy as np

from . import math3d

FORWARD = "forward"
BACK = "back"
LEFT = "left"
RIGHT = "right"

PITCH_LIMIT = 89.0


def clamp_pitch(pitch: float) -> float:
    return max(-PITCH_LIMIT, min(PITCH_LIMIT, pitch))


def front_from_angles(yaw: float, pitch: float) -> np.ndarray:
    """Unit facing vector for yaw/pitch given in degrees."""
    yaw_r = math3d.deg_to_rad(yaw)
    pitch_r = math3d.deg_to_rad(pitch)
    return math3d.normalize(np.array([
        math.cos(yaw_r) * math.cos(pitch_r),
        math.sin(pitch_r),
        math.sin(yaw_r) * math.cos(pitch_r),
    ]))


class Camera:
    def __init__(
        self,
        position: Sequence[float] = (0.0, 0.0, 0.0),
        yaw: float = -90.0,
        pitch: float = 0.0,
        move_speed: float = 10.0,
        mouse_sensitivity: float = 0.1,
        fov: float = math.pi / 4,
        near: float = 0.1,
        far: float = 5000.0,
    ):
        self.position: np.ndarray = math3d.as_vec3(position)
        self.up: np.ndarray = math3d.WORLD_UP.copy()
        self.move_speed: float = float(move_speed)
        self.mouse_sensitivity: float = float(mouse_sensitivity)
        self.fov: float = fov
        self.near: float = near
        self.far: float = far

        self.yaw: float = float(yaw)
        self.pitch: float = clamp_pitch(float(pitch))
        self.front: np.ndarray = front_from_angles(self.yaw, self.pitch)

    @classmethod
    def looking_at(cls, position: Sequence[float], target: Sequence[float], **kwargs) -> "Camera":
        """
        Build a camera at ``position`` whose yaw/pitch face ``target``.
        """
        direction = math3d.normalize(math3d.as_vec3(target) - math3d.as_vec3(position))
        pitch = math3d.rad_to_deg(math.asin(max(-1.0, min(1.0, direction[1]))))
        yaw = math3d.rad_to_deg(math.atan2(direction[2], direction[0]))
        return cls(position=position, yaw=yaw, pitch=pitch, **kwargs)

    def __repr__(self):
        x, y, z = self.position
        return f"Camera(pos=({x:.1f}, {y:.1f}, {z:.1f}), yaw={self.yaw:.1f}, pitch={self.pitch:.1f})"

    # --- orientation ---

    def apply_mouse_delta(self, dx: float, dy: float):
        """Turn by a mouse delta in pixels. Screen y grows downward."""
        self.yaw += dx * self.mouse_sensitivity
        self.pitch = clamp_pitch(self.pitch - dy * self.mouse_sensitivity)
        self.front = front_from_angles(self.yaw, self.pitch)

    # --- translation ---

    def right(self) -> np.ndarray:
        return math3d.normalize(math3d.cross(self.front, self.up))

    def apply_movement(self, pressed: AbstractSet[str], velocity: Optional[float] = None):
        """
        Move once for this frame. Directions add up without normalization,
        so diagonal movement is faster than straight movement.
        """
        speed = self.move_speed if velocity is None else velocity
        front = self.front.copy()
        right = self.right()

        if FORWARD in pressed:
            self.position = self.position + front * speed
        if BACK in pressed:
            self.position = self.position - front * speed
        if LEFT in pressed:
            self.position = self.position - right * speed
        if RIGHT in pressed:
            self.position = self.position + right * speed

    # --- transforms ---

    def view_matrix(self) -> np.ndarray:
        return math3d.look_at(self.position, self.position + self.front, self.up)

    def projection_matrix(self, aspect: float) -> np.ndarray:
        return math3d.perspective(self.fov, aspect, self.near, self.far)
