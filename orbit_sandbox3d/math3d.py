"""
math3d.py

Vec3 / Mat4 helpers on top of numpy.

Vectors are float64 arrays of shape (3,), matrices float64 arrays of shape
(4, 4) in row-major math convention (``M @ v``). Every helper returns a new
array; nothing here mutates its arguments.
"""

import math
from typing import Iterable

import numpy as np

WORLD_UP = np.array([0.0, 1.0, 0.0])


def vec3(x: float, y: float, z: float) -> np.ndarray:
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(values: Iterable[float]) -> np.ndarray:
    v = np.asarray(tuple(values), dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {v.shape}.")
    return v


def normalize(v: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(v))
    if n == 0.0:
        return np.zeros(3)
    return v / n


def cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.cross(a, b)


def deg_to_rad(degrees: float) -> float:
    return degrees * math.pi / 180.0


def rad_to_deg(radians: float) -> float:
    return radians * 180.0 / math.pi


# ---------- Matrices ----------


def translation(offset: np.ndarray) -> np.ndarray:
    m = np.eye(4)
    m[0:3, 3] = offset
    return m


def scaling(factor: float) -> np.ndarray:
    m = np.eye(4)
    m[0, 0] = m[1, 1] = m[2, 2] = factor
    return m


def look_at(eye: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    """
    Right-handed view matrix looking from ``eye`` toward ``target``.

    Same layout as gl-matrix ``mat4.lookAt`` once transposed for upload.
    """
    f = normalize(target - eye)
    s = normalize(np.cross(f, up))
    u = np.cross(s, f)

    m = np.eye(4)
    m[0, 0:3] = s
    m[1, 0:3] = u
    m[2, 0:3] = -f
    m[0, 3] = -float(np.dot(s, eye))
    m[1, 3] = -float(np.dot(u, eye))
    m[2, 3] = float(np.dot(f, eye))
    return m


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """OpenGL-style perspective projection; ``fovy`` in radians."""
    if aspect <= 0:
        raise ValueError(f"Aspect ratio must be positive, got {aspect}.")
    if near <= 0 or far <= near:
        raise ValueError(f"Invalid clip planes near={near}, far={far}.")
    f = 1.0 / math.tan(fovy * 0.5)
    m = np.zeros((4, 4))
    m[0, 0] = f / float(aspect)
    m[1, 1] = f
    m[2, 2] = (far + near) / (near - far)
    m[2, 3] = (2.0 * far * near) / (near - far)
    m[3, 2] = -1.0
    return m


def transform_point(m: np.ndarray, p: np.ndarray) -> np.ndarray:
    """Apply ``m`` to ``p`` with w=1 and divide by the resulting w."""
    h = m @ np.append(p, 1.0)
    if h[3] != 0.0 and h[3] != 1.0:
        return h[0:3] / h[3]
    return h[0:3]
