"""
geometry.py

Procedural vertex data for the scene: UV-spheres, dashed orbit paths and a
flat circle fan. Everything here is a pure function of its arguments.
"""

import functools
import math
from dataclasses import dataclass

import numpy as np

# Depth offset of orbit paths, as a fraction of the orbit radius
ORBIT_TILT = 0.3

MAX_SPHERE_VERTICES = 65536


@dataclass(frozen=True)
class SphereMesh:
    positions: np.ndarray  # (N, 3) float32
    indices: np.ndarray    # (M,) uint16, triangle list

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3


@dataclass(frozen=True)
class DashedOrbitMesh:
    vertices: np.ndarray  # (2 * dash_count, 3) float32, line list

    @property
    def segments(self) -> np.ndarray:
        """Endpoint pairs, shape (dash_count, 2, 3)."""
        return self.vertices.reshape(-1, 2, 3)


def orbit_offset(radius: float, angle: float) -> np.ndarray:
    """
    Offset of a point on a tilted orbit from its center.

    The z term is a cosmetic depth offset, not an inclined orbital plane:
    ``(r cos a, r sin a, sin a * r * 0.3)``.
    """
    return np.array([
        radius * math.cos(angle),
        radius * math.sin(angle),
        math.sin(angle) * radius * ORBIT_TILT,
    ])


# ---------- Spheres ----------


def generate_sphere(radius: float, lat_bands: int = 20, long_bands: int = 20) -> SphereMesh:
    if radius < 0:
        raise ValueError(f"Sphere radius must be >= 0, got {radius}.")
    if lat_bands <= 0 or long_bands <= 0:
        raise ValueError(f"Band counts must be positive, got {lat_bands}x{long_bands}.")
    if (lat_bands + 1) * (long_bands + 1) > MAX_SPHERE_VERTICES:
        raise ValueError(f"{lat_bands}x{long_bands} bands exceed 16-bit indices.")

    positions = []
    for lat in range(lat_bands + 1):
        theta = lat * math.pi / lat_bands
        sin_theta = math.sin(theta)
        cos_theta = math.cos(theta)

        for lon in range(long_bands + 1):
            phi = lon * 2.0 * math.pi / long_bands
            x = radius * math.cos(phi) * sin_theta
            y = radius * cos_theta
            z = radius * math.sin(phi) * sin_theta
            positions.append((x, y, z))

    indices = []
    for lat in range(lat_bands):
        for lon in range(long_bands):
            # first/second are the same column on adjacent latitude rings
            first = lat * (long_bands + 1) + lon
            second = first + long_bands + 1
            indices.extend((first, second, first + 1))
            indices.extend((second, second + 1, first + 1))

    return SphereMesh(
        positions=np.array(positions, dtype=np.float32),
        indices=np.array(indices, dtype=np.uint16),
    )


@functools.lru_cache(maxsize=8)
def cached_unit_sphere(lat_bands: int = 20, long_bands: int = 20) -> SphereMesh:
    """
    Memoized radius-1 sphere, one entry per band pair. Callers scale it in the
    model matrix, so a pulsing radius still hits the cache. The returned
    arrays are read-only since the same mesh object is handed out to every
    caller.
    """
    mesh = generate_sphere(1.0, lat_bands, long_bands)
    mesh.positions.setflags(write=False)
    mesh.indices.setflags(write=False)
    return mesh


# ---------- Orbit paths ----------


def generate_dashed_orbit(
    cx: float,
    cy: float,
    cz: float,
    radius: float,
    dash_count: int = 60,
    dash_length: float = 0.03,
) -> DashedOrbitMesh:
    if dash_count <= 0:
        raise ValueError(f"dash_count must be positive, got {dash_count}.")

    center = np.array([cx, cy, cz])
    vertices = []
    for i in range(dash_count):
        start = (i / dash_count) * 2.0 * math.pi
        end = start + dash_length
        vertices.append(center + orbit_offset(radius, start))
        vertices.append(center + orbit_offset(radius, end))

    return DashedOrbitMesh(vertices=np.array(vertices, dtype=np.float32))


def generate_flat_circle(cx: float, cy: float, radius: float, segments: int = 100) -> np.ndarray:
    """Triangle-fan outline in the z=0 plane; the last point repeats angle 0."""
    if segments <= 0:
        raise ValueError(f"segments must be positive, got {segments}.")
    points = []
    for i in range(segments + 1):
        angle = (i / segments) * 2.0 * math.pi
        points.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle), 0.0))
    return np.array(points, dtype=np.float32)
