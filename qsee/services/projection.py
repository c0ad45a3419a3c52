from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from qsee.domain.models import Atom, ViewMode


MIN_EXTENT = 0.001
FALLBACK_SCALE = 80.0
VIEWPORT_PADDING = 10


@dataclass(frozen=True, slots=True)
class Vec3:
    x: float
    y: float
    z: float

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


@dataclass(frozen=True, slots=True)
class ProjectedAtom:
    x: int
    y: int
    depth: float
    element: str


def rotate_x(v: Vec3, angle: float) -> Vec3:
    c, s = math.cos(angle), math.sin(angle)
    return Vec3(v.x, v.y * c - v.z * s, v.y * s + v.z * c)


def rotate_y(v: Vec3, angle: float) -> Vec3:
    c, s = math.cos(angle), math.sin(angle)
    return Vec3(v.x * c + v.z * s, v.y, -v.x * s + v.z * c)


def rotate_z(v: Vec3, angle: float) -> Vec3:
    c, s = math.cos(angle), math.sin(angle)
    return Vec3(v.x * c - v.y * s, v.x * s + v.y * c, v.z)


def apply_camera_view(v: Vec3, mode: ViewMode) -> Vec3:
    """Initial camera orientation before the animation spin around Y."""
    if mode is ViewMode.XY:
        return v
    if mode is ViewMode.XZ:
        return rotate_x(v, -math.pi / 2.0)
    if mode is ViewMode.YZ:
        return rotate_y(v, math.pi / 2.0)
    # Three-quarter view: tilt down ~32 degrees, then turn 45 degrees.
    return rotate_y(rotate_x(v, -math.pi / 5.5), math.pi / 4.0)


def center_atoms(atoms: Sequence[Atom]) -> list[Vec3]:
    if not atoms:
        return []
    count = len(atoms)
    center = Vec3(
        sum(atom.x for atom in atoms) / count,
        sum(atom.y for atom in atoms) / count,
        sum(atom.z for atom in atoms) / count,
    )
    return [Vec3(atom.x, atom.y, atom.z) - center for atom in atoms]


def fit_scale(points: Sequence[Vec3], width: int, height: int, atom_radius: int) -> float:
    """Pixels per unit so the largest distance from the center fits any rotation."""
    max_extent = max((point.magnitude() for point in points), default=0.0)
    viewport_radius = min(width, height) / 2.0 - atom_radius - VIEWPORT_PADDING
    if max_extent > MIN_EXTENT:
        return viewport_radius / max_extent
    return FALLBACK_SCALE


def project_atoms(
    points: Sequence[Vec3],
    elements: Sequence[str],
    *,
    angle: float,
    mode: ViewMode,
    width: int,
    height: int,
    scale: float,
) -> list[ProjectedAtom]:
    """Orthographic projection, sorted back to front for painting."""
    projected: list[ProjectedAtom] = []
    for point, element in zip(points, elements):
        rotated = rotate_y(apply_camera_view(point, mode), angle)
        projected.append(
            ProjectedAtom(
                x=int(width / 2.0 + rotated.x * scale),
                y=int(height / 2.0 - rotated.y * scale),
                depth=rotated.z,
                element=element,
            )
        )
    projected.sort(key=lambda item: item.depth)
    return projected
