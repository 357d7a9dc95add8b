"""Highland formation shaping: linear slope, central circle, triangular wedge."""

import math
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..topology import SQRT3
from ..types import HighlandFormation, coord_key
from .config import GenerationOptions


@dataclass(frozen=True)
class RealmExtent:
    """Center and radius of a realm in unit pointy pixel space."""

    center_x: float
    center_y: float
    radius: float

    @classmethod
    def from_coords(cls, qs: ArrayLike, rs: ArrayLike) -> "RealmExtent":
        """Measure the extent of a set of axial coordinates.

        The radius is the largest distance from the centroid, never below 1
        so single-hex realms still normalize cleanly.
        """
        x, y = project(qs, rs)
        if x.size == 0:
            return cls(0.0, 0.0, 1.0)
        cx = float(x.mean())
        cy = float(y.mean())
        radius = float(np.sqrt((x - cx) ** 2 + (y - cy) ** 2).max())
        return cls(cx, cy, max(radius, 1.0))


def project(qs: ArrayLike, rs: ArrayLike) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Unit-size pointy projection of axial coordinates."""
    q = np.asarray(qs, dtype=np.float64)
    r = np.asarray(rs, dtype=np.float64)
    return SQRT3 * (q + r / 2.0), 1.5 * r


def _direction(degrees: float) -> tuple[float, float]:
    """Unit vector for a compass angle: 0 is north, 90 is east."""
    angle = math.radians(degrees)
    return math.sin(angle), -math.cos(angle)


def formation_field(
    qs: ArrayLike,
    rs: ArrayLike,
    extent: RealmExtent,
    options: GenerationOptions,
) -> NDArray[np.float64] | None:
    """Compute highland bias for arrays of hexes.

    Args:
        qs: Axial q coordinates.
        rs: Axial r coordinates.
        extent: Realm extent used to normalize positions.
        options: Generation options (formation, strength, rotation, inverse).

    Returns:
        Bias values in [0, 1], or None for the random formation.
    """
    formation = options.highland_formation
    if formation == HighlandFormation.RANDOM:
        return None

    x, y = project(qs, rs)
    px = x - extent.center_x
    py = y - extent.center_y
    rotation = options.effective_rotation

    if formation == HighlandFormation.LINEAR:
        dx, dy = _direction(rotation)
        along = (px * dx + py * dy) / extent.radius
        raw = (np.clip(along, -1.0, 1.0) + 1.0) / 2.0
    elif formation == HighlandFormation.CIRCLE:
        dist = np.sqrt(px**2 + py**2) / extent.radius
        raw = 1.0 - np.clip(dist, 0.0, 1.0)
    else:
        raw = _triangle_bias(px, py, rotation, extent.radius)

    if options.inverse:
        raw = 1.0 - raw

    return np.clip(raw * options.strength, 0.0, 1.0)


def _triangle_bias(
    px: NDArray[np.float64],
    py: NDArray[np.float64],
    rotation: float,
    radius: float,
) -> NDArray[np.float64]:
    """Bias from the distance to the nearest of three rays 120 degrees apart."""
    nearest = np.full(px.shape, np.inf)
    for k in range(3):
        dx, dy = _direction(rotation + 120.0 * k)
        t = px * dx + py * dy
        perpendicular = np.abs(px * dy - py * dx)
        # Points behind the ray origin measure to the origin itself
        dist = np.where(t >= 0, perpendicular, np.sqrt(px**2 + py**2))
        nearest = np.minimum(nearest, dist)
    return 1.0 - np.clip(nearest / radius, 0.0, 1.0)


def formation_bias(
    coord: Any,
    extent: RealmExtent,
    options: GenerationOptions,
) -> float | None:
    """Highland bias for a single hex, or None for the random formation."""
    q, r = coord_key(coord)
    field = formation_field(np.array([q]), np.array([r]), extent, options)
    if field is None:
        return None
    return float(field[0])
