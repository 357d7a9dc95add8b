"""Axial hex grid geometry and topology.

Pure functions shared by realm generation and editing. Edge ``i`` of a hex
faces the neighbor at ``AXIAL_DIRECTIONS[i]``; the same wall seen from that
neighbor is edge ``opposite_edge(i)``.

Pixel space follows screen conventions: +x is east, +y is south.
"""

import math
from typing import Any

from .types import EDGE_COUNT, AxialCoord, Orientation, Point, coord_key

SQRT3 = math.sqrt(3.0)

# Axial direction deltas in edge order
# 0: NE, 1: E, 2: SE, 3: SW, 4: W, 5: NW (pointy orientation)
AXIAL_DIRECTIONS: tuple[tuple[int, int], ...] = (
    (1, -1),
    (1, 0),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (0, -1),
)


def opposite_edge(edge: int) -> int:
    """Edge index of the same wall as seen from the neighbor across it."""
    return (edge + 3) % EDGE_COUNT


def neighbor(coord: Any, edge: int) -> AxialCoord:
    """Coordinate of the neighbor across the given edge."""
    q, r = coord_key(coord)
    dq, dr = AXIAL_DIRECTIONS[edge]
    return AxialCoord(q=q + dq, r=r + dr)


def neighbors(coord: Any) -> list[AxialCoord]:
    """All six neighbor coordinates, indexed by edge."""
    return [neighbor(coord, edge) for edge in range(EDGE_COUNT)]


def axial_distance(a: Any, b: Any) -> int:
    """Number of hex steps between two coordinates."""
    aq, ar = coord_key(a)
    bq, br = coord_key(b)
    dq = aq - bq
    dr = ar - br
    return (abs(dq) + abs(dr) + abs(dq + dr)) // 2


def edge_between(a: Any, b: Any) -> int | None:
    """Edge of ``a`` that faces ``b``, or None if they are not adjacent."""
    aq, ar = coord_key(a)
    bq, br = coord_key(b)
    try:
        return AXIAL_DIRECTIONS.index((bq - aq, br - ar))
    except ValueError:
        return None


def axial_to_pixel(coord: Any, orientation: Orientation, size: Point) -> Point:
    """Project an axial coordinate to the pixel position of the hex center."""
    q, r = coord_key(coord)
    if orientation == Orientation.POINTY:
        x = size.x * (SQRT3 * q + SQRT3 / 2 * r)
        y = size.y * (1.5 * r)
    else:
        x = size.x * (1.5 * q)
        y = size.y * (SQRT3 / 2 * q + SQRT3 * r)
    return Point(x=x, y=y)


def pixel_to_axial(point: Point, orientation: Orientation, size: Point) -> AxialCoord:
    """Find the hex containing a pixel position.

    Inverts ``axial_to_pixel`` to fractional axial coordinates and rounds
    them to the nearest hex.
    """
    px = point.x / size.x
    py = point.y / size.y
    if orientation == Orientation.POINTY:
        fq = SQRT3 / 3 * px - py / 3
        fr = 2.0 / 3.0 * py
    else:
        fq = 2.0 / 3.0 * px
        fr = -px / 3 + SQRT3 / 3 * py
    return _cube_round(fq, fr)


def _cube_round(fq: float, fr: float) -> AxialCoord:
    fs = -fq - fr
    q, r, s = round(fq), round(fr), round(fs)
    dq, dr, ds = abs(q - fq), abs(r - fr), abs(s - fs)
    # Reset the component with the largest rounding error
    if dq > dr and dq > ds:
        q = -r - s
    elif dr > ds:
        r = -q - s
    return AxialCoord(q=q, r=r)


def hex_corners(orientation: Orientation, size: Point, scale: float = 1.0) -> list[Point]:
    """Corner points of a hex relative to its center.

    Corner ``i`` sits at ``60 * i`` degrees, shifted by -30 degrees for
    pointy orientation. ``scale`` grows or shrinks the polygon about the
    center.
    """
    offset = 30.0 if orientation == Orientation.POINTY else 0.0
    corners = []
    for i in range(EDGE_COUNT):
        angle = math.radians(60.0 * i - offset)
        corners.append(
            Point(
                x=size.x * math.cos(angle) * scale,
                y=size.y * math.sin(angle) * scale,
            )
        )
    return corners


def edge_segment(corners: list[Point], edge: int) -> tuple[Point, Point]:
    """Endpoints of an edge.

    Edge ``i`` runs from corner ``i - 1`` to corner ``i`` so that it faces
    ``AXIAL_DIRECTIONS[i]`` in both orientations.
    """
    return corners[(edge + EDGE_COUNT - 1) % EDGE_COUNT], corners[edge]


def closest_edge(point: Point, corners: list[Point]) -> int:
    """Index of the edge nearest to a point relative to the hex center.

    Uses clamped point-to-segment distance; the first edge in index order
    wins ties.
    """
    best_edge = -1
    best_distance = math.inf
    for edge in range(EDGE_COUNT):
        p1, p2 = edge_segment(corners, edge)
        dx = p2.x - p1.x
        dy = p2.y - p1.y
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            t = 0.0
        else:
            t = ((point.x - p1.x) * dx + (point.y - p1.y) * dy) / length_sq
            t = min(1.0, max(0.0, t))
        cx = p1.x + t * dx
        cy = p1.y + t * dy
        distance = math.hypot(point.x - cx, point.y - cy)
        if distance < best_distance:
            best_distance = distance
            best_edge = edge
    return best_edge


def barrier_path(edge: int, corners: list[Point]) -> str:
    """SVG path data for a barrier drawn along an edge."""
    start, end = edge_segment(corners, edge)
    return f"M {start.x} {start.y} L {end.x} {end.y}"
