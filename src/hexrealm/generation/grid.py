"""Grid construction for hex-radius and rectangular realms."""

import math

from ..topology import axial_distance
from ..types import Hex
from .config import HexShape, ShapeDescriptor, SquareShape

DEFAULT_TERRAIN = "plain"


def create_hexagonal_grid(radius: int, terrain: str = DEFAULT_TERRAIN) -> list[Hex]:
    """Build every hex within ``radius`` steps of the origin.

    Args:
        radius: Number of rings around the center hex.
        terrain: Initial terrain for every hex.

    Returns:
        Hexes ordered by q, then r. ``radius=0`` yields the single origin hex.
    """
    hexes = []
    for q in range(-radius, radius + 1):
        for r in range(max(-radius, -q - radius), min(radius, -q + radius) + 1):
            if axial_distance((0, 0), (q, r)) <= radius:
                hexes.append(Hex(q=q, r=r, s=-q - r, terrain=terrain))
    return hexes


def create_square_grid(width: int, height: int, terrain: str = DEFAULT_TERRAIN) -> list[Hex]:
    """Build a rectangular block of pointy hexes centered near the origin.

    Rows use an even-r offset layout converted to axial coordinates, so the
    usual axial neighbor rules apply. The whole block is then shifted so its
    centroid sits as close to (0, 0) as possible.

    Args:
        width: Hexes per row.
        height: Number of rows.
        terrain: Initial terrain for every hex.

    Returns:
        Hexes ordered row by row.
    """
    raw: list[tuple[int, int]] = []
    for row in range(height):
        for col in range(width):
            raw.append((col - row // 2, row))

    if not raw:
        return []

    q_shift = _round_half_up(sum(q for q, _ in raw) / len(raw))
    r_shift = _round_half_up(sum(r for _, r in raw) / len(raw))

    return [
        Hex(q=q - q_shift, r=r - r_shift, s=-(q - q_shift) - (r - r_shift), terrain=terrain)
        for q, r in raw
    ]


def create_grid(shape: ShapeDescriptor, terrain: str = DEFAULT_TERRAIN) -> list[Hex]:
    """Build the grid described by a shape descriptor."""
    if isinstance(shape, HexShape):
        return create_hexagonal_grid(shape.radius, terrain)
    if isinstance(shape, SquareShape):
        return create_square_grid(shape.width, shape.height, terrain)
    raise TypeError(f"Unsupported shape descriptor: {type(shape).__name__}")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
