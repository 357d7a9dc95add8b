"""Placement of holdings, seat of power, landmarks, myths and barriers."""

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from ..terrain_types import BARRIER_CHANCE, HOLDING_TYPES
from ..topology import AXIAL_DIRECTIONS, axial_distance, opposite_edge
from ..types import AxialCoord, Hex, Myth

logger = logging.getLogger(__name__)

# Rejection sampling budget for myths, per requested myth
MYTH_ATTEMPTS_PER_MYTH = 50


@dataclass
class PlacementResult:
    """Outcome of one placement stage."""

    requested: int
    placed: int
    warnings: list[str] = field(default_factory=list)

    @property
    def shortfall(self) -> int:
        return max(0, self.requested - self.placed)


def add_barriers(
    hexes: Sequence[Hex],
    rng: np.random.Generator,
    chance: float = BARRIER_CHANCE,
) -> int:
    """Randomly wall off adjacent hex pairs.

    Every unordered pair of adjacent hexes is considered exactly once, in
    sorted coordinate order, and barred on both facing edges with
    probability ``chance``.

    Args:
        hexes: Realm hexes, mutated in place.
        rng: Random number generator.
        chance: Probability of a barrier per adjacent pair.

    Returns:
        Number of barriers added.
    """
    index = {h.key: h for h in hexes}
    pairs: list[tuple[Hex, int, Hex]] = []
    for key in sorted(index):
        hex_ = index[key]
        for edge in range(3):
            dq, dr = AXIAL_DIRECTIONS[edge]
            other = index.get((hex_.q + dq, hex_.r + dr))
            if other is not None:
                pairs.append((hex_, edge, other))

    rolls = rng.random(len(pairs))
    added = 0
    for (hex_, edge, other), roll in zip(pairs, rolls):
        if roll < chance:
            hex_.barrier_edges.add(edge)
            other.barrier_edges.add(opposite_edge(edge))
            added += 1
    return added


def place_holdings(
    hexes: Sequence[Hex],
    count: int,
    rng: np.random.Generator,
    excluded_terrains: Sequence[str] = (),
    min_distance: int = 0,
    holding_types: Sequence[str] = HOLDING_TYPES,
) -> tuple[list[Hex], PlacementResult]:
    """Place holdings on unoccupied hexes.

    Candidates are drawn uniformly without replacement. A candidate is
    skipped when it sits on an excluded terrain or closer than
    ``min_distance`` to an already placed holding.

    Args:
        hexes: Realm hexes, mutated in place.
        count: Number of holdings requested.
        rng: Random number generator.
        excluded_terrains: Terrains that never receive a holding.
        min_distance: Minimum hex distance between holdings.
        holding_types: Holding ids to choose from uniformly.

    Returns:
        Tuple of (placed holding hexes in placement order, PlacementResult).
    """
    result = PlacementResult(requested=count, placed=0)
    excluded = set(excluded_terrains)
    candidates = [
        h for h in hexes if not h.is_occupied and h.terrain not in excluded
    ]
    placed: list[Hex] = []

    if count > 0 and candidates:
        for i in rng.permutation(len(candidates)):
            if len(placed) >= count:
                break
            hex_ = candidates[i]
            if any(axial_distance(hex_, other) < min_distance for other in placed):
                continue
            hex_.holding = holding_types[int(rng.integers(len(holding_types)))]
            hex_.landmark = None
            placed.append(hex_)

    result.placed = len(placed)
    if result.shortfall:
        result.warnings.append(
            f"Placed {result.placed} of {count} requested holdings"
        )
    return placed, result


def choose_seat_of_power(holdings: Sequence[Hex]) -> AxialCoord | None:
    """Designate the first placed holding as the seat of power."""
    if not holdings:
        return None
    return holdings[0].coord


def place_landmarks(
    hexes: Sequence[Hex],
    counts: dict[str, int],
    rng: np.random.Generator,
) -> PlacementResult:
    """Place the requested number of each landmark type on unoccupied hexes.

    Landmark types are visited in a seeded shuffle so no type is always
    placed first when hexes run out.

    Args:
        hexes: Realm hexes, mutated in place.
        counts: Requested count per landmark type.
        rng: Random number generator.

    Returns:
        PlacementResult across all landmark types.
    """
    requested = sum(max(0, c) for c in counts.values())
    result = PlacementResult(requested=requested, placed=0)

    available = [h for h in hexes if not h.is_occupied]
    order = rng.permutation(len(available)) if available else np.array([], dtype=np.int64)
    pool = [available[i] for i in order]

    types = sorted(counts)
    for i in rng.permutation(len(types)):
        landmark = types[i]
        wanted = max(0, counts[landmark])
        taken = 0
        while taken < wanted and pool:
            hex_ = pool.pop()
            hex_.landmark = landmark
            taken += 1
        result.placed += taken
        if taken < wanted:
            result.warnings.append(
                f"Placed {taken} of {wanted} requested '{landmark}' landmarks"
            )
    return result


def place_myths(
    hexes: Sequence[Hex],
    count: int,
    min_distance: int,
    rng: np.random.Generator,
    max_attempts: int | None = None,
) -> tuple[list[Myth], PlacementResult]:
    """Place myths by rejection sampling.

    Repeatedly draws a random unoccupied hex and accepts it only if it is at
    least ``min_distance`` from every myth placed so far. Gives up after a
    fixed number of draws; a shortfall is reported as a warning.

    Args:
        hexes: Realm hexes, mutated in place.
        count: Number of myths requested.
        min_distance: Minimum hex distance between myths.
        rng: Random number generator.
        max_attempts: Draw budget, defaults to MYTH_ATTEMPTS_PER_MYTH per myth.

    Returns:
        Tuple of (Myth records with ids from 1, PlacementResult).
    """
    result = PlacementResult(requested=count, placed=0)
    if max_attempts is None:
        max_attempts = MYTH_ATTEMPTS_PER_MYTH * count

    candidates = [h for h in hexes if not h.is_occupied]
    myths: list[Myth] = []
    placed: list[Hex] = []
    attempts = 0

    while len(myths) < count and attempts < max_attempts and candidates:
        attempts += 1
        i = int(rng.integers(len(candidates)))
        hex_ = candidates[i]
        if any(axial_distance(hex_, other) < min_distance for other in placed):
            continue
        candidates.pop(i)
        myth_id = len(myths) + 1
        hex_.myth = myth_id
        placed.append(hex_)
        myths.append(Myth(id=myth_id, name=f"Myth #{myth_id}", q=hex_.q, r=hex_.r))

    result.placed = len(myths)
    if result.shortfall:
        result.warnings.append(
            f"Placed {result.placed} of {count} requested myths after {attempts} attempts; "
            "try reducing the myth minimum distance or the number of myths"
        )
    logger.debug(f"Myth placement used {attempts} of {max_attempts} attempts")
    return myths, result
