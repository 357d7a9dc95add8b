"""Terrain classification: elevation, height bands and clustering relaxation."""

import logging
from typing import Sequence

import numpy as np
from numpy.typing import NDArray
from scipy import sparse

from ..topology import AXIAL_DIRECTIONS, SQRT3
from ..types import Coordinate, Hex
from .config import GenerationOptions
from .formation import RealmExtent, formation_field
from .noise import PERMUTATION_SIZE, PerlinNoise

logger = logging.getLogger(__name__)

# Noise sampling frequency at zero roughness; roughness scales it up to 10x
BASE_FREQUENCY = 0.1
NOISE_OCTAVES = 5

# Share of elevation driven by the formation at zero roughness
FORMATION_BLEND = 0.8

RELAXATION_PASSES = 4
CLUSTER_STRENGTH = 4.0
INITIAL_TERRAIN_WEIGHT = 1.5


def noise_sample_points(
    qs: NDArray[np.int64],
    rs: NDArray[np.int64],
    seed: int,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Noise sampling position for each hex.

    Hex centres on a unit-spaced plane, shifted by a seed-derived offset.
    The ``sqrt(3) / 2`` row spacing and the offset keep samples off the
    integer lattice, where Perlin noise is always zero.
    """
    offset = np.random.default_rng(seed).uniform(0.0, float(PERMUTATION_SIZE), size=2)
    xs = qs + rs / 2.0 + offset[0]
    ys = rs * (SQRT3 / 2.0) + offset[1]
    return xs, ys


def compute_elevation(
    qs: NDArray[np.int64],
    rs: NDArray[np.int64],
    options: GenerationOptions,
    seed: int,
) -> NDArray[np.float64]:
    """Blend noise and formation bias into an elevation in [0, 1].

    Low roughness samples the noise slowly and lets the formation dominate;
    high roughness samples it quickly and lets the noise dominate.

    Args:
        qs: Axial q coordinates.
        rs: Axial r coordinates.
        options: Generation options.
        seed: Noise seed.

    Returns:
        Elevation per hex.
    """
    roughness = options.terrain_roughness
    frequency = BASE_FREQUENCY * (1.0 + 9.0 * roughness)

    xs, ys = noise_sample_points(qs, rs, seed)
    noise = PerlinNoise(seed)
    raw = noise.fbm(xs * frequency, ys * frequency, octaves=NOISE_OCTAVES)
    elevation = (raw + 1.0) / 2.0

    extent = RealmExtent.from_coords(qs, rs)
    bias = formation_field(qs, rs, extent, options)
    if bias is None:
        return elevation

    blend = FORMATION_BLEND * (1.0 - roughness)
    return (1.0 - blend) * elevation + blend * bias


def active_terrains(options: GenerationOptions) -> tuple[list[str], NDArray[np.float64]]:
    """Terrains that take part in banding, highest first, with their weights.

    Zero-bias terrains are skipped. If every bias is zero, all terrains in
    the height order are weighted equally.
    """
    biases = options.terrain_biases
    ordered = [t for t in options.terrain_height_order if biases.get(t, 0) > 0]
    if ordered:
        return ordered, np.array([biases[t] for t in ordered], dtype=np.float64)

    logger.warning("All terrain biases are zero, weighting terrains equally")
    ordered = list(options.terrain_height_order)
    return ordered, np.ones(len(ordered), dtype=np.float64)


def assign_height_bands(
    elevation: NDArray[np.float64],
    qs: NDArray[np.int64],
    rs: NDArray[np.int64],
    terrains: Sequence[str],
    weights: NDArray[np.float64],
) -> list[str]:
    """Partition hexes into elevation bands sized by terrain weight.

    Hexes are ranked by elevation (highest first, ties by q then r). Each
    terrain in order takes the next slice of the ranking, with slice
    boundaries at the rounded cumulative weight share, so bands never
    overlap or leave gaps.

    Args:
        elevation: Elevation per hex.
        qs: Axial q coordinates.
        rs: Axial r coordinates.
        terrains: Terrain ids, highest elevation first.
        weights: Non-negative weight per terrain, positive sum.

    Returns:
        Terrain id per hex, in input order.
    """
    n = elevation.size
    result = [""] * n
    if n == 0 or not terrains:
        return result

    # lexsort uses the last key as primary
    ranking = np.lexsort((rs, qs, -elevation))

    shares = np.cumsum(weights) / weights.sum()
    boundaries = np.floor(shares * n + 0.5).astype(np.int64)
    boundaries[-1] = n

    start = 0
    for terrain, end in zip(terrains, boundaries):
        for idx in ranking[start:end]:
            result[idx] = terrain
        start = max(start, int(end))
    return result


def build_adjacency(qs: NDArray[np.int64], rs: NDArray[np.int64]) -> sparse.csr_matrix:
    """Symmetric hex adjacency matrix for the given coordinates."""
    n = qs.size
    index = {(int(q), int(r)): i for i, (q, r) in enumerate(zip(qs, rs))}
    rows: list[int] = []
    cols: list[int] = []
    for i, (q, r) in enumerate(zip(qs, rs)):
        # Edges 0..2 visit each unordered pair once
        for dq, dr in AXIAL_DIRECTIONS[:3]:
            j = index.get((int(q) + dq, int(r) + dr))
            if j is not None:
                rows.extend((i, j))
                cols.extend((j, i))
    data = np.ones(len(rows), dtype=np.float64)
    return sparse.coo_matrix((data, (rows, cols)), shape=(n, n)).tocsr()


def relax_terrain(
    initial: NDArray[np.int64],
    adjacency: sparse.csr_matrix,
    affinity: NDArray[np.float64],
    roughness: float,
    passes: int = RELAXATION_PASSES,
) -> NDArray[np.int64]:
    """Pull hexes toward terrains their neighbors have high affinity with.

    Each pass scores every candidate terrain for every hex as the mean
    affinity with its neighbors' current terrains (scaled by
    ``1 - roughness``) plus a bonus for the hex's initial terrain, then
    updates all hexes at once. Stops early once a pass changes nothing.

    Args:
        initial: Initial terrain index per hex.
        adjacency: Hex adjacency matrix.
        affinity: Candidate x candidate affinity matrix.
        roughness: Terrain roughness in [0, 1].
        passes: Maximum number of passes.

    Returns:
        Relaxed terrain index per hex. Ties go to the lowest index.
    """
    pull = CLUSTER_STRENGTH * (1.0 - roughness)
    n = initial.size
    if n == 0 or pull <= 0:
        return initial.copy()

    num_terrains = affinity.shape[0]
    degree = np.asarray(adjacency.sum(axis=1)).ravel()
    safe_degree = np.where(degree > 0, degree, 1.0)
    rows = np.arange(n)

    current = initial.copy()
    for i in range(passes):
        one_hot = np.zeros((n, num_terrains), dtype=np.float64)
        one_hot[rows, current] = 1.0
        neighbor_counts = adjacency @ one_hot
        mean_affinity = (neighbor_counts @ affinity.T) / safe_degree[:, None]

        scores = pull * mean_affinity
        scores[rows, initial] += INITIAL_TERRAIN_WEIGHT

        updated = scores.argmax(axis=1)
        changed = int(np.count_nonzero(updated != current))
        current = updated
        logger.debug(f"Relaxation pass {i + 1}: {changed} hexes changed")
        if changed == 0:
            break

    return current


def classify_terrain(
    hexes: Sequence[Hex],
    options: GenerationOptions,
    seed: int,
) -> dict[Coordinate, str]:
    """Assign a terrain id to every hex.

    A pure function of hex coordinates, options and seed; existing hex
    terrain is ignored.

    Args:
        hexes: Hexes to classify.
        options: Validated generation options.
        seed: Noise seed.

    Returns:
        Mapping of (q, r) to terrain id.
    """
    if not hexes:
        return {}

    qs = np.array([h.q for h in hexes], dtype=np.int64)
    rs = np.array([h.r for h in hexes], dtype=np.int64)

    elevation = compute_elevation(qs, rs, options, seed)
    terrains, weights = active_terrains(options)
    banded = assign_height_bands(elevation, qs, rs, terrains, weights)

    candidates = sorted(terrains)
    position = {t: i for i, t in enumerate(candidates)}
    matrix = options.terrain_clustering_matrix
    affinity = np.array(
        [[matrix.get(a, {}).get(b, 0.0) for b in candidates] for a in candidates],
        dtype=np.float64,
    )

    initial = np.array([position[t] for t in banded], dtype=np.int64)
    relaxed = relax_terrain(
        initial,
        build_adjacency(qs, rs),
        affinity,
        options.terrain_roughness,
    )

    return {
        (int(q), int(r)): candidates[t] for q, r, t in zip(qs, rs, relaxed)
    }
