"""Tests for terrain classification."""

from collections import Counter

import numpy as np
import pytest

from hexrealm.generation.classification import (
    active_terrains,
    assign_height_bands,
    build_adjacency,
    classify_terrain,
    compute_elevation,
    noise_sample_points,
    relax_terrain,
)
from hexrealm.generation.config import GenerationOptions
from hexrealm.generation.grid import create_hexagonal_grid
from hexrealm.topology import neighbors
from hexrealm.types import Hex, HighlandFormation


def _coords(radius: int) -> tuple[np.ndarray, np.ndarray]:
    hexes = create_hexagonal_grid(radius)
    return (
        np.array([h.q for h in hexes], dtype=np.int64),
        np.array([h.r for h in hexes], dtype=np.int64),
    )


def _same_terrain_share(hexes: list[Hex], terrain: dict) -> float:
    """Fraction of adjacent hex pairs that share a terrain."""
    same = total = 0
    for h in hexes:
        for coord in neighbors(h):
            other = terrain.get(coord.key)
            if other is not None:
                total += 1
                same += other == terrain[h.key]
    return same / total


class TestElevation:
    """Tests for elevation blending."""

    def test_range(self) -> None:
        """Elevation lies within [0, 1]."""
        qs, rs = _coords(8)
        elevation = compute_elevation(qs, rs, GenerationOptions(), seed=3)
        assert elevation.min() >= 0.0
        assert elevation.max() <= 1.0

    def test_deterministic(self) -> None:
        """Same seed, same elevation."""
        qs, rs = _coords(5)
        options = GenerationOptions()
        np.testing.assert_array_equal(
            compute_elevation(qs, rs, options, seed=9),
            compute_elevation(qs, rs, options, seed=9),
        )

    def test_smooth_formation_dominates(self) -> None:
        """At zero roughness a circle formation puts the center above the rim."""
        qs, rs = _coords(8)
        options = GenerationOptions(
            highland_formation=HighlandFormation.CIRCLE,
            strength=1.0,
            terrain_roughness=0.0,
        )
        elevation = compute_elevation(qs, rs, options, seed=1)
        center = elevation[(qs == 0) & (rs == 0)][0]
        rim = elevation[np.maximum.reduce([np.abs(qs), np.abs(rs), np.abs(qs + rs)]) == 8]
        assert center > rim.max()

    def test_sample_points_off_lattice(self) -> None:
        """No hex is sampled on an integer noise lattice point."""
        qs, rs = _coords(6)
        xs, ys = noise_sample_points(qs, rs, seed=4)
        on_lattice = (xs == np.floor(xs)) & (ys == np.floor(ys))
        assert not on_lattice.any()

    def test_full_roughness_is_noisy(self) -> None:
        """At roughness 1 elevation varies per hex and follows the seed."""
        qs, rs = _coords(6)
        options = GenerationOptions(terrain_roughness=1.0)
        first = compute_elevation(qs, rs, options, seed=7)
        second = compute_elevation(qs, rs, options, seed=8)
        assert np.unique(first).size > qs.size // 2
        assert not np.allclose(first, second)


class TestHeightBands:
    """Tests for elevation banding."""

    def test_proportional_partition(self) -> None:
        """Bands follow the weights and the highest elevations go first."""
        elevation = np.linspace(1.0, 0.0, 10)
        qs = np.arange(10)
        rs = np.zeros(10, dtype=np.int64)
        result = assign_height_bands(
            elevation, qs, rs, ["peaks", "plain"], np.array([3.0, 2.0])
        )
        assert result == ["peaks"] * 6 + ["plain"] * 4

    def test_no_gaps(self) -> None:
        """Every hex receives a terrain."""
        qs, rs = _coords(4)
        elevation = np.random.default_rng(0).random(qs.size)
        result = assign_height_bands(
            elevation, qs, rs, ["a", "b", "c"], np.array([1.0, 1.0, 1.0])
        )
        assert "" not in result
        assert Counter(result) == {"a": 20, "b": 21, "c": 20}

    def test_ties_broken_by_coordinate(self) -> None:
        """Equal elevations rank by q, then r."""
        elevation = np.zeros(4)
        qs = np.array([1, 0, 0, -1])
        rs = np.array([0, 1, 0, 1])
        result = assign_height_bands(elevation, qs, rs, ["high", "low"], np.array([1.0, 1.0]))
        assert result == ["low", "low", "high", "high"]

    def test_zero_bias_terrains_skipped(self) -> None:
        """Terrains without bias take no part in banding."""
        options = GenerationOptions(terrain_biases={**GenerationOptions().terrain_biases, "peaks": 0})
        terrains, weights = active_terrains(options)
        assert "peaks" not in terrains
        assert len(terrains) == len(weights) == 11

    def test_all_zero_biases_weighted_equally(self) -> None:
        """If every bias is zero all terrains share the realm equally."""
        options = GenerationOptions(
            terrain_biases={t: 0 for t in GenerationOptions().terrain_biases}
        )
        terrains, weights = active_terrains(options)
        assert len(terrains) == 12
        np.testing.assert_array_equal(weights, 1.0)


class TestRelaxation:
    """Tests for clustering relaxation."""

    def test_adjacency(self) -> None:
        """Adjacency is symmetric and the center hex has six neighbors."""
        qs, rs = _coords(2)
        adjacency = build_adjacency(qs, rs)
        assert (adjacency != adjacency.T).nnz == 0
        center = int(np.flatnonzero((qs == 0) & (rs == 0))[0])
        assert adjacency[center].sum() == 6

    def test_full_roughness_keeps_bands(self) -> None:
        """Roughness 1 disables relaxation."""
        qs, rs = _coords(2)
        initial = np.arange(qs.size) % 2
        relaxed = relax_terrain(initial, build_adjacency(qs, rs), np.eye(2), roughness=1.0)
        np.testing.assert_array_equal(relaxed, initial)

    def test_isolated_hex_flips_to_neighbors(self) -> None:
        """A lone hex surrounded by a clustering terrain is absorbed."""
        qs, rs = _coords(1)
        initial = np.zeros(qs.size, dtype=np.int64)
        center = int(np.flatnonzero((qs == 0) & (rs == 0))[0])
        initial[center] = 1
        affinity = np.array([[1.0, 0.0], [0.0, 1.0]])
        relaxed = relax_terrain(initial, build_adjacency(qs, rs), affinity, roughness=0.0)
        assert relaxed[center] == 0


class TestClassifyTerrain:
    """Tests for the full classifier."""

    def test_every_hex_classified(self, quiet_options: GenerationOptions) -> None:
        """Each hex gets a terrain with a positive bias."""
        hexes = create_hexagonal_grid(6)
        result = classify_terrain(hexes, quiet_options, seed=5)
        assert set(result) == {h.key for h in hexes}
        assert set(result.values()) <= set(quiet_options.terrain_biases)

    def test_deterministic(self, quiet_options: GenerationOptions) -> None:
        """Same inputs, same terrain."""
        hexes = create_hexagonal_grid(5)
        assert classify_terrain(hexes, quiet_options, 4) == classify_terrain(hexes, quiet_options, 4)

    def test_zero_bias_never_appears(self) -> None:
        """A terrain with zero bias is never assigned."""
        biases = dict(GenerationOptions().terrain_biases)
        biases["forest"] = 0
        options = GenerationOptions(terrain_biases=biases)
        result = classify_terrain(create_hexagonal_grid(6), options, seed=2)
        assert "forest" not in result.values()

    def test_empty(self, quiet_options: GenerationOptions) -> None:
        """No hexes, no terrain."""
        assert classify_terrain([], quiet_options, seed=1) == {}

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_bias_monotonic(self, seed: int) -> None:
        """Raising one terrain's bias raises its hex count."""
        hexes = create_hexagonal_grid(8)
        base = GenerationOptions(terrain_roughness=1.0)
        biases = dict(base.terrain_biases)
        biases["forest"] = 45
        raised = base.model_copy(update={"terrain_biases": biases})

        before = Counter(classify_terrain(hexes, base, seed).values())["forest"]
        after = Counter(classify_terrain(hexes, raised, seed).values())["forest"]
        assert after > before

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_roughness_breaks_up_regions(self, seed: int) -> None:
        """Smooth realms keep more neighbors on the same terrain than rough ones."""
        hexes = create_hexagonal_grid(8)
        smooth = _same_terrain_share(
            hexes, classify_terrain(hexes, GenerationOptions(terrain_roughness=0.0), seed)
        )
        rough = _same_terrain_share(
            hexes, classify_terrain(hexes, GenerationOptions(terrain_roughness=1.0), seed)
        )
        assert smooth > rough

    def test_full_roughness_depends_on_seed(self) -> None:
        """Different seeds give different rough realms."""
        hexes = create_hexagonal_grid(6)
        options = GenerationOptions(terrain_roughness=1.0)
        assert classify_terrain(hexes, options, 1) != classify_terrain(hexes, options, 999)
