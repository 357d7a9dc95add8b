"""Tests for Perlin noise generation."""

import numpy as np
import pytest

from hexrealm.generation.noise import PerlinNoise


class TestPerlinNoise:
    """Tests for single-octave noise."""

    def test_reproducible_across_instances(self) -> None:
        """Two generators with the same seed agree bit for bit."""
        a = PerlinNoise(seed=42)
        b = PerlinNoise(seed=42)
        for x, y in [(0.3, 0.7), (12.25, -3.5), (-100.1, 55.9)]:
            assert a.noise(x, y) == b.noise(x, y)

    def test_different_seeds_differ(self) -> None:
        """Different seeds shuffle the permutation differently."""
        xs = np.linspace(0.1, 20.3, 50)
        ys = np.linspace(-4.7, 9.9, 50)
        assert not np.allclose(
            PerlinNoise(seed=1).noise_array(xs, ys),
            PerlinNoise(seed=2).noise_array(xs, ys),
        )

    def test_permutation_table(self) -> None:
        """The table is a doubled permutation of 0..255."""
        perm = PerlinNoise(seed=7).permutation
        assert perm.shape == (512,)
        assert sorted(perm[:256].tolist()) == list(range(256))
        np.testing.assert_array_equal(perm[:256], perm[256:])

    def test_permutation_read_only(self) -> None:
        """The table cannot be modified after construction."""
        perm = PerlinNoise(seed=7).permutation
        with pytest.raises(ValueError):
            perm[0] = 1

    def test_zero_at_lattice_points(self) -> None:
        """Gradient noise vanishes at integer coordinates."""
        noise = PerlinNoise(seed=3)
        for x, y in [(0, 0), (4, 9), (-2, 5)]:
            assert noise.noise(x, y) == pytest.approx(0.0)

    def test_range(self) -> None:
        """Values stay within [-1, 1]."""
        rng = np.random.default_rng(0)
        xs = rng.uniform(-50, 50, 2000)
        ys = rng.uniform(-50, 50, 2000)
        values = PerlinNoise(seed=5).noise_array(xs, ys)
        assert values.min() >= -1.0
        assert values.max() <= 1.0

    def test_scalar_matches_array(self) -> None:
        """noise() agrees with noise_array() element-wise."""
        noise = PerlinNoise(seed=9)
        xs = np.array([0.5, 1.75, -3.2])
        ys = np.array([2.25, -0.4, 8.8])
        values = noise.noise_array(xs, ys)
        for i in range(3):
            assert noise.noise(xs[i], ys[i]) == values[i]

    def test_continuity(self) -> None:
        """Nearby points have nearby values."""
        noise = PerlinNoise(seed=11)
        assert abs(noise.noise(3.5, 2.5) - noise.noise(3.501, 2.5)) < 0.01


class TestFbm:
    """Tests for fractal octave sums."""

    def test_deterministic(self) -> None:
        """Same seed produces identical output."""
        xs = np.linspace(0, 10, 40)
        ys = np.linspace(0, 5, 40)
        np.testing.assert_array_equal(
            PerlinNoise(seed=4).fbm(xs, ys),
            PerlinNoise(seed=4).fbm(xs, ys),
        )

    def test_range(self) -> None:
        """Normalized octave sum stays within [-1, 1]."""
        rng = np.random.default_rng(1)
        xs = rng.uniform(-20, 20, 1000)
        ys = rng.uniform(-20, 20, 1000)
        values = PerlinNoise(seed=8).fbm(xs, ys, octaves=6)
        assert values.min() >= -1.0
        assert values.max() <= 1.0

    def test_single_octave_is_noise(self) -> None:
        """One octave is plain noise."""
        noise = PerlinNoise(seed=6)
        xs = np.array([0.3, 4.6])
        ys = np.array([1.1, -2.9])
        np.testing.assert_allclose(noise.fbm(xs, ys, octaves=1), noise.noise_array(xs, ys))

    def test_broadcast_shape(self) -> None:
        """Inputs broadcast like numpy arrays."""
        xs = np.linspace(0, 1, 5)[None, :]
        ys = np.linspace(0, 1, 3)[:, None]
        assert PerlinNoise(seed=1).fbm(xs, ys).shape == (3, 5)
