"""Seeded 2D Perlin noise.

Classic permutation-table gradient noise with a quintic fade curve. The
permutation table is shuffled once from the seed and never modified, so a
generator can be shared freely.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

PERMUTATION_SIZE = 256


class PerlinNoise:
    """Deterministic 2D Perlin noise generator.

    Args:
        seed: Seed for the permutation shuffle. Two generators built from the
            same seed produce bit-identical output.
    """

    def __init__(self, seed: int = 1):
        self.seed = seed
        rng = np.random.default_rng(seed)
        table = np.arange(PERMUTATION_SIZE, dtype=np.int64)

        # Fisher-Yates shuffle driven by the seeded generator
        for i in range(PERMUTATION_SIZE - 1, 0, -1):
            j = int(rng.integers(0, i + 1))
            table[i], table[j] = table[j], table[i]

        # Doubled so corner lookups never need to wrap
        self._perm = np.concatenate([table, table])
        self._perm.setflags(write=False)

    @property
    def permutation(self) -> NDArray[np.int64]:
        """Read-only 512-entry permutation table."""
        return self._perm

    def noise(self, x: float, y: float) -> float:
        """Noise value in [-1, 1] at a single point."""
        return float(self.noise_array(np.array([x]), np.array([y]))[0])

    def noise_array(self, xs: ArrayLike, ys: ArrayLike) -> NDArray[np.float64]:
        """Noise values in [-1, 1] for arrays of points.

        Args:
            xs: X coordinates.
            ys: Y coordinates, broadcastable against ``xs``.

        Returns:
            Array of noise values with the broadcast shape of the inputs.
        """
        x = np.asarray(xs, dtype=np.float64)
        y = np.asarray(ys, dtype=np.float64)
        x, y = np.broadcast_arrays(x, y)

        x_floor = np.floor(x)
        y_floor = np.floor(y)
        xi = x_floor.astype(np.int64) & 255
        yi = y_floor.astype(np.int64) & 255
        xf = x - x_floor
        yf = y - y_floor

        u = _fade(xf)
        v = _fade(yf)

        p = self._perm
        a = p[xi] + yi
        b = p[xi + 1] + yi

        x1 = _lerp(u, _grad(p[a], xf, yf), _grad(p[b], xf - 1, yf))
        x2 = _lerp(u, _grad(p[a + 1], xf, yf - 1), _grad(p[b + 1], xf - 1, yf - 1))
        return np.clip(_lerp(v, x1, x2), -1.0, 1.0)

    def fbm(
        self,
        xs: ArrayLike,
        ys: ArrayLike,
        octaves: int = 5,
        lacunarity: float = 2.0,
        gain: float = 0.5,
    ) -> NDArray[np.float64]:
        """Fractal Brownian motion: a sum of noise octaves.

        Each octave multiplies frequency by ``lacunarity`` and amplitude by
        ``gain``. The sum is divided by the total amplitude so the result
        stays in [-1, 1].

        Args:
            xs: X coordinates.
            ys: Y coordinates.
            octaves: Number of noise layers to sum.
            lacunarity: Frequency multiplier between octaves.
            gain: Amplitude multiplier between octaves.

        Returns:
            Array of summed noise values in [-1, 1].
        """
        x = np.asarray(xs, dtype=np.float64)
        y = np.asarray(ys, dtype=np.float64)
        result = np.zeros(np.broadcast_shapes(x.shape, y.shape), dtype=np.float64)

        frequency = 1.0
        amplitude = 1.0
        max_amplitude = 0.0

        for _ in range(octaves):
            result += amplitude * self.noise_array(x * frequency, y * frequency)
            max_amplitude += amplitude
            frequency *= lacunarity
            amplitude *= gain

        if max_amplitude > 0:
            result /= max_amplitude
        return result


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Quintic fade curve 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(t: NDArray[np.float64], a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64]:
    return a + t * (b - a)


def _grad(hash_values: NDArray[np.int64], x: NDArray[np.float64], y: NDArray[np.float64]) -> NDArray[np.float64]:
    """Dot product of (x, y) with the gradient selected by the hash."""
    h = hash_values & 15
    u = np.where(h < 8, x, y)
    v = np.where(h < 4, y, np.where((h == 12) | (h == 14), x, 0.0))
    return np.where((h & 1) == 0, u, -u) + np.where((h & 2) == 0, v, -v)
