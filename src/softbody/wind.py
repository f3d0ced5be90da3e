"""
Smooth, seeded wind source.

Wind strength varies slowly over time following 1D value noise: random
lattice values in [0, 1] at integer coordinates, blended with a cosine
ease between neighbours. The same seed always yields the same gusts.
"""

import math
import numpy as np

# Lattice size; noise repeats after this many units of noise time
LATTICE_SIZE = 256


class ValueNoise1D:
    """Seeded 1D value noise returning values in [0, 1]."""

    def __init__(self, seed: int = 0, size: int = LATTICE_SIZE):
        if size < 2:
            raise ValueError("noise lattice needs at least 2 values")
        rng = np.random.default_rng(seed)
        self.size = size
        self._lattice = rng.random(size)

    def __call__(self, t: float) -> float:
        i0 = math.floor(t)
        frac = t - i0
        v0 = self._lattice[i0 % self.size]
        v1 = self._lattice[(i0 + 1) % self.size]
        # cosine ease gives zero slope at lattice points
        w = 0.5 * (1.0 - math.cos(math.pi * frac))
        return float(v0 + (v1 - v0) * w)


class WindField:
    """
    Time-varying horizontal (or any fixed direction) wind force.

    sample(t) = unit(direction) * strength * noise(t * frequency)

    Attributes:
        direction: Wind direction, normalised on construction.
        strength: Peak force magnitude.
        frequency: Noise time per unit of t (frames, in the default scene).
    """

    def __init__(self, direction=(1.0, 0.0), strength: float = 0.1,
                 frequency: float = 0.01, seed: int = 0):
        d = np.asarray(direction, dtype=np.float64)
        norm = np.linalg.norm(d)
        if d.shape != (2,) or norm < 1e-12:
            raise ValueError(f"wind direction must be a non-zero 2-vector, got {direction}")
        if strength < 0:
            raise ValueError("wind strength must be non-negative")
        self.direction = d / norm
        self.strength = float(strength)
        self.frequency = float(frequency)
        self._noise = ValueNoise1D(seed)

    def sample(self, t: float) -> np.ndarray:
        """Wind force at time t."""
        return self.direction * (self.strength * self._noise(t * self.frequency))
