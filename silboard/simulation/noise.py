"""
Noise & Bias Engine
===================

Seeded random source for every stochastic error in the simulated sensors.

Each noisy sensor owns one BiasState per axis group. Biases are drawn
uniformly in [-range, range] once, then follow a discrete random walk:
every read adds a N(0, walk_stdev²) increment. The walk is never reset.

The engine is owned by the board instance; pass a fixed seed (or a
replacement generator) for reproducible runs.
"""

from dataclasses import dataclass, field
from typing import Optional, Union
import logging

import numpy as np

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]


class NoiseEngine:
    """
    Gaussian and uniform sample source.

    Args:
        seed: Seed for the generator. None seeds from system entropy.
        rng: Pre-built numpy Generator, takes precedence over seed.
    """

    def __init__(self, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        self.seed = seed
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._draws = 0

    def gaussian(self, size: Optional[int] = None) -> ArrayLike:
        """Sample N(0, 1). Returns a float, or an array when size is given."""
        self._draws += 1 if size is None else size
        if size is None:
            return float(self._rng.standard_normal())
        return self._rng.standard_normal(size)

    def uniform(self, size: Optional[int] = None) -> ArrayLike:
        """Sample U(-1, 1). Returns a float, or an array when size is given."""
        self._draws += 1 if size is None else size
        if size is None:
            return float(self._rng.uniform(-1.0, 1.0))
        return self._rng.uniform(-1.0, 1.0, size)

    def init_bias(self, bias_range: float, size: Optional[int] = None) -> ArrayLike:
        """Initial bias drawn uniformly in [-bias_range, bias_range]."""
        return bias_range * self.uniform(size)

    def walk(self, bias: ArrayLike, stdev: float) -> ArrayLike:
        """One random-walk step of a bias (scalar or per-axis array)."""
        if np.ndim(bias) == 0:
            return bias + stdev * self.gaussian()
        return bias + stdev * self.gaussian(len(bias))

    @property
    def draws(self) -> int:
        """Total samples drawn since construction."""
        return self._draws


@dataclass
class BiasState:
    """Constant-offset bias with random walk for one axis group."""
    bias_range: float = 0.0
    walk_stdev: float = 0.0
    axes: int = 3
    value: np.ndarray = field(default=None)

    def __post_init__(self):
        if self.value is None:
            self.value = np.zeros(self.axes)
        else:
            self.value = np.asarray(self.value, dtype=np.float64)

    def initialize(self, noise: NoiseEngine) -> np.ndarray:
        """Draw the constant part of the bias."""
        self.value = np.asarray(noise.init_bias(self.bias_range, self.axes), dtype=np.float64)
        return self.value

    def step(self, noise: NoiseEngine) -> np.ndarray:
        """Advance the random walk by one read and return the new bias."""
        self.value = noise.walk(self.value, self.walk_stdev)
        return self.value

    @property
    def scalar(self) -> float:
        """Value of a single-axis bias."""
        return float(self.value[0])
