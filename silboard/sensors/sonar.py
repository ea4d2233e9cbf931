"""
Sonar / Rangefinder Simulator
=============================

Downward range equals world Z (no terrain model). Outside the working
range the sensor saturates at its limit without noise.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from ..config import ParameterSource
from ..simulation.noise import NoiseEngine
from ..simulation.physics import GroundTruthState

logger = logging.getLogger(__name__)


@dataclass
class SonarConfig:
    """Configuration for the simulated sonar."""
    sonar_stdev: float = 1.15
    sonar_min_range: float = 0.25      # m
    sonar_max_range: float = 8.0       # m

    def __post_init__(self):
        if self.sonar_min_range > self.sonar_max_range:
            raise ValueError(
                f"sonar_min_range ({self.sonar_min_range}) exceeds "
                f"sonar_max_range ({self.sonar_max_range})")

    @classmethod
    def from_params(cls, params: ParameterSource) -> 'SonarConfig':
        d = cls()
        return cls(
            sonar_stdev=params.get_float("sonar_stdev", d.sonar_stdev),
            sonar_min_range=params.get_float("sonar_min_range", d.sonar_min_range),
            sonar_max_range=params.get_float("sonar_max_range", d.sonar_max_range),
        )


class SonarModel:

    def __init__(self, noise: NoiseEngine, config: Optional[SonarConfig] = None):
        self.config = config or SonarConfig()
        self._noise = noise

    def read(self, state: GroundTruthState) -> float:
        """Range in metres, clamped to the sensor's working range."""
        alt = state.altitude

        if alt < self.config.sonar_min_range:
            return self.config.sonar_min_range
        if alt > self.config.sonar_max_range:
            return self.config.sonar_max_range
        return alt + self.config.sonar_stdev * self._noise.gaussian()
