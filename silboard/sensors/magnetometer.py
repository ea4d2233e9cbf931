"""
Magnetometer Simulator
======================

The inertial field is a fixed unit vector built from the configured
inclination and declination. The world frame is NWU while the Earth's field
is conventionally given in NED, hence the negated angles.
"""

import math
from dataclasses import dataclass
from typing import Optional
import logging

import numpy as np

from ..config import ParameterSource
from ..simulation.frames import rotate_vector_reverse, vector_to_ned
from ..simulation.noise import BiasState, NoiseEngine
from ..simulation.physics import GroundTruthState

logger = logging.getLogger(__name__)


@dataclass
class MagConfig:
    """Configuration for the simulated magnetometer."""
    mag_stdev: float = 1.15
    mag_bias_range: float = 0.15
    mag_bias_walk_stdev: float = 0.001

    # Field direction (radians)
    inclination: float = 1.14316156541
    declination: float = 0.198584539676

    @classmethod
    def from_params(cls, params: ParameterSource) -> 'MagConfig':
        d = cls()
        return cls(
            mag_stdev=params.get_float("mag_stdev", d.mag_stdev),
            mag_bias_range=params.get_float("mag_bias_range", d.mag_bias_range),
            mag_bias_walk_stdev=params.get_float("mag_bias_walk_stdev", d.mag_bias_walk_stdev),
            inclination=params.get_float("inclination", d.inclination),
            declination=params.get_float("declination", d.declination),
        )


def inertial_magnetic_field(inclination: float, declination: float) -> np.ndarray:
    """World-frame (NWU) unit magnetic field vector."""
    return np.array([
        math.cos(-inclination) * math.cos(-declination),
        math.cos(-inclination) * math.sin(-declination),
        math.sin(-inclination),
    ])


class MagnetometerModel:
    """Body-frame magnetic field with bias and noise on every read."""

    def __init__(self, noise: NoiseEngine, config: Optional[MagConfig] = None):
        self.config = config or MagConfig()
        self._noise = noise
        self.field = inertial_magnetic_field(self.config.inclination, self.config.declination)
        self.bias = BiasState(self.config.mag_bias_range, self.config.mag_bias_walk_stdev)
        self.init_biases()

    def init_biases(self):
        self.bias.initialize(self._noise)

    def read(self, state: GroundTruthState) -> np.ndarray:
        """Magnetometer reading, NED body frame."""
        noise = self.config.mag_stdev * self._noise.gaussian(3)
        self.bias.step(self._noise)

        y_mag = rotate_vector_reverse(state.orientation, self.field) + self.bias.value + noise
        return vector_to_ned(y_mag)
