"""
Barometer Simulator
===================

Static pressure from altitude via the standard-atmosphere relation:

    p = 101325 · (1 - 2.25694e-5 · h)^5.2553

with h = world Z + ground_altitude. No thermal model: temperature is fixed.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from ..config import ParameterSource
from ..simulation.noise import BiasState, NoiseEngine
from ..simulation.physics import GroundTruthState

logger = logging.getLogger(__name__)

SEA_LEVEL_PRESSURE_PA = 101325.0
LAPSE_COEFFICIENT = 2.25694e-5     # 1/m
PRESSURE_EXPONENT = 5.2553
BARO_TEMPERATURE_C = 27.0


def altitude_to_pressure(altitude: float) -> float:
    """Standard-atmosphere pressure (Pa) at altitude (m)."""
    return SEA_LEVEL_PRESSURE_PA * (1.0 - LAPSE_COEFFICIENT * altitude) ** PRESSURE_EXPONENT


def pressure_to_altitude(pressure: float) -> float:
    """Inverse of altitude_to_pressure."""
    return (1.0 - (pressure / SEA_LEVEL_PRESSURE_PA) ** (1.0 / PRESSURE_EXPONENT)) / LAPSE_COEFFICIENT


@dataclass
class BaroConfig:
    """Configuration for the simulated barometer."""
    baro_stdev: float = 1.15           # Pa
    baro_bias_range: float = 0.15
    baro_bias_walk_stdev: float = 0.001
    ground_altitude: float = 1387.0    # m above sea level at world Z = 0

    @classmethod
    def from_params(cls, params: ParameterSource) -> 'BaroConfig':
        d = cls()
        return cls(
            baro_stdev=params.get_float("baro_stdev", d.baro_stdev),
            baro_bias_range=params.get_float("baro_bias_range", d.baro_bias_range),
            baro_bias_walk_stdev=params.get_float("baro_bias_walk_stdev", d.baro_bias_walk_stdev),
            ground_altitude=params.get_float("ground_altitude", d.ground_altitude),
        )


class BarometerModel:

    def __init__(self, noise: NoiseEngine, config: Optional[BaroConfig] = None):
        self.config = config or BaroConfig()
        self._noise = noise
        self.bias = BiasState(self.config.baro_bias_range, self.config.baro_bias_walk_stdev, axes=1)
        self.init_biases()

    def init_biases(self):
        self.bias.initialize(self._noise)

    def read(self, state: GroundTruthState) -> Tuple[float, float]:
        """Return (pressure Pa, temperature °C)."""
        altitude = state.altitude + self.config.ground_altitude
        y_baro = altitude_to_pressure(altitude)

        y_baro += self.config.baro_stdev * self._noise.gaussian()
        self.bias.step(self._noise)
        y_baro += self.bias.scalar

        return y_baro, BARO_TEMPERATURE_C
