"""
Differential Pressure (Airspeed) Simulator
==========================================

Pitot-static dynamic pressure from body speed, incompressible flow:

    q = ½ · ρ · Va²

Only fixed-wing vehicles carry the sensor.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from ..config import MavType, ParameterSource
from ..simulation.noise import BiasState, NoiseEngine
from ..simulation.physics import GroundTruthState

logger = logging.getLogger(__name__)

AIR_DENSITY = 1.225                 # kg/m³, sea level
AIRSPEED_TEMPERATURE_C = 27.0


@dataclass
class AirspeedConfig:
    """Configuration for the simulated differential-pressure sensor."""
    airspeed_stdev: float = 1.15        # Pa
    airspeed_bias_range: float = 0.15
    airspeed_bias_walk_stdev: float = 0.001

    @classmethod
    def from_params(cls, params: ParameterSource) -> 'AirspeedConfig':
        d = cls()
        return cls(
            airspeed_stdev=params.get_float("airspeed_stdev", d.airspeed_stdev),
            airspeed_bias_range=params.get_float("airspeed_bias_range", d.airspeed_bias_range),
            airspeed_bias_walk_stdev=params.get_float(
                "airspeed_bias_walk_stdev", d.airspeed_bias_walk_stdev),
        )


def dynamic_pressure(airspeed: float, rho: float = AIR_DENSITY) -> float:
    return rho * airspeed * airspeed / 2.0


class AirspeedModel:

    def __init__(self, noise: NoiseEngine, mav_type: MavType = MavType.MULTIROTOR,
                 config: Optional[AirspeedConfig] = None):
        self.config = config or AirspeedConfig()
        self.mav_type = MavType.parse(mav_type)
        self._noise = noise
        self.bias = BiasState(self.config.airspeed_bias_range,
                              self.config.airspeed_bias_walk_stdev, axes=1)
        self.init_biases()

    def init_biases(self):
        self.bias.initialize(self._noise)

    @property
    def present(self) -> bool:
        """Whether this vehicle type carries a pitot tube."""
        return self.mav_type == MavType.FIXEDWING

    def read(self, state: GroundTruthState) -> Tuple[float, float]:
        """Return (differential pressure Pa, temperature °C)."""
        y_as = dynamic_pressure(state.speed)

        y_as += self.config.airspeed_stdev * self._noise.gaussian()
        self.bias.step(self._noise)
        y_as += self.bias.scalar

        return y_as, AIRSPEED_TEMPERATURE_C
