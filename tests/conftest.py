"""
Shared test fixtures for SIL board unit tests.
"""

import pytest
import numpy as np

from silboard.board import SILBoard
from silboard.config import DictParameterSource
from silboard.simulation.noise import NoiseEngine
from silboard.simulation.physics import GroundTruthState, StaticStateProvider


class ConstantNoise(NoiseEngine):
    """Deterministic noise double: every draw returns a fixed value."""

    def __init__(self, gaussian: float = 0.0, uniform: float = 0.0):
        super().__init__(seed=0)
        self.gaussian_value = gaussian
        self.uniform_value = uniform

    def gaussian(self, size=None):
        self._draws += 1 if size is None else size
        if size is None:
            return self.gaussian_value
        return np.full(size, self.gaussian_value)

    def uniform(self, size=None):
        self._draws += 1 if size is None else size
        if size is None:
            return self.uniform_value
        return np.full(size, self.uniform_value)


# Every stochastic term switched off
QUIET_PARAMS = {
    "gyro_stdev": 0.0, "gyro_bias_range": 0.0, "gyro_bias_walk_stdev": 0.0,
    "acc_stdev": 0.0, "acc_bias_range": 0.0, "acc_bias_walk_stdev": 0.0,
    "mag_stdev": 0.0, "mag_bias_range": 0.0, "mag_bias_walk_stdev": 0.0,
    "baro_stdev": 0.0, "baro_bias_range": 0.0, "baro_bias_walk_stdev": 0.0,
    "airspeed_stdev": 0.0, "airspeed_bias_range": 0.0, "airspeed_bias_walk_stdev": 0.0,
    "sonar_stdev": 0.0,
}


@pytest.fixture
def constant_noise():
    """Factory for deterministic noise engines."""
    return ConstantNoise


@pytest.fixture
def noise():
    """Seeded noise engine."""
    return NoiseEngine(seed=1234)


@pytest.fixture
def hover_state():
    """Level vehicle hovering 2 m above the origin."""
    return GroundTruthState(position=(0.0, 0.0, 2.0), time=0.0)


@pytest.fixture
def provider(hover_state):
    return StaticStateProvider(hover_state)


@pytest.fixture
def quiet_params():
    """Parameters with all noise and bias disabled."""
    return DictParameterSource(QUIET_PARAMS)


@pytest.fixture
def board(provider, quiet_params, tmp_path):
    """Booted multirotor board with noiseless sensors."""
    b = SILBoard(
        provider,
        params=quiet_params,
        namespace="/test",
        noise=NoiseEngine(seed=42),
        memory_root=str(tmp_path / "memory"),
    )
    b.init_board()
    b.sensors_init()
    b.pwm_init(False, 490, 1000)
    return b
