"""
IMU Simulator
=============

Accelerometer and gyroscope readings from ground truth.

Measurement model (per axis, body frame, then converted to NED):

    y = truth + noise + bias

- noise ~ N(0, stdev²), injected only while the motors are spinning, since
  most real IMU noise on a small vehicle is motor vibration.
- bias starts uniform in [-bias_range, bias_range] and random-walks by
  N(0, bias_walk_stdev²) on every read, spinning or not.

Accelerometer truth is specific force, R⁻¹ · (a_world - g). While the
vehicle is (nearly) at rest, the physics engine's contact jitter is masked
by reporting R⁻¹ · (-g) instead; see IMUConfig.ground_jitter_threshold.
"""

from dataclasses import dataclass
from typing import Optional
import logging

import numpy as np

from ..config import ParameterSource
from ..simulation.frames import rotate_vector_reverse, vector_to_ned
from ..simulation.noise import BiasState, NoiseEngine
from ..simulation.physics import GroundTruthState

logger = logging.getLogger(__name__)

IMU_TEMPERATURE_C = 27.0


@dataclass
class IMUConfig:
    """Configuration for the simulated IMU."""
    # Gyroscope (rad/s)
    gyro_stdev: float = 0.13
    gyro_bias_range: float = 0.15
    gyro_bias_walk_stdev: float = 0.001

    # Accelerometer (m/s²)
    acc_stdev: float = 1.15
    acc_bias_range: float = 0.15
    acc_bias_walk_stdev: float = 0.001

    # Data-ready rate
    update_rate_hz: float = 1000.0

    # Below this body speed (m/s) the accelerometer reports gravity only.
    # 0 disables the substitution.
    ground_jitter_threshold: float = 0.05

    @property
    def update_period_us(self) -> int:
        return int(1e6 / self.update_rate_hz)

    @classmethod
    def from_params(cls, params: ParameterSource) -> 'IMUConfig':
        d = cls()
        return cls(
            gyro_stdev=params.get_float("gyro_stdev", d.gyro_stdev),
            gyro_bias_range=params.get_float("gyro_bias_range", d.gyro_bias_range),
            gyro_bias_walk_stdev=params.get_float("gyro_bias_walk_stdev", d.gyro_bias_walk_stdev),
            acc_stdev=params.get_float("acc_stdev", d.acc_stdev),
            acc_bias_range=params.get_float("acc_bias_range", d.acc_bias_range),
            acc_bias_walk_stdev=params.get_float("acc_bias_walk_stdev", d.acc_bias_walk_stdev),
            update_rate_hz=params.get_float("imu_update_rate", d.update_rate_hz),
            ground_jitter_threshold=params.get_float(
                "acc_ground_jitter_threshold", d.ground_jitter_threshold),
        )


@dataclass
class IMUReading:
    """One IMU sample as delivered to the firmware (NED body frame)."""
    accel: np.ndarray
    gyro: np.ndarray
    temperature: float = IMU_TEMPERATURE_C
    time_us: int = 0


class IMUModel:
    """Accelerometer + gyroscope pair sharing one noise engine."""

    def __init__(self, noise: NoiseEngine, config: Optional[IMUConfig] = None):
        self.config = config or IMUConfig()
        self._noise = noise
        self.acc_bias = BiasState(self.config.acc_bias_range, self.config.acc_bias_walk_stdev)
        self.gyro_bias = BiasState(self.config.gyro_bias_range, self.config.gyro_bias_walk_stdev)
        self.init_biases()

    def init_biases(self):
        """Draw fresh constant biases for both sensors."""
        self.gyro_bias.initialize(self._noise)
        self.acc_bias.initialize(self._noise)
        logger.debug(f"IMU biases: acc={self.acc_bias.value}, gyro={self.gyro_bias.value}")

    def true_specific_force(self, state: GroundTruthState) -> np.ndarray:
        """Noiseless body-frame (NWU) specific force."""
        q = state.orientation
        if state.speed < self.config.ground_jitter_threshold:
            return rotate_vector_reverse(q, -state.gravity)
        return rotate_vector_reverse(q, state.linear_acceleration - state.gravity)

    def read_accel(self, state: GroundTruthState, motors_spinning: bool) -> np.ndarray:
        """Accelerometer reading in m/s², NED body frame."""
        y_acc = self.true_specific_force(state)

        if motors_spinning:
            y_acc = y_acc + self.config.acc_stdev * self._noise.gaussian(3)

        self.acc_bias.step(self._noise)
        y_acc = y_acc + self.acc_bias.value

        return vector_to_ned(y_acc)

    def read_gyro(self, state: GroundTruthState, motors_spinning: bool) -> np.ndarray:
        """Gyroscope reading in rad/s, NED body frame."""
        y_gyro = np.array(state.angular_velocity, dtype=np.float64)

        if motors_spinning:
            y_gyro = y_gyro + self.config.gyro_stdev * self._noise.gaussian(3)

        self.gyro_bias.step(self._noise)
        y_gyro = y_gyro + self.gyro_bias.value

        return vector_to_ned(y_gyro)

    def read(self, state: GroundTruthState, motors_spinning: bool, time_us: int = 0) -> IMUReading:
        """Full IMU sample: accelerometer first, then gyroscope."""
        accel = self.read_accel(state, motors_spinning)
        gyro = self.read_gyro(state, motors_spinning)
        return IMUReading(accel=accel, gyro=gyro, temperature=IMU_TEMPERATURE_C, time_us=time_us)
