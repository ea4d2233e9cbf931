"""
Software-in-the-Loop Board
==========================

The board contract the autopilot firmware runs against, backed by a physics
simulation instead of silicon.

The firmware calls these methods synchronously from the simulation tick;
none of them block or raise. The only concurrent input is the RC source
callback, which ActuatorIO guards with a lock.

Usage:
    provider = StaticStateProvider()
    board = SILBoard(provider, params=JSONParameterSource("params.json"),
                     mav_type="fixedwing", namespace="/fixedwing")
    board.init_board()
    board.sensors_init()
    board.pwm_init(False, 490, 1000)
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np

from .config import DictParameterSource, MavType, ParameterSource
from .control.actuators import ActuatorIO, RCSource
from .sensors.airspeed import AirspeedConfig, AirspeedModel
from .sensors.barometer import BaroConfig, BarometerModel
from .sensors.imu import IMUConfig, IMUModel, IMUReading
from .sensors.magnetometer import MagConfig, MagnetometerModel
from .sensors.sonar import SonarConfig, SonarModel
from .simulation.clock import SampleScheduler, SimClock
from .simulation.noise import NoiseEngine
from .simulation.physics import PhysicsStateProvider
from .storage.memory import DEFAULT_MEMORY_ROOT, PersistentStore

logger = logging.getLogger(__name__)


@dataclass
class BoardConfig:
    """All sensor settings for one board, resolved from a ParameterSource."""
    imu: IMUConfig
    mag: MagConfig
    baro: BaroConfig
    airspeed: AirspeedConfig
    sonar: SonarConfig

    @classmethod
    def from_params(cls, params: ParameterSource) -> 'BoardConfig':
        return cls(
            imu=IMUConfig.from_params(params),
            mag=MagConfig.from_params(params),
            baro=BaroConfig.from_params(params),
            airspeed=AirspeedConfig.from_params(params),
            sonar=SonarConfig.from_params(params),
        )


class SILBoard:
    """
    Simulated flight-controller board.

    Args:
        provider: Source of ground-truth state and simulation time
        params: Sensor parameters; defaults apply for missing keys
        mav_type: "multirotor" or "fixedwing"
        namespace: Instance namespace, scopes the persistent memory file
        noise: Noise engine; pass a seeded one for reproducible runs
        rc_source: External RC input, subscribed on pwm_init()
        memory_root: Directory holding per-namespace memory files
    """

    def __init__(
        self,
        provider: PhysicsStateProvider,
        params: Optional[ParameterSource] = None,
        mav_type: Union[str, MavType] = MavType.MULTIROTOR,
        namespace: str = "",
        noise: Optional[NoiseEngine] = None,
        rc_source: Optional[RCSource] = None,
        memory_root: str = DEFAULT_MEMORY_ROOT,
    ):
        self.provider = provider
        self.params = params or DictParameterSource()
        self.mav_type = MavType.parse(mav_type)
        self.namespace = namespace
        self.config = BoardConfig.from_params(self.params)
        self.noise = noise or NoiseEngine()

        self.clock = SimClock(provider)
        self.imu_scheduler = SampleScheduler(self.config.imu.update_rate_hz)

        self.imu = IMUModel(self.noise, self.config.imu)
        self.mag = MagnetometerModel(self.noise, self.config.mag)
        self.baro = BarometerModel(self.noise, self.config.baro)
        self.airspeed = AirspeedModel(self.noise, self.mav_type, self.config.airspeed)
        self.sonar = SonarModel(self.noise, self.config.sonar)

        self.actuators = ActuatorIO(rc_source)
        self.memory = PersistentStore(namespace, memory_root)

        logger.info(f"SIL board created: mav_type={self.mav_type.value}, "
                    f"namespace={namespace or '/'}, imu_rate={self.config.imu.update_rate_hz}Hz")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init_board(self):
        """Record boot time; the board clock counts from here."""
        self.clock.boot()
        self.imu_scheduler.reset(0)
        logger.info("Board initialized")

    def board_reset(self, bootloader: bool = False):
        logger.debug(f"board_reset(bootloader={bootloader}) ignored in simulation")

    def sensors_init(self):
        """Redraw the IMU biases, as a real IMU powers up with a new offset."""
        self.imu.init_biases()

    def num_sensor_errors(self) -> int:
        return 0

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def clock_millis(self) -> int:
        return self.clock.millis()

    def clock_micros(self) -> int:
        return self.clock.micros()

    def clock_delay(self, milliseconds: int):
        self.clock.delay(milliseconds)

    # ------------------------------------------------------------------
    # IMU
    # ------------------------------------------------------------------

    def new_imu_data(self) -> bool:
        return self.imu_scheduler.poll(self.clock.micros())

    def imu_read(self) -> Tuple[bool, IMUReading]:
        """
        Read accelerometer and gyroscope.

        Returns:
            (True, IMUReading) with accel in m/s², gyro in rad/s, both NED
        """
        reading = self.imu.read(
            self.provider.state(),
            self.actuators.motors_spinning(),
            time_us=self.clock.micros(),
        )
        return True, reading

    def imu_not_responding_error(self):
        logger.error("IMU not responding")

    # ------------------------------------------------------------------
    # Magnetometer
    # ------------------------------------------------------------------

    def mag_check(self) -> bool:
        return True

    def mag_read(self) -> np.ndarray:
        return self.mag.read(self.provider.state())

    # ------------------------------------------------------------------
    # Barometer
    # ------------------------------------------------------------------

    def baro_check(self) -> bool:
        return True

    def baro_read(self) -> Tuple[float, float]:
        """Return (pressure Pa, temperature °C)."""
        return self.baro.read(self.provider.state())

    # ------------------------------------------------------------------
    # Differential pressure
    # ------------------------------------------------------------------

    def diff_pressure_check(self) -> bool:
        return self.airspeed.present

    def diff_pressure_read(self) -> Tuple[float, float]:
        """Return (differential pressure Pa, temperature °C)."""
        return self.airspeed.read(self.provider.state())

    # ------------------------------------------------------------------
    # Sonar
    # ------------------------------------------------------------------

    def sonar_check(self) -> bool:
        return True

    def sonar_read(self) -> float:
        return self.sonar.read(self.provider.state())

    # ------------------------------------------------------------------
    # PWM / RC
    # ------------------------------------------------------------------

    def pwm_init(self, cppm: bool = False, refresh_rate: int = 490, idle_pwm: int = 1000):
        # cppm, refresh_rate and idle_pwm describe real output hardware; nothing to configure here
        self.actuators.init()

    def pwm_read(self, channel: int) -> int:
        return self.actuators.read(channel)

    def pwm_write(self, channel: int, value: int):
        self.actuators.write(channel, value)

    def pwm_lost(self) -> bool:
        return self.actuators.lost()

    def motors_spinning(self) -> bool:
        return self.actuators.motors_spinning()

    def get_outputs(self) -> List[int]:
        """PWM outputs for the dynamics model."""
        return self.actuators.outputs()

    @property
    def rc_source(self) -> Optional[RCSource]:
        return self.actuators.rc_source

    # ------------------------------------------------------------------
    # Non-volatile memory
    # ------------------------------------------------------------------

    def memory_init(self):
        pass

    def memory_read(self, dest: bytearray, length: int) -> bool:
        return self.memory.read_into(dest, length)

    def memory_write(self, src: bytes, length: int) -> bool:
        return self.memory.write(bytes(src[:length]))

    # ------------------------------------------------------------------
    # LEDs
    # ------------------------------------------------------------------

    def led0_on(self): pass
    def led0_off(self): pass
    def led0_toggle(self): pass

    def led1_on(self): pass
    def led1_off(self): pass
    def led1_toggle(self): pass
