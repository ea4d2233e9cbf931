"""
SIL Driving Loop
================

Glue between the physics engine, the firmware and the vehicle dynamics,
run once per physics step:

    1. firmware.run() twice, so tasks that only run between IMU samples
       still get a turn on ticks that carry new IMU data
    2. NED truth + board PWM outputs -> dynamics model -> body force/torque
    3. force/torque converted back to NWU and applied to the physics body
    4. truth observers notified (NWU and NED)

Firmware, dynamics model and physics engine are external; only their
interfaces live here.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, TYPE_CHECKING
import logging

import numpy as np

from .frames import NED_TO_NWU, truth_to_ned
from .physics import GroundTruthState

if TYPE_CHECKING:
    from ..board import SILBoard

logger = logging.getLogger(__name__)

TruthObserver = Callable[[GroundTruthState, GroundTruthState], None]


class Firmware(ABC):
    """Autopilot firmware running on the board."""

    @abstractmethod
    def init(self):
        """Boot the firmware."""

    @abstractmethod
    def run(self):
        """Run one pass of the firmware main loop."""


class DynamicsModel(ABC):
    """Vehicle force/torque model (multirotor, fixed-wing, ...)."""

    @abstractmethod
    def update_forces_and_torques(self, state_ned: GroundTruthState,
                                  outputs: Sequence[int]) -> np.ndarray:
        """Return [Fx, Fy, Fz, Mx, My, Mz] in the NED body frame."""

    def set_wind(self, wind_ned: np.ndarray):
        """Optional: update the ambient wind vector."""


class WrenchSink(ABC):
    """Physics-side consumer of body forces and torques (NWU body frame)."""

    @abstractmethod
    def apply_wrench(self, force: np.ndarray, torque: np.ndarray):
        pass


class SILRunner:
    """Drives a board, its firmware and a dynamics model from the physics tick."""

    def __init__(
        self,
        board: 'SILBoard',
        firmware: Firmware,
        dynamics: Optional[DynamicsModel] = None,
        wrench_sink: Optional[WrenchSink] = None,
        runs_per_tick: int = 2,
    ):
        self.board = board
        self.firmware = firmware
        self.dynamics = dynamics
        self.wrench_sink = wrench_sink
        self.runs_per_tick = runs_per_tick

        self._observers: List[TruthObserver] = []
        self._last_wrench = np.zeros(6)
        self._tick_count = 0

    def start(self):
        """Boot the board and the firmware."""
        self.board.init_board()
        self.firmware.init()
        logger.info("SIL runner started")

    def add_truth_observer(self, observer: TruthObserver):
        self._observers.append(observer)

    def on_update(self):
        """Process one physics step."""
        for _ in range(self.runs_per_tick):
            self.firmware.run()

        truth_nwu = self.board.provider.state()
        truth_ned = truth_to_ned(truth_nwu)

        if self.dynamics is not None:
            wrench = np.asarray(
                self.dynamics.update_forces_and_torques(truth_ned, self.board.get_outputs()),
                dtype=np.float64,
            )
            self._last_wrench = wrench
            if self.wrench_sink is not None:
                force = NED_TO_NWU @ wrench[:3]
                torque = NED_TO_NWU @ wrench[3:6]
                self.wrench_sink.apply_wrench(force, torque)

        for observer in self._observers:
            observer(truth_nwu, truth_ned)

        self._tick_count += 1

    def set_wind(self, wind_ned):
        if self.dynamics is not None:
            self.dynamics.set_wind(np.asarray(wind_ned, dtype=np.float64))

    def reset(self):
        """Return the vehicle to its initial pose, if the provider supports it."""
        reset = getattr(self.board.provider, 'reset', None)
        if reset is None:
            logger.warning("State provider does not support reset")
            return
        reset()

    @property
    def last_wrench(self) -> np.ndarray:
        """Most recent NED [force, torque] from the dynamics model."""
        return self._last_wrench.copy()

    @property
    def tick_count(self) -> int:
        return self._tick_count
