"""
Physics State
=============

Ground-truth kinematic state supplied by the physics simulation each tick.

All quantities are in the simulation's native NWU frame
(X = North/forward, Y = West/left, Z = Up). The board core never talks to a
specific simulator; it only sees a PhysicsStateProvider.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Optional
import logging

import numpy as np

logger = logging.getLogger(__name__)

STANDARD_GRAVITY = 9.81


def _vec(values=(0.0, 0.0, 0.0)) -> np.ndarray:
    return np.array(values, dtype=np.float64)


@dataclass(frozen=True)
class GroundTruthState:
    """Immutable snapshot of the vehicle's noiseless state."""
    position: np.ndarray = field(default_factory=_vec)              # world, m
    orientation: np.ndarray = field(                                # body -> world, [w, x, y, z]
        default_factory=lambda: _vec((1.0, 0.0, 0.0, 0.0)))
    linear_velocity: np.ndarray = field(default_factory=_vec)       # body, m/s
    angular_velocity: np.ndarray = field(default_factory=_vec)      # body, rad/s
    linear_acceleration: np.ndarray = field(default_factory=_vec)   # world, m/s²
    gravity: np.ndarray = field(
        default_factory=lambda: _vec((0.0, 0.0, -STANDARD_GRAVITY)))
    time: float = 0.0                                               # simulation time, s

    def __post_init__(self):
        # Normalise inputs to float arrays; frozen, so go through object.__setattr__
        for name in ('position', 'orientation', 'linear_velocity',
                     'angular_velocity', 'linear_acceleration', 'gravity'):
            object.__setattr__(self, name, np.asarray(getattr(self, name), dtype=np.float64))

    @property
    def altitude(self) -> float:
        """Height above the world origin (Z-up)."""
        return float(self.position[2])

    @property
    def speed(self) -> float:
        """Magnitude of the body-relative linear velocity."""
        return float(np.linalg.norm(self.linear_velocity))


class PhysicsStateProvider(ABC):
    """Interface to whatever physics engine is driving the simulation."""

    @abstractmethod
    def state(self) -> GroundTruthState:
        """Return the current ground-truth snapshot."""

    @abstractmethod
    def sim_time(self) -> float:
        """Return the current simulation time in seconds."""


class StaticStateProvider(PhysicsStateProvider):
    """
    In-memory provider whose state is pushed by the host.

    Used by tests, the sensor bench, and hosts that copy their engine's
    state into the board once per step.
    """

    def __init__(self, initial: Optional[GroundTruthState] = None):
        self._initial = initial or GroundTruthState()
        self._state = self._initial

    def state(self) -> GroundTruthState:
        return self._state

    def sim_time(self) -> float:
        return self._state.time

    def update(self, **fields) -> GroundTruthState:
        """Replace selected fields of the current state."""
        self._state = replace(self._state, **fields)
        return self._state

    def set_state(self, state: GroundTruthState):
        self._state = state

    def advance(self, dt: float) -> GroundTruthState:
        """Step simulation time forward by dt seconds."""
        return self.update(time=self._state.time + dt)

    def reset(self):
        """Restore the initial pose, keeping the current simulation time."""
        logger.debug("Resetting state provider to initial pose")
        self._state = replace(self._initial, time=self._state.time)
