"""
Simulated Clock and Sample Scheduling
=====================================

The board's time base is simulation time minus the time recorded at boot,
so pausing or fast-forwarding the simulation is transparent to the firmware.

SampleScheduler emulates a sensor's data-ready interrupt: the firmware may
poll every tick, but a new sample is only reported once per period.
"""

import logging

from .physics import PhysicsStateProvider

logger = logging.getLogger(__name__)

# Added before truncation so float error cannot turn 1000 µs into 999
_TRUNCATION_EPS_US = 1e-3

UINT32_MASK = 0xFFFFFFFF


class SimClock:
    """Monotonic millisecond/microsecond clock derived from simulation time."""

    def __init__(self, provider: PhysicsStateProvider):
        self._provider = provider
        self._boot_time = provider.sim_time()

    def boot(self):
        """Record the current simulation time as the zero reference."""
        self._boot_time = self._provider.sim_time()
        logger.debug(f"Clock booted at sim time {self._boot_time:.6f}s")

    @property
    def boot_time(self) -> float:
        return self._boot_time

    def elapsed(self) -> float:
        """Seconds since boot, never negative."""
        return max(0.0, self._provider.sim_time() - self._boot_time)

    def millis(self) -> int:
        """Milliseconds since boot, wrapped to 32 bits."""
        return int(self.elapsed() * 1e3 + _TRUNCATION_EPS_US * 1e-3) & UINT32_MASK

    def micros(self) -> int:
        """Microseconds since boot."""
        return int(self.elapsed() * 1e6 + _TRUNCATION_EPS_US)

    def delay(self, milliseconds: int):
        """No-op: simulated time only advances when the host steps the world."""


class SampleScheduler:
    """
    Fixed-period gate for a polled sensor.

    The first sample becomes ready one period after boot. When polled late,
    the next deadline is measured from the poll time, so a stalled loop
    yields a single sample rather than a burst.
    """

    def __init__(self, rate_hz: float):
        if rate_hz <= 0:
            raise ValueError(f"Update rate must be positive, got {rate_hz}")
        self.rate_hz = rate_hz
        self.period_us = int(1e6 / rate_hz)
        self.next_update_time_us = self.period_us

    def poll(self, now_us: int) -> bool:
        """Return True if a new sample is due at now_us."""
        if now_us >= self.next_update_time_us:
            self.next_update_time_us = now_us + self.period_us
            return True
        return False

    def reset(self, now_us: int = 0):
        """Restart the schedule so the next sample is one period after now_us."""
        self.next_update_time_us = now_us + self.period_us
