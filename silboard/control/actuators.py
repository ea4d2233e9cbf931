"""
Actuator I/O
============

PWM outputs commanded by the firmware and RC inputs supplied to it.

Outputs are only recorded here; the external dynamics model reads them
each tick through SILBoard.get_outputs().

RC frames arrive asynchronously from an RCSource callback, so the latest
frame and the received flag are guarded by a lock and read as a snapshot.
Without an active RC source the firmware sees a fail-safe frame: throttle
at minimum, every other stick centred.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple
import logging
import time

logger = logging.getLogger(__name__)

NUM_PWM_OUTPUTS = 14
NUM_RC_CHANNELS = 8

PWM_MIN = 1000
PWM_CENTER = 1500
PWM_MAX = 2000

THROTTLE_CHANNEL = 2
ATTITUDE_OVERRIDE_CHANNEL = 4
ARM_CHANNEL = 5

# Throttle output above this means the motors are turning
MOTOR_SPIN_THRESHOLD = 1100


def default_rc_values() -> List[int]:
    """RC frame used until the first real frame arrives."""
    values = [PWM_CENTER] * NUM_RC_CHANNELS
    values[THROTTLE_CHANNEL] = PWM_MIN
    values[ATTITUDE_OVERRIDE_CHANNEL] = PWM_MIN
    values[ARM_CHANNEL] = PWM_MIN
    return values


@dataclass(frozen=True)
class RCFrame:
    """One frame of raw RC channel values (µs)."""
    values: Tuple[int, ...] = field(default_factory=lambda: tuple(default_rc_values()))
    timestamp: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'values', tuple(int(v) for v in self.values))

    def channel(self, index: int) -> int:
        return self.values[index]


RCCallback = Callable[[RCFrame], None]


class RCSource(ABC):
    """
    External operator input.

    Implementations deliver frames by invoking subscribed callbacks, possibly
    from their own thread.
    """

    def __init__(self):
        self._callbacks: List[RCCallback] = []
        self._latest: Optional[RCFrame] = None
        self._source_lock = threading.Lock()

    def subscribe(self, callback: RCCallback):
        with self._source_lock:
            if callback not in self._callbacks:
                self._callbacks.append(callback)

    def unsubscribe(self, callback: RCCallback):
        with self._source_lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def latest(self) -> Optional[RCFrame]:
        """Most recent frame delivered, or None."""
        with self._source_lock:
            return self._latest

    @abstractmethod
    def connected(self) -> bool:
        """True while a publisher is actively attached."""

    def _deliver(self, frame: RCFrame):
        with self._source_lock:
            self._latest = frame
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback(frame)


class LocalRCSource(RCSource):
    """In-process RC source; the host (or a test) publishes frames directly."""

    def __init__(self, connected: bool = True):
        super().__init__()
        self._connected = connected

    def connected(self) -> bool:
        return self._connected

    def attach(self):
        self._connected = True

    def detach(self):
        self._connected = False

    def publish(self, values: Sequence[int]) -> RCFrame:
        frame = RCFrame(values=tuple(values), timestamp=time.time())
        self._deliver(frame)
        return frame


class ActuatorIO:
    """PWM output capture and RC input for the simulated board."""

    def __init__(self, rc_source: Optional[RCSource] = None):
        self.rc_source = rc_source
        self._lock = threading.Lock()
        self._latest_rc = RCFrame()
        self._rc_received = False
        self._pwm_outputs = [PWM_MIN] * NUM_PWM_OUTPUTS

        # Statistics
        self._frames_received = 0

    def init(self, rc_source: Optional[RCSource] = None):
        """Reset outputs and RC state, then subscribe to the RC source."""
        if rc_source is not None:
            if self.rc_source is not None:
                self.rc_source.unsubscribe(self._on_rc)
            self.rc_source = rc_source

        with self._lock:
            self._rc_received = False
            self._latest_rc = RCFrame()
        self._pwm_outputs = [PWM_MIN] * NUM_PWM_OUTPUTS

        if self.rc_source is not None:
            self.rc_source.subscribe(self._on_rc)
            logger.info(f"Subscribed to RC source {self.rc_source.__class__.__name__}")
        else:
            logger.info("No RC source configured, using fail-safe inputs")

    def _on_rc(self, frame: RCFrame):
        with self._lock:
            self._latest_rc = frame
            self._rc_received = True
            self._frames_received += 1

    def read(self, channel: int) -> int:
        """RC input value for channel, or the fail-safe value with no source."""
        if self.rc_source is not None and self.rc_source.connected():
            with self._lock:
                values = self._latest_rc.values
            if 0 <= channel < len(values):
                return values[channel]

        # No publishers: throttle low, centre everything else
        if channel == THROTTLE_CHANNEL:
            return PWM_MIN
        return PWM_CENTER

    def write(self, channel: int, value: int):
        """Record a commanded output; out-of-range channels are ignored."""
        if not 0 <= channel < NUM_PWM_OUTPUTS:
            logger.debug(f"Ignoring write to PWM channel {channel}")
            return
        self._pwm_outputs[channel] = int(value)

    def lost(self) -> bool:
        """True until at least one RC frame has been received."""
        with self._lock:
            return not self._rc_received

    def motors_spinning(self) -> bool:
        return self._pwm_outputs[THROTTLE_CHANNEL] > MOTOR_SPIN_THRESHOLD

    def outputs(self) -> List[int]:
        """Copy of the commanded PWM outputs."""
        return list(self._pwm_outputs)

    def latest_rc(self) -> RCFrame:
        with self._lock:
            return self._latest_rc

    @property
    def stats(self) -> dict:
        with self._lock:
            return {
                "rc_frames_received": self._frames_received,
                "rc_received": self._rc_received,
            }
