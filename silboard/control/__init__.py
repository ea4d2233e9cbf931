"""
Actuator I/O
============

PWM output capture and RC input for the simulated board.
"""

from .actuators import (
    ActuatorIO,
    RCFrame,
    RCSource,
    LocalRCSource,
)

__all__ = [
    'ActuatorIO',
    'RCFrame',
    'RCSource',
    'LocalRCSource',
]
