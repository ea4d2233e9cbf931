"""
SIL Board
=========

Software-in-the-loop flight-controller board: the hardware abstraction
layer an autopilot firmware expects, backed by a physics simulation.

Modules
-------
board       SILBoard, the firmware-facing board contract
config      Parameter sources and vehicle type
simulation  Ground-truth state, noise engine, frames, clock, driving loop
sensors     IMU, magnetometer, barometer, airspeed and sonar models
control     PWM outputs and RC inputs
transport   RC input over a Unix socket
storage     Persistent configuration memory
"""

from .board import SILBoard, BoardConfig
from .config import MavType, ParameterSource, DictParameterSource, JSONParameterSource

__version__ = "0.1.0"

__all__ = [
    'SILBoard',
    'BoardConfig',
    'MavType',
    'ParameterSource',
    'DictParameterSource',
    'JSONParameterSource',
]
