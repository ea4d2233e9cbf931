"""
Simulation Module
=================

Ground-truth state, stochastic error sources, frame conversion and the
simulated time base shared by every sensor model.
"""

from .physics import GroundTruthState, PhysicsStateProvider, StaticStateProvider
from .noise import NoiseEngine, BiasState
from .clock import SimClock, SampleScheduler
from .frames import vector_to_ned, vector_to_nwu, quaternion_to_ned, truth_to_ned
from .sil_loop import SILRunner, Firmware, DynamicsModel, WrenchSink

__all__ = [
    'GroundTruthState', 'PhysicsStateProvider', 'StaticStateProvider',
    'NoiseEngine', 'BiasState',
    'SimClock', 'SampleScheduler',
    'vector_to_ned', 'vector_to_nwu', 'quaternion_to_ned', 'truth_to_ned',
    'SILRunner', 'Firmware', 'DynamicsModel', 'WrenchSink',
]
