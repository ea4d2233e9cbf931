"""
Frame Conversion
================

Simulation world:  X = North/forward,  Y = West/left,   Z = Up     (NWU)
Firmware frame:    X = North,          Y = East,        Z = Down   (NED)

    v_ned = T @ v_nwu    where T = diag(1, -1, -1)

T is a 180-deg rotation about X and is its own inverse, so the same
transform converts in both directions. Quaternions are stored [w, x, y, z];
the matching conversion negates the y and z components.
"""

from dataclasses import replace

import numpy as np

from .physics import GroundTruthState

NWU_TO_NED = np.diag([1.0, -1.0, -1.0])
NED_TO_NWU = NWU_TO_NED            # Same matrix (self-inverse)

_QUAT_FLIP = np.array([1.0, 1.0, -1.0, -1.0])


def vector_to_ned(v) -> np.ndarray:
    """Convert a 3-vector from NWU to NED."""
    return NWU_TO_NED @ np.asarray(v, dtype=np.float64)


def vector_to_nwu(v) -> np.ndarray:
    """Convert a 3-vector from NED back to NWU."""
    return NED_TO_NWU @ np.asarray(v, dtype=np.float64)


def quaternion_to_ned(q) -> np.ndarray:
    """Convert a [w, x, y, z] attitude quaternion from NWU to NED."""
    return _QUAT_FLIP * np.asarray(q, dtype=np.float64)


def rotation_to_ned(R) -> np.ndarray:
    """Convert a body -> world rotation matrix from NWU to NED."""
    return NWU_TO_NED @ np.asarray(R, dtype=np.float64) @ NED_TO_NWU


def quaternion_to_matrix(q) -> np.ndarray:
    """Rotation matrix (body -> world) for a [w, x, y, z] quaternion."""
    w, x, y, z = np.asarray(q, dtype=np.float64) / np.linalg.norm(q)
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z),     2 * (x * z + w * y)],
        [2 * (x * y + w * z),     1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y),     2 * (y * z + w * x),     1 - 2 * (x * x + y * y)],
    ])


def rotate_vector(q, v) -> np.ndarray:
    """Rotate a body-frame vector into the world frame."""
    return quaternion_to_matrix(q) @ np.asarray(v, dtype=np.float64)


def rotate_vector_reverse(q, v) -> np.ndarray:
    """Rotate a world-frame vector into the body frame (R⁻¹ · v)."""
    return quaternion_to_matrix(q).T @ np.asarray(v, dtype=np.float64)


def quaternion_from_euler(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """[w, x, y, z] quaternion for ZYX (yaw-pitch-roll) Euler angles in radians."""
    cr, sr = np.cos(roll / 2), np.sin(roll / 2)
    cp, sp = np.cos(pitch / 2), np.sin(pitch / 2)
    cy, sy = np.cos(yaw / 2), np.sin(yaw / 2)
    return np.array([
        cr * cp * cy + sr * sp * sy,
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
    ])


def truth_to_ned(state: GroundTruthState) -> GroundTruthState:
    """Copy of a ground-truth snapshot with every field expressed in NED."""
    return replace(
        state,
        position=vector_to_ned(state.position),
        orientation=quaternion_to_ned(state.orientation),
        linear_velocity=vector_to_ned(state.linear_velocity),
        angular_velocity=vector_to_ned(state.angular_velocity),
        linear_acceleration=vector_to_ned(state.linear_acceleration),
        gravity=vector_to_ned(state.gravity),
    )
