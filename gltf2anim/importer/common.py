"""
Common utilities and constants for the importer module.
"""

import numpy as np
from typing import Optional, Sequence

# Constants
DEFAULT_SAMPLING_RATE = 60.0
STEP_EPSILON = 1e-6
MAX_JOINTS = 1024

# glTF quaternions are stored as XYZW
IDENTITY_TRANSLATION = (0.0, 0.0, 0.0)
IDENTITY_ROTATION = (0.0, 0.0, 0.0, 1.0)
IDENTITY_SCALE = (1.0, 1.0, 1.0)

# Channel target paths handled by the importer
TARGET_TRANSLATION = 'translation'
TARGET_ROTATION = 'rotation'
TARGET_SCALE = 'scale'
TARGET_PATHS = (TARGET_TRANSLATION, TARGET_ROTATION, TARGET_SCALE)

# Sampler interpolation modes
INTERPOLATION_LINEAR = 'LINEAR'
INTERPOLATION_STEP = 'STEP'
INTERPOLATION_CUBICSPLINE = 'CUBICSPLINE'


def as_vector(values: Optional[Sequence[float]], default: Sequence[float]) -> np.ndarray:
    """
    Convert an optional glTF vector field to a float32 array.

    Args:
        values: Field value as stored on the node, or None/empty
        default: Value used when the field is absent

    Returns:
        Float32 numpy array
    """
    if values is None or len(values) == 0:
        values = default
    return np.array(values, dtype=np.float32)


def normalize_quaternion(quat: np.ndarray) -> np.ndarray:
    """
    Normalize an XYZW quaternion.

    A zero-length quaternion is replaced by the identity rotation.

    Args:
        quat: Quaternion in XYZW format

    Returns:
        Unit quaternion in XYZW format
    """
    quat = np.asarray(quat, dtype=np.float32)
    norm = np.linalg.norm(quat)
    if norm > 0:
        return (quat / norm).astype(np.float32)
    return np.array(IDENTITY_ROTATION, dtype=np.float32)


def sample_hermite_spline(u: float, p0: np.ndarray, m0: np.ndarray,
                          p1: np.ndarray, m1: np.ndarray) -> np.ndarray:
    """
    Evaluate a cubic Hermite spline segment.

    p(u) = (2u^3 - 3u^2 + 1)p0 + (u^3 - 2u^2 + u)m0 + (-2u^3 + 3u^2)p1 + (u^3 - u^2)m1

    Args:
        u: Normalized position in the segment, between 0 and 1
        p0: Value at u = 0
        m0: Out-tangent at u = 0, already scaled by the segment duration
        p1: Value at u = 1
        m1: In-tangent at u = 1, already scaled by the segment duration

    Returns:
        Interpolated value
    """
    u2 = u * u
    u3 = u2 * u

    a = 2.0 * u3 - 3.0 * u2 + 1.0
    b = u3 - 2.0 * u2 + u
    c = -2.0 * u3 + 3.0 * u2
    d = u3 - u2

    return (a * p0 + b * m0 + c * p1 + d * m1).astype(np.float32)
