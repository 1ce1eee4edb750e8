"""
Conversion of glTF sampler data into keyframes.

glTF LINEAR keys map one to one onto output keys. STEP keys are emulated
with an extra key just before the next sample. CUBICSPLINE channels are
evaluated at a fixed rate since the output keyframes interpolate linearly.
"""

import math
import numpy as np
from typing import List

from .track import Keyframe
from ..common import sample_hermite_spline, STEP_EPSILON
from ..exceptions import AnimationError


def sample_linear(times: np.ndarray, values: np.ndarray) -> List[Keyframe]:
    """
    Copy a LINEAR channel, one keyframe per source sample.

    Args:
        times: Sample timestamps, shape (n,)
        values: Sample values, shape (n, width)

    Returns:
        Keyframes with the source times and values
    """
    if len(times) != len(values):
        raise AnimationError(
            f"LINEAR sampler has {len(times)} timestamps but {len(values)} values"
        )

    return [Keyframe(times[i], values[i]) for i in range(len(times))]


def sample_step(times: np.ndarray, values: np.ndarray,
                epsilon: float = STEP_EPSILON) -> List[Keyframe]:
    """
    Convert a STEP channel.

    Every sample but the last is followed by a key holding the same value
    at the next sample's time minus epsilon, so n samples give 2n - 1 keys.

    Args:
        times: Sample timestamps, shape (n,)
        values: Sample values, shape (n, width)
        epsilon: Offset of the hold key before the next sample

    Returns:
        Keyframes
    """
    if len(times) != len(values):
        raise AnimationError(
            f"STEP sampler has {len(times)} timestamps but {len(values)} values"
        )

    keyframes = []
    count = len(times)
    for i in range(count):
        keyframes.append(Keyframe(times[i], values[i]))
        if i < count - 1:
            keyframes.append(Keyframe(float(times[i + 1]) - epsilon, values[i]))

    return keyframes


def sample_cubic_spline(times: np.ndarray, values: np.ndarray,
                        sampling_rate: float, duration: float) -> List[Keyframe]:
    """
    Resample a CUBICSPLINE channel at a fixed rate.

    Values are stored as (in-tangent, value, out-tangent) triples. Output keys
    are spaced 1 / sampling_rate apart from 0 to duration. Before the first
    and after the last sample the boundary value is held.

    Args:
        times: Sample timestamps, shape (n,)
        values: Tangent/value triples, shape (3n, width)
        sampling_rate: Output keys per second
        duration: Channel duration in seconds

    Returns:
        floor(duration * sampling_rate) + 1 keyframes
    """
    if len(values) % 3 != 0:
        raise AnimationError(
            f"CUBICSPLINE sampler output count {len(values)} is not a multiple of 3"
        )

    count = len(values) // 3
    if count != len(times):
        raise AnimationError(
            f"CUBICSPLINE sampler has {len(times)} timestamps but {count} value triples"
        )
    if count == 0:
        return []

    num_keys = int(math.floor(duration * sampling_rate)) + 1
    keyframes = []
    current = 0

    for i in range(num_keys):
        time = i / sampling_rate

        if count == 1:
            keyframes.append(Keyframe(time, values[1]))
            continue

        # Cursor only moves forward and stops at the last segment
        while current < count - 2 and times[current + 1] <= time:
            current += 1

        current_time = float(times[current])
        next_time = float(times[current + 1])
        delta = next_time - current_time

        u = (time - current_time) / delta if delta > 0.0 else 0.0
        u = min(max(u, 0.0), 1.0)

        p0 = values[current * 3 + 1]
        m0 = values[current * 3 + 2] * delta
        p1 = values[(current + 1) * 3 + 1]
        m1 = values[(current + 1) * 3] * delta

        keyframes.append(Keyframe(time, sample_hermite_spline(u, p0, m0, p1, m1)))

    return keyframes
