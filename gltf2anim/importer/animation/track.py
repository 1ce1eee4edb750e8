"""
Keyframe, joint track and raw animation classes.
"""

import math
import numpy as np
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from ..common import TARGET_TRANSLATION, TARGET_ROTATION, TARGET_SCALE
from ..exceptions import AnimationValidationError

# Allowed overshoot of key times past the duration, in seconds
TIME_TOLERANCE = 1e-6


@dataclass(eq=False)
class Keyframe:
    """A timestamped value: 3-vector for translation/scale, XYZW quaternion for rotation."""
    time: float
    value: np.ndarray

    def __post_init__(self):
        self.time = float(self.time)
        self.value = np.array(self.value, dtype=np.float32)


@dataclass(eq=False)
class JointTrack:
    """Translation, rotation and scale keyframes of one joint."""
    translations: List[Keyframe] = field(default_factory=list)
    rotations: List[Keyframe] = field(default_factory=list)
    scales: List[Keyframe] = field(default_factory=list)

    def keys_for(self, target_path: str) -> List[Keyframe]:
        """Keyframe list for a channel target path."""
        return {
            TARGET_TRANSLATION: self.translations,
            TARGET_ROTATION: self.rotations,
            TARGET_SCALE: self.scales,
        }[target_path]

    def to_dict(self) -> Dict[str, Any]:
        def pack(keys: List[Keyframe], width: int) -> Dict[str, np.ndarray]:
            return {
                'times': np.array([k.time for k in keys], dtype=np.float32),
                'values': np.array([k.value for k in keys], dtype=np.float32).reshape(len(keys), width),
            }

        return {
            'translations': pack(self.translations, 3),
            'rotations': pack(self.rotations, 4),
            'scales': pack(self.scales, 3),
        }


@dataclass(eq=False)
class RawAnimation:
    """
    Per-joint keyframe tracks of one animation.

    Tracks are index-aligned with the skeleton's joint order.
    """
    name: str = ''
    duration: float = 0.0
    tracks: List[JointTrack] = field(default_factory=list)

    @property
    def num_tracks(self) -> int:
        return len(self.tracks)

    def validate(self, num_joints: Optional[int] = None):
        """
        Check the animation invariants.

        Args:
            num_joints: Joint count of the skeleton the animation targets

        Raises:
            AnimationValidationError: If track count, duration or key times are invalid
        """
        if num_joints is not None and len(self.tracks) != num_joints:
            raise AnimationValidationError(
                f"Animation '{self.name}' has {len(self.tracks)} tracks for {num_joints} joints"
            )

        if not math.isfinite(self.duration) or self.duration < 0.0:
            raise AnimationValidationError(
                f"Animation '{self.name}' has an invalid duration {self.duration}"
            )

        for track_idx, track in enumerate(self.tracks):
            for label, keys in (('translation', track.translations),
                                ('rotation', track.rotations),
                                ('scale', track.scales)):
                if not keys:
                    raise AnimationValidationError(
                        f"Track {track_idx} of animation '{self.name}' has no {label} key"
                    )
                previous_time = -math.inf
                for key in keys:
                    if key.time < 0.0 or key.time > self.duration + TIME_TOLERANCE:
                        raise AnimationValidationError(
                            f"Track {track_idx} {label} key at {key.time}s is outside "
                            f"[0, {self.duration}]"
                        )
                    if key.time < previous_time:
                        raise AnimationValidationError(
                            f"Track {track_idx} {label} keys are not sorted by time"
                        )
                    if not np.all(np.isfinite(key.value)):
                        raise AnimationValidationError(
                            f"Track {track_idx} {label} key at {key.time}s has a non-finite value"
                        )
                    previous_time = key.time

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'duration': self.duration,
            'tracks': [track.to_dict() for track in self.tracks],
        }
