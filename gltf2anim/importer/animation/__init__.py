"""
Animation resampling module.
"""

from .resampler import AnimationResampler
from .samplers import sample_linear, sample_step, sample_cubic_spline
from .track import Keyframe, JointTrack, RawAnimation

__all__ = ['AnimationResampler', 'sample_linear', 'sample_step', 'sample_cubic_spline',
           'Keyframe', 'JointTrack', 'RawAnimation']
