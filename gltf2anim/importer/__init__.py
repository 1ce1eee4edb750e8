"""
glTF importer: skeleton building and animation resampling.
"""

from .importer import GltfImporter, Operation
from .glb import GLBParser, AccessorReader
from .skeleton import SkeletonBuilder, Joint, RawSkeleton, Transform
from .animation import AnimationResampler, Keyframe, JointTrack, RawAnimation
from .exceptions import (
    ImporterError,
    GLBParseError,
    AccessorLayoutError,
    SkeletonError,
    AnimationError,
    AnimationNotFoundError,
    ValidationError,
    SkeletonValidationError,
    AnimationValidationError,
    UnsupportedOperationError,
)

__all__ = [
    'GltfImporter', 'Operation',
    'GLBParser', 'AccessorReader',
    'SkeletonBuilder', 'Joint', 'RawSkeleton', 'Transform',
    'AnimationResampler', 'Keyframe', 'JointTrack', 'RawAnimation',
    'ImporterError', 'GLBParseError', 'AccessorLayoutError', 'SkeletonError',
    'AnimationError', 'AnimationNotFoundError', 'ValidationError',
    'SkeletonValidationError', 'AnimationValidationError', 'UnsupportedOperationError',
]
