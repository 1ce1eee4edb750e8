"""
Skeleton building module.
"""

from .builder import SkeletonBuilder, create_node_transform
from .joint import Joint, RawSkeleton, Transform
from .naming import JointNameRegistry

__all__ = ['SkeletonBuilder', 'create_node_transform', 'Joint', 'RawSkeleton',
           'Transform', 'JointNameRegistry']
