"""
Joint and raw skeleton classes.
"""

import logging
import numpy as np
from typing import List, Dict, Any, Iterator, Optional
from dataclasses import dataclass, field

from ..common import IDENTITY_TRANSLATION, IDENTITY_ROTATION, IDENTITY_SCALE, MAX_JOINTS
from ..exceptions import SkeletonValidationError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Transform:
    """
    Local TRS transform of a joint.

    Rotation is an XYZW quaternion, as stored by glTF.
    """
    translation: np.ndarray = field(default_factory=lambda: np.array(IDENTITY_TRANSLATION, dtype=np.float32))
    rotation: np.ndarray = field(default_factory=lambda: np.array(IDENTITY_ROTATION, dtype=np.float32))
    scale: np.ndarray = field(default_factory=lambda: np.array(IDENTITY_SCALE, dtype=np.float32))

    def __post_init__(self):
        """Ensure arrays are float32 numpy arrays."""
        self.translation = np.array(self.translation, dtype=np.float32)
        self.rotation = np.array(self.rotation, dtype=np.float32)
        self.scale = np.array(self.scale, dtype=np.float32)

    @classmethod
    def identity(cls) -> 'Transform':
        return cls()


@dataclass(eq=False)
class Joint:
    """
    A single joint of the output skeleton.

    Each joint is owned by its parent, or by the skeleton's root list.
    """
    name: str
    transform: Transform = field(default_factory=Transform)
    children: List['Joint'] = field(default_factory=list)

    def add_child(self, child: 'Joint'):
        """Append a child joint."""
        self.children.append(child)


class RawSkeleton:
    """
    Rooted joint hierarchy.

    Joint indices follow a depth-first pre-order walk of the roots, in
    order; animation tracks are aligned with this order.
    """

    def __init__(self, roots: Optional[List[Joint]] = None):
        """Initialize skeleton from its root joints."""
        self.roots: List[Joint] = list(roots or [])

    def iter_joints(self) -> Iterator[Joint]:
        """Iterate joints in depth-first pre-order."""
        stack = list(reversed(self.roots))
        while stack:
            joint = stack.pop()
            yield joint
            stack.extend(reversed(joint.children))

    @property
    def num_joints(self) -> int:
        return sum(1 for _ in self.iter_joints())

    def joint_names(self) -> List[str]:
        """Names of all joints, in joint order."""
        return [joint.name for joint in self.iter_joints()]

    def find_joint(self, name: str) -> Optional[Joint]:
        """Get joint by name."""
        for joint in self.iter_joints():
            if joint.name == name:
                return joint
        return None

    def validate(self):
        """
        Check the skeleton invariants.

        Raises:
            SkeletonValidationError: If the hierarchy has a cycle, shares a
                joint between parents, has empty or duplicate names, or
                exceeds the joint limit.
        """
        seen_joints = set()
        seen_names = set()
        count = 0

        stack = list(self.roots)
        while stack:
            joint = stack.pop()
            if id(joint) in seen_joints:
                raise SkeletonValidationError(
                    f"Joint '{joint.name}' is reachable more than once (cycle or shared joint)"
                )
            seen_joints.add(id(joint))

            if not joint.name:
                raise SkeletonValidationError("Joint with an empty name")
            if joint.name in seen_names:
                raise SkeletonValidationError(f"Duplicate joint name '{joint.name}'")
            seen_names.add(joint.name)

            count += 1
            if count > MAX_JOINTS:
                raise SkeletonValidationError(
                    f"Skeleton has more than {MAX_JOINTS} joints"
                )

            stack.extend(joint.children)

    def log_hierarchy(self, level: int = logging.INFO):
        """Log the hierarchy, two spaces of indentation per level."""
        stack = [(root, 0) for root in reversed(self.roots)]
        while stack:
            joint, indent = stack.pop()
            logger.log(level, ' ' * indent + joint.name)
            stack.extend((child, indent + 2) for child in reversed(joint.children))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a flat dictionary representation.

        Joints are stored in joint order; the hierarchy is given by the
        index of each joint's parent, -1 for roots.
        """
        names = []
        parents = []
        transforms = []

        stack = [(root, -1) for root in reversed(self.roots)]
        while stack:
            joint, parent_idx = stack.pop()
            joint_idx = len(names)
            names.append(joint.name)
            parents.append(parent_idx)
            transforms.append(joint.transform)
            stack.extend((child, joint_idx) for child in reversed(joint.children))

        return {
            'joint_names': names,
            'parents': np.array(parents, dtype=np.int32),
            'translations': np.array([t.translation for t in transforms], dtype=np.float32).reshape(-1, 3),
            'rotations': np.array([t.rotation for t in transforms], dtype=np.float32).reshape(-1, 4),
            'scales': np.array([t.scale for t in transforms], dtype=np.float32).reshape(-1, 3),
        }
