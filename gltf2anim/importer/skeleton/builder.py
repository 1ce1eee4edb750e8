"""
Skeleton builder for glTF files.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from pygltflib import Node, Skin

from .joint import Joint, RawSkeleton, Transform
from .naming import JointNameRegistry
from ..common import as_vector, IDENTITY_TRANSLATION, IDENTITY_ROTATION, IDENTITY_SCALE, MAX_JOINTS
from ..glb import GLBParser
from ..exceptions import SkeletonError, SkeletonValidationError

logger = logging.getLogger(__name__)


def create_node_transform(node: Node, node_idx: Optional[int] = None) -> Transform:
    """
    Create the bind transform of a joint node.

    Nodes targeted by animation may only use TRS properties, so a node
    carrying a matrix cannot become a joint.

    Args:
        node: glTF node
        node_idx: Node index, used in error messages

    Returns:
        Transform with identity defaults for missing fields

    Raises:
        SkeletonError: If the node has a transformation matrix
    """
    if node.matrix:
        raise SkeletonError(
            f"Node '{node.name}' (#{node_idx}) transformation matrix is not empty. "
            "This is disallowed by glTF as this node is an animation target"
        )

    return Transform(
        translation=as_vector(node.translation, IDENTITY_TRANSLATION),
        rotation=as_vector(node.rotation, IDENTITY_ROTATION),
        scale=as_vector(node.scale, IDENTITY_SCALE),
    )


class SkeletonBuilder:
    """
    Builds the output skeleton from the skins of the active scene.
    """

    def __init__(self, parser: GLBParser, registry: Optional[JointNameRegistry] = None):
        """
        Initialize skeleton builder.

        Args:
            parser: glTF parser instance
            registry: Name registry to fill, shared with the animation resampler
        """
        self.parser = parser
        self.registry = registry if registry is not None else JointNameRegistry()

    def build(self) -> RawSkeleton:
        """
        Build the skeleton.

        Returns:
            Validated raw skeleton

        Raises:
            SkeletonError: If the scene graph cannot be turned into a skeleton
            SkeletonValidationError: If the result breaks skeleton invariants
        """
        gltf = self.parser.gltf

        if not gltf.scenes:
            raise SkeletonError("No scenes found")

        if not gltf.skins:
            raise SkeletonError("No skins found")

        scene_idx = self.parser.active_scene_index
        if scene_idx >= len(gltf.scenes):
            raise SkeletonError(f"Default scene #{scene_idx} does not exist")

        scene = self.parser.get_scene(scene_idx)
        logger.info(f"Importing from scene #{scene_idx} ({scene.name or ''})")

        if not scene.nodes:
            raise SkeletonError("Scene has no nodes")

        skins = self.parser.get_skins_for_scene(scene)
        if not skins:
            raise SkeletonError("No skins exist in the scene")

        root_indices = self.find_root_joints(skins)

        # Names are unique per build
        self.registry.clear()
        visited: Set[int] = set()

        try:
            roots = [self._import_joint(root_idx, visited) for root_idx in root_indices]
            skeleton = RawSkeleton(roots)
            skeleton.validate()
        except SkeletonValidationError as e:
            self.registry.clear()
            logger.error(f"Output skeleton failed validation, this is likely a bug: {e}")
            raise
        except Exception:
            self.registry.clear()
            raise

        logger.info(f"Built skeleton with {skeleton.num_joints} joints, {len(roots)} root(s)")
        logger.info("Joint hierarchy:")
        skeleton.log_hierarchy()

        return skeleton

    def find_skin_root_joint(self, skin: Skin) -> Optional[int]:
        """
        Find which node is the root of a skin's joint hierarchy.

        Args:
            skin: glTF skin

        Returns:
            Root node index, or None if the skin has no joints
        """
        if not skin.joints:
            return None

        parents: Dict[int, int] = {}
        for node_idx in skin.joints:
            for child_idx in self.parser.get_children(node_idx):
                parents.setdefault(child_idx, node_idx)

        root_idx = skin.joints[0]
        seen = {root_idx}
        while root_idx in parents:
            root_idx = parents[root_idx]
            if root_idx in seen:
                raise SkeletonError(f"Skin joints form a cycle through node #{root_idx}")
            seen.add(root_idx)

        return root_idx

    def find_root_joints(self, skins: Iterable[Skin]) -> List[int]:
        """
        Collect the distinct root joints of several skins.

        A root lying inside another root's hierarchy is dropped so that
        every node is imported once.

        Args:
            skins: Skins of the active scene

        Returns:
            Root node indices in ascending order
        """
        roots = set()
        for skin in skins:
            root_idx = self.find_skin_root_joint(skin)
            if root_idx is not None:
                roots.add(root_idx)

        nested = set()
        for root_idx in roots:
            children = self.parser.get_children(root_idx)
            descendants = self.parser.get_reachable_nodes(children)
            for other_idx in roots:
                if other_idx != root_idx and other_idx in descendants:
                    nested.add(other_idx)

        for root_idx in sorted(nested):
            logger.warning(
                f"Skin root node #{root_idx} is part of another skin hierarchy, "
                "importing it only once"
            )

        return sorted(roots - nested)

    def _import_joint(self, root_idx: int, visited: Set[int]) -> Joint:
        """
        Import a node and all of its descendants.

        Nodes are visited depth-first in pre-order with an explicit stack,
        so names are assigned in joint order and deep chains are supported.
        """
        root = None
        open_nodes: List[Tuple[int, Optional[Joint]]] = [(root_idx, None)]

        while open_nodes:
            node_idx, parent = open_nodes.pop()
            if node_idx in visited:
                raise SkeletonError(f"Node #{node_idx} is reached more than once in the joint hierarchy")
            visited.add(node_idx)

            if len(visited) > MAX_JOINTS:
                raise SkeletonError(f"Joint hierarchy has more than {MAX_JOINTS} nodes")

            node = self.parser.get_node(node_idx)
            joint = Joint(
                name=self.registry.assign(node_idx, node.name),
                transform=create_node_transform(node, node_idx),
            )

            if parent is None:
                root = joint
            else:
                parent.add_child(joint)

            # Reversed so the first child is popped first
            for child_idx in reversed(node.children or []):
                open_nodes.append((child_idx, joint))

        return root
