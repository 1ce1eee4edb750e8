"""
Unique joint naming.
"""

import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class JointNameRegistry:
    """
    Assigns unique, non-empty joint names to glTF nodes.

    The registry belongs to one skeleton build; it remembers which node got
    which name so animation channels can later be matched to joints.
    """

    def __init__(self):
        self._names_by_node: Dict[int, str] = {}
        self._nodes_by_name: Dict[str, int] = {}

    def assign(self, node_idx: int, node_name: Optional[str]) -> str:
        """
        Assign a name to a node.

        Empty names become 'gltf_node_<index>'; a name already taken by
        another node gets '_<index>' appended.

        Args:
            node_idx: Node index
            node_name: Name stored on the node, may be None or empty

        Returns:
            Assigned joint name
        """
        if node_idx in self._names_by_node:
            return self._names_by_node[node_idx]

        name = node_name or ''
        if not name:
            name = f"gltf_node_{node_idx}"
            logger.warning(f"Joint at node #{node_idx} has no name, setting name to '{name}'")

        while name in self._nodes_by_name:
            other_idx = self._nodes_by_name[name]
            renamed = f"{name}_{node_idx}"
            logger.warning(
                f"Joint at node #{node_idx} has the same name as node #{other_idx} ('{name}'), "
                f"renaming it to '{renamed}'"
            )
            name = renamed

        self._names_by_node[node_idx] = name
        self._nodes_by_name[name] = node_idx
        return name

    def clear(self):
        """Forget all assigned names."""
        self._names_by_node.clear()
        self._nodes_by_name.clear()

    def name_of(self, node_idx: int) -> Optional[str]:
        """Assigned name of a node, or None if the node is not a joint."""
        return self._names_by_node.get(node_idx)

    def node_of(self, name: str) -> Optional[int]:
        """Node index behind an assigned joint name."""
        return self._nodes_by_name.get(name)

    def __contains__(self, node_idx: int) -> bool:
        return node_idx in self._names_by_node

    def __len__(self) -> int:
        return len(self._names_by_node)
