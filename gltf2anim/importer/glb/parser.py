"""
Main glTF/GLB parser.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, List, Set
from pygltflib import GLTF2, Animation, Node, Scene, Skin

from .accessor import AccessorReader
from ..exceptions import GLBParseError

logger = logging.getLogger(__name__)


class GLBParser:
    """
    Parser for GLB/GLTF files.

    This class handles loading glTF files and provides read-only access
    to the scene graph: scenes, nodes, skins and animations.
    """

    def __init__(self, file_path: str):
        """
        Initialize glTF parser.

        Binary or JSON loading is chosen from the file extension.

        Args:
            file_path: Path to a .glb or .gltf file

        Raises:
            GLBParseError: If file cannot be loaded
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise GLBParseError(f"File not found: {file_path}")

        logger.info(f"Loading glTF file: {self.file_path}")

        ext = self.file_path.suffix.lower()
        try:
            if ext == '.glb':
                gltf = GLTF2.load_binary(str(self.file_path))
            else:
                if ext != '.gltf':
                    logger.warning(
                        f"Unknown file extension '{ext}', assuming a JSON-formatted glTF"
                    )
                gltf = GLTF2.load_json(str(self.file_path))
        except Exception as e:
            raise GLBParseError(f"Failed to load glTF file: {e}")

        if gltf is None:
            raise GLBParseError(f"No glTF content found in {self.file_path}")

        self._attach(gltf)
        logger.info("glTF parsed successfully")

    @classmethod
    def from_gltf(cls, gltf: GLTF2) -> 'GLBParser':
        """
        Wrap an already loaded GLTF2 object.

        Args:
            gltf: GLTF2 object, for example built in memory

        Returns:
            Parser instance
        """
        parser = cls.__new__(cls)
        parser.file_path = None
        parser._attach(gltf)
        return parser

    def _attach(self, gltf: GLTF2):
        self.gltf = gltf
        self.accessor_reader = AccessorReader(self.gltf)

        # Log basic info
        logger.info(f"  Scenes: {len(self.gltf.scenes)}")
        logger.info(f"  Nodes: {len(self.gltf.nodes)}")
        logger.info(f"  Skins: {len(self.gltf.skins)}")
        logger.info(f"  Animations: {len(self.gltf.animations)}")

    @property
    def active_scene_index(self) -> int:
        """Default scene index, or the first scene when none is set."""
        scene_idx = self.gltf.scene
        if scene_idx is None or scene_idx < 0:
            scene_idx = 0
        return scene_idx

    def get_scene(self, scene_idx: Optional[int] = None) -> Scene:
        """
        Get a scene.

        Args:
            scene_idx: Scene index (default: active scene)

        Returns:
            Scene object
        """
        if scene_idx is None:
            scene_idx = self.active_scene_index

        if scene_idx >= len(self.gltf.scenes):
            raise GLBParseError(f"Scene index {scene_idx} out of range")

        return self.gltf.scenes[scene_idx]

    def get_node(self, node_idx: int) -> Node:
        """
        Get a node.

        Args:
            node_idx: Node index

        Returns:
            Node object
        """
        if node_idx is None or node_idx < 0 or node_idx >= len(self.gltf.nodes):
            raise GLBParseError(f"Node index {node_idx} out of range")

        return self.gltf.nodes[node_idx]

    def get_children(self, node_idx: int) -> List[int]:
        """Child indices of a node, in declared order."""
        return list(self.get_node(node_idx).children or [])

    def get_reachable_nodes(self, node_indices: Iterable[int]) -> Set[int]:
        """
        Collect the given nodes and all of their descendants.

        Args:
            node_indices: Start nodes

        Returns:
            Set of node indices
        """
        found = set()
        open_nodes = list(node_indices)

        while open_nodes:
            node_idx = open_nodes.pop()
            if node_idx in found:
                continue
            found.add(node_idx)
            open_nodes.extend(self.get_children(node_idx))

        return found

    def get_skins_for_scene(self, scene: Scene) -> List[Skin]:
        """
        Get all skins belonging to a scene.

        glTF has no explicit skin to scene link; a skin belongs to the scene
        when its first joint is reachable from the scene's root nodes.

        Args:
            scene: Scene object

        Returns:
            List of skins, in declaration order
        """
        found = self.get_reachable_nodes(scene.nodes or [])

        return [
            skin for skin in self.gltf.skins
            if skin.joints and skin.joints[0] in found
        ]

    def get_animation(self, name: str) -> Optional[Animation]:
        """
        Find an animation by name.

        Args:
            name: Animation name

        Returns:
            First animation with this name, or None
        """
        for animation in self.gltf.animations:
            if animation.name == name:
                return animation
        return None
