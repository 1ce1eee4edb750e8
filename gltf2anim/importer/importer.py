"""
glTF conversion interface.

GltfImporter exposes a closed set of operations. glTF has no notion of
user-defined tracks, so the track operations are reported as unsupported
rather than silently producing nothing.
"""

import logging
from enum import Enum
from typing import List, Optional

from pygltflib import GLTF2

from .animation import AnimationResampler, RawAnimation
from .glb import GLBParser
from .skeleton import JointNameRegistry, RawSkeleton, SkeletonBuilder
from .exceptions import AnimationError, ImporterError, UnsupportedOperationError

logger = logging.getLogger(__name__)


class Operation(Enum):
    """Operations of the conversion interface."""
    LOAD = 'load'
    IMPORT_SKELETON = 'import_skeleton'
    ANIMATION_NAMES = 'animation_names'
    IMPORT_ANIMATION = 'import_animation'
    NODE_PROPERTIES = 'node_properties'
    IMPORT_TRACK = 'import_track'


class GltfImporter:
    """Import skeletons and animations from glTF files."""

    capabilities = frozenset({
        Operation.LOAD,
        Operation.IMPORT_SKELETON,
        Operation.ANIMATION_NAMES,
        Operation.IMPORT_ANIMATION,
        Operation.NODE_PROPERTIES,
    })

    def __init__(self):
        self.parser: Optional[GLBParser] = None
        self.registry = JointNameRegistry()
        self._resampler: Optional[AnimationResampler] = None

    @classmethod
    def from_gltf(cls, gltf: GLTF2) -> 'GltfImporter':
        """Create an importer over an already loaded GLTF2 object."""
        importer = cls()
        importer._attach(GLBParser.from_gltf(gltf))
        return importer

    def supports(self, operation: Operation) -> bool:
        return operation in self.capabilities

    def load(self, file_path: str) -> 'GltfImporter':
        """
        Load a .glb or .gltf file.

        Args:
            file_path: Input path

        Returns:
            The importer itself

        Raises:
            GLBParseError: If the file cannot be loaded
        """
        self._attach(GLBParser(file_path))
        return self

    def _attach(self, parser: GLBParser):
        self.parser = parser
        self.registry = JointNameRegistry()
        self._resampler = AnimationResampler(parser, self.registry)

    def _require_loaded(self) -> GLBParser:
        if self.parser is None:
            raise ImporterError("No glTF file loaded")
        return self.parser

    def import_skeleton(self) -> RawSkeleton:
        """
        Build the skeleton of the active scene.

        Returns:
            Validated raw skeleton
        """
        parser = self._require_loaded()
        return SkeletonBuilder(parser, self.registry).build()

    def animation_names(self) -> List[str]:
        """
        Names of the animations that can be imported.

        Unnamed animations cannot be requested and are skipped.

        Returns:
            Animation names in declaration order
        """
        parser = self._require_loaded()
        names = []

        for anim_idx, animation in enumerate(parser.gltf.animations):
            if not animation.name:
                logger.warning(
                    f"Found an animation without a name (#{anim_idx}). All animations must have "
                    "valid and unique names. The animation will be skipped"
                )
                continue

            if animation.name in names:
                logger.warning(
                    f"Animation name '{animation.name}' is used more than once, "
                    "only the first one can be imported"
                )
                continue

            names.append(animation.name)

        return names

    def import_animation(self, animation_name: str, skeleton: RawSkeleton,
                         sampling_rate: float = 0.0) -> RawAnimation:
        """
        Import one animation against a skeleton built by this importer.

        Args:
            animation_name: Animation name
            skeleton: Skeleton returned by import_skeleton
            sampling_rate: Rate used for CUBICSPLINE channels, 0 for automatic

        Returns:
            Validated raw animation
        """
        self._require_loaded()
        if len(self.registry) == 0 and skeleton.num_joints > 0:
            raise AnimationError("The skeleton must be imported before its animations")
        return self._resampler.resample(animation_name, skeleton, sampling_rate)

    def node_properties(self, joint_name: str) -> List[str]:
        """User-defined node properties; glTF has none."""
        return []

    def import_track(self, animation_name: str, joint_name: str, property_name: str,
                     sampling_rate: float = 0.0):
        """
        Import a user-defined track.

        Raises:
            UnsupportedOperationError: Always, glTF has no user-defined tracks
        """
        raise UnsupportedOperationError(
            f"User-defined track '{property_name}' on joint '{joint_name}' of animation "
            f"'{animation_name}' cannot be imported from glTF"
        )
