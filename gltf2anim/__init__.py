"""
GLTF2ANIM
=========

glTF skeleton and animation import into raw skeletal animation data.
"""

__version__ = "1.0.0"

# Public API
from .importer import GltfImporter, RawSkeleton, RawAnimation
from .convert import convert

__all__ = ["GltfImporter", "RawSkeleton", "RawAnimation", "convert"]
