#!/usr/bin/env python3
"""
Example: Import a skeleton and its animations from a GLB file.
"""

import logging

import gltf2anim
from gltf2anim.importer import GltfImporter

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

importer = GltfImporter().load("animations/mixamo_idle.glb")
skeleton = importer.import_skeleton()
skeleton.log_hierarchy(logging.INFO)

for name in importer.animation_names():
    animation = importer.import_animation(name, skeleton, sampling_rate=30.0)
    print(f"{animation.name}: {animation.num_tracks} tracks, {animation.duration:.2f}s")

# Same import in one call, with an NPY dump of the result
result = gltf2anim.convert(
    "animations/mixamo_idle.glb",
    output_path="output/mixamo_idle.npy",
    sampling_rate=30.0,
)
print(f"\n✅ Imported {result['skeleton'].num_joints} joints")
