"""
glTF to Skeletal Animation Conversion

This module provides the main interface for converting a glTF asset into a
raw skeleton and its raw animations.
"""

import argparse
import logging
from pathlib import Path
import numpy as np
from typing import Dict, Any, Iterable, Optional

from gltf2anim.importer import GltfImporter, ImporterError, ValidationError

logger = logging.getLogger(__name__)


def convert(
    input_path: str,
    output_path: Optional[str] = None,
    animations: Optional[Iterable[str]] = None,
    sampling_rate: float = 0.0
) -> Dict[str, Any]:
    """
    Convert a glTF file to a skeleton and its animations.

    Args:
        input_path: Path to .glb/.gltf file
        output_path: Optional path for an NPY dump of the result
        animations: Names of animations to import (default: all named animations)
        sampling_rate: Rate for spline resampling in Hz, 0 for automatic

    Returns:
        Dictionary with 'skeleton' (RawSkeleton) and 'animations' (list of RawAnimation)
    """
    logger.info(f"Converting glTF to skeletal animation")
    logger.info(f"  Input: {input_path}")

    importer = GltfImporter().load(input_path)
    skeleton = importer.import_skeleton()

    names = list(animations) if animations is not None else importer.animation_names()
    raw_animations = [
        importer.import_animation(name, skeleton, sampling_rate) for name in names
    ]

    if output_path:
        payload = {
            'skeleton': skeleton.to_dict(),
            'animations': [animation.to_dict() for animation in raw_animations],
        }
        np.save(output_path, payload, allow_pickle=True)
        logger.info(f"  Output: {output_path}")

    logger.info(f"✅ Conversion complete:")
    logger.info(f"   Joints: {skeleton.num_joints}")
    logger.info(f"   Animations: {len(raw_animations)}")

    return {'skeleton': skeleton, 'animations': raw_animations}


def main(argv=None):
    """Command-line interface for glTF conversion."""
    parser = argparse.ArgumentParser(
        description="Convert glTF skeletons and animations to raw skeletal animation data"
    )
    parser.add_argument('input', help='Input .glb or .gltf file')
    parser.add_argument('-o', '--output', help='Output NPY file')
    parser.add_argument('-a', '--animation', action='append', dest='animations',
                        help='Animation to import (repeatable, default: all)')
    parser.add_argument('--sampling-rate', type=float, default=0.0,
                        help='Spline sampling rate in Hz (0: automatic)')

    # Logging
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    args = parser.parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )

    if args.output and not Path(args.output).parent.exists():
        logger.error(f"Output directory does not exist: {Path(args.output).parent}")
        return 1

    try:
        convert(args.input, args.output, args.animations, args.sampling_rate)
    except ValidationError as e:
        logger.error(f"Internal error, output failed validation: {e}")
        return 1
    except ImporterError as e:
        logger.error(f"Conversion failed: {e}")
        return 1

    return 0


if __name__ == '__main__':
    exit(main())
