"""
Unit tests for the importer interface and the conversion entry points.
"""

import unittest
import tempfile
import shutil
from pathlib import Path
import numpy as np

from gltf2anim import convert
from gltf2anim.convert import main
from gltf2anim.importer import GltfImporter, Operation
from gltf2anim.importer.exceptions import (
    AnimationError,
    GLBParseError,
    ImporterError,
    UnsupportedOperationError,
)

from asset_factory import build_character


def character_with_walk(factory=None):
    factory = build_character(factory)
    factory.add_animation('walk', [
        {'node': 1, 'path': 'translation', 'times': [0.0, 0.5, 1.0],
         'values': [[0.0, 1.0, 0.0], [0.0, 1.1, 0.2], [0.0, 1.0, 0.4]]},
        {'node': 4, 'path': 'scale', 'times': [0.0, 1.0],
         'values': [[2.0, 2.0, 2.0], [1.0, 1.0, 1.0]], 'interpolation': 'STEP'},
    ])
    return factory


class TestGltfImporter(unittest.TestCase):
    """Test the importer interface."""

    def test_capabilities(self):
        importer = GltfImporter()

        self.assertTrue(importer.supports(Operation.IMPORT_SKELETON))
        self.assertTrue(importer.supports(Operation.IMPORT_ANIMATION))
        self.assertFalse(importer.supports(Operation.IMPORT_TRACK))

    def test_requires_loaded_file(self):
        importer = GltfImporter()

        with self.assertRaises(ImporterError):
            importer.import_skeleton()
        with self.assertRaises(ImporterError):
            importer.animation_names()

    def test_animation_names(self):
        factory = character_with_walk()
        factory.add_animation(None, [])
        factory.add_animation('run', [])
        factory.add_animation('walk', [])
        importer = GltfImporter.from_gltf(factory.build())

        with self.assertLogs('gltf2anim.importer.importer', level='WARNING') as logs:
            names = importer.animation_names()

        self.assertEqual(names, ['walk', 'run'])
        self.assertEqual(len(logs.output), 2)

    def test_duplicate_name_imports_first_animation(self):
        factory = character_with_walk()
        factory.add_animation('walk', [
            {'node': 1, 'path': 'translation', 'times': [0.0, 9.0],
             'values': [[0.0, 0.0, 0.0]] * 2},
        ])
        importer = GltfImporter.from_gltf(factory.build())
        skeleton = importer.import_skeleton()

        animation = importer.import_animation('walk', skeleton, 30.0)

        self.assertEqual(animation.duration, 1.0)

    def test_user_defined_tracks_are_unsupported(self):
        importer = GltfImporter.from_gltf(character_with_walk().build())
        importer.import_skeleton()

        self.assertEqual(importer.node_properties('hips'), [])
        with self.assertRaises(UnsupportedOperationError):
            importer.import_track('walk', 'hips', 'custom', 30.0)

    def test_animation_before_skeleton(self):
        factory = character_with_walk()
        skeleton = GltfImporter.from_gltf(factory.build()).import_skeleton()
        importer = GltfImporter.from_gltf(factory.gltf)

        with self.assertRaises(AnimationError):
            importer.import_animation('walk', skeleton)


class TestFileLoading(unittest.TestCase):
    """Test loading assets from disk."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write_json(self, file_name: str) -> Path:
        gltf = character_with_walk().build(data_uri=True)
        path = self.temp_dir / file_name
        path.write_text(gltf.gltf_to_json())
        return path

    def test_load_gltf(self):
        path = self.write_json('character.gltf')

        importer = GltfImporter().load(str(path))
        skeleton = importer.import_skeleton()
        animation = importer.import_animation('walk', skeleton, 30.0)

        self.assertEqual(skeleton.joint_names(), ['hips', 'spine', 'head', 'gltf_node_3'])
        self.assertEqual(len(animation.tracks[0].translations), 3)
        self.assertEqual(len(animation.tracks[2].scales), 3)

    def test_load_glb(self):
        gltf = character_with_walk().build()
        path = self.temp_dir / 'character.glb'
        gltf.save_binary(str(path))

        importer = GltfImporter().load(str(path))
        skeleton = importer.import_skeleton()
        animation = importer.import_animation('walk', skeleton, 30.0)

        self.assertEqual(skeleton.num_joints, 4)
        self.assertEqual(animation.duration, 1.0)
        np.testing.assert_allclose(animation.tracks[0].translations[1].value, [0.0, 1.1, 0.2], rtol=1e-6)

    def test_unknown_extension_is_read_as_json(self):
        path = self.write_json('character.json')

        with self.assertLogs('gltf2anim.importer.glb.parser', level='WARNING'):
            importer = GltfImporter().load(str(path))

        self.assertEqual(importer.import_skeleton().num_joints, 4)

    def test_missing_file(self):
        with self.assertRaises(GLBParseError):
            GltfImporter().load(str(self.temp_dir / 'missing.glb'))

    def test_convert(self):
        path = self.write_json('character.gltf')
        output = self.temp_dir / 'character.npy'

        result = convert(str(path), str(output), sampling_rate=30.0)

        self.assertEqual(result['skeleton'].num_joints, 4)
        self.assertEqual([a.name for a in result['animations']], ['walk'])

        payload = np.load(output, allow_pickle=True).item()
        self.assertEqual(payload['skeleton']['joint_names'], ['hips', 'spine', 'head', 'gltf_node_3'])
        self.assertEqual(payload['animations'][0]['name'], 'walk')
        self.assertEqual(len(payload['animations'][0]['tracks']), 4)

    def test_main(self):
        path = self.write_json('character.gltf')
        output = self.temp_dir / 'out.npy'

        self.assertEqual(main([str(path), '-o', str(output), '-a', 'walk']), 0)
        self.assertTrue(output.exists())

    def test_main_failures(self):
        path = self.write_json('character.gltf')

        self.assertEqual(main([str(self.temp_dir / 'missing.glb')]), 1)
        self.assertEqual(main([str(path), '-a', 'missing']), 1)
        self.assertEqual(main([str(path), '-o', str(self.temp_dir / 'nope' / 'out.npy')]), 1)


if __name__ == '__main__':
    unittest.main(verbosity=2)
