"""
Unit tests for accessor reading.
"""

import unittest
import numpy as np

from pygltflib import GLTF2, Accessor, Buffer, BufferView, Sparse

from gltf2anim.importer import AccessorReader
from gltf2anim.importer.exceptions import AccessorLayoutError, GLBParseError

from asset_factory import AssetFactory

FLOAT = 5126
UNSIGNED_INT = 5125


def make_gltf(blob: bytes, views, accessors) -> GLTF2:
    gltf = GLTF2()
    gltf.buffers = [Buffer(byteLength=len(blob))]
    gltf.bufferViews = list(views)
    gltf.accessors = list(accessors)
    gltf.set_binary_blob(blob)
    return gltf


class TestAccessorReader(unittest.TestCase):
    """Test typed reads over buffer views."""

    def test_tightly_packed(self):
        factory = AssetFactory()
        factory.add_accessor([[1, 2, 3], [4, 5, 6]], 'VEC3')
        reader = AccessorReader(factory.build())

        data = reader.read_typed(0, 'VEC3')

        self.assertEqual(data.shape, (2, 3))
        self.assertEqual(data.dtype, np.float32)
        np.testing.assert_array_equal(data, [[1, 2, 3], [4, 5, 6]])

    def test_scalars_are_flat(self):
        factory = AssetFactory()
        factory.add_accessor([0.0, 0.5, 1.0], 'SCALAR')
        reader = AccessorReader(factory.build())

        data = reader.read_typed(0, 'SCALAR')

        self.assertEqual(data.shape, (3,))
        np.testing.assert_array_equal(data, [0.0, 0.5, 1.0])

    def test_strided_view(self):
        """Interleaved data is read with the view's byte stride."""
        interleaved = np.array([
            [1, 2, 3, -1],
            [4, 5, 6, -1],
            [7, 8, 9, -1],
        ], dtype='<f4')
        blob = interleaved.tobytes()
        gltf = make_gltf(
            blob,
            [BufferView(buffer=0, byteOffset=0, byteLength=len(blob), byteStride=16)],
            [Accessor(bufferView=0, componentType=FLOAT, count=3, type='VEC3')],
        )

        data = AccessorReader(gltf).read_typed(0, 'VEC3')

        np.testing.assert_array_equal(data, interleaved[:, :3])

    def test_view_and_accessor_offsets(self):
        values = np.arange(8, dtype='<f4')
        blob = values.tobytes()
        gltf = make_gltf(
            blob,
            [BufferView(buffer=0, byteOffset=8, byteLength=24)],
            [Accessor(bufferView=0, byteOffset=4, componentType=FLOAT, count=4, type='SCALAR')],
        )

        data = AccessorReader(gltf).read_typed(0, 'SCALAR')

        np.testing.assert_array_equal(data, [3, 4, 5, 6])

    def test_data_is_read_only(self):
        factory = AssetFactory()
        factory.add_accessor([1.0, 2.0], 'SCALAR')
        data = AccessorReader(factory.build()).read_typed(0, 'SCALAR')

        self.assertFalse(data.flags.writeable)
        with self.assertRaises(ValueError):
            data[0] = 5.0

    def test_data_uri_buffer(self):
        factory = AssetFactory()
        factory.add_accessor([[0, 0, 0, 1]], 'VEC4')
        reader = AccessorReader(factory.build(data_uri=True))

        data = reader.read_typed(0, 'VEC4')

        np.testing.assert_array_equal(data, [[0, 0, 0, 1]])

    def test_missing_buffer_view_reads_zeros(self):
        gltf = make_gltf(b'', [], [Accessor(componentType=FLOAT, count=2, type='VEC3')])

        data = AccessorReader(gltf).read_typed(0, 'VEC3')

        np.testing.assert_array_equal(data, np.zeros((2, 3)))
        self.assertFalse(data.flags.writeable)

    def test_element_size_mismatch(self):
        factory = AssetFactory()
        factory.add_accessor([[1, 2, 3]], 'VEC3')
        reader = AccessorReader(factory.build())

        with self.assertRaises(AccessorLayoutError) as ctx:
            reader.read_typed(0, 'VEC4')
        self.assertIn('Expected element size 16 got 12', str(ctx.exception))

    def test_component_type_mismatch(self):
        blob = np.arange(2, dtype='<u4').tobytes()
        gltf = make_gltf(
            blob,
            [BufferView(buffer=0, byteLength=len(blob))],
            [Accessor(bufferView=0, componentType=UNSIGNED_INT, count=2, type='SCALAR')],
        )

        with self.assertRaises(AccessorLayoutError):
            AccessorReader(gltf).read_typed(0, 'SCALAR')

    def test_accessor_past_view_end(self):
        blob = np.zeros(6, dtype='<f4').tobytes()
        gltf = make_gltf(
            blob,
            [BufferView(buffer=0, byteLength=len(blob))],
            [Accessor(bufferView=0, componentType=FLOAT, count=3, type='VEC3')],
        )

        with self.assertRaises(AccessorLayoutError):
            AccessorReader(gltf).read_typed(0, 'VEC3')

    def test_view_past_buffer_end(self):
        blob = np.zeros(3, dtype='<f4').tobytes()
        gltf = make_gltf(
            blob,
            [BufferView(buffer=0, byteLength=24)],
            [Accessor(bufferView=0, componentType=FLOAT, count=2, type='VEC3')],
        )

        with self.assertRaises(AccessorLayoutError):
            AccessorReader(gltf).read_typed(0, 'VEC3')

    def test_stride_smaller_than_element(self):
        blob = np.zeros(6, dtype='<f4').tobytes()
        gltf = make_gltf(
            blob,
            [BufferView(buffer=0, byteLength=len(blob), byteStride=8)],
            [Accessor(bufferView=0, componentType=FLOAT, count=2, type='VEC3')],
        )

        with self.assertRaises(AccessorLayoutError):
            AccessorReader(gltf).read_typed(0, 'VEC3')

    def test_sparse_accessor(self):
        factory = AssetFactory()
        factory.add_accessor([1.0], 'SCALAR')
        gltf = factory.build()
        gltf.accessors[0].sparse = Sparse(count=1)

        with self.assertRaises(AccessorLayoutError):
            AccessorReader(gltf).read_typed(0, 'SCALAR')

    def test_invalid_index(self):
        reader = AccessorReader(AssetFactory().build())

        with self.assertRaises(GLBParseError):
            reader.read_typed(0, 'SCALAR')
        with self.assertRaises(GLBParseError):
            reader.read_typed(None, 'SCALAR')


if __name__ == '__main__':
    unittest.main(verbosity=2)
