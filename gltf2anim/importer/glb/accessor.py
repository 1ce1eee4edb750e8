"""
GLB accessor reader for extracting typed views over buffer data.
"""

import numpy as np
from typing import Optional
from pygltflib import GLTF2, Accessor, Buffer
import logging

from ..exceptions import GLBParseError, AccessorLayoutError

logger = logging.getLogger(__name__)

FLOAT = 5126


class AccessorReader:
    """Reads data from glTF accessors."""

    # Component type to numpy dtype mapping (glTF buffers are little-endian)
    COMPONENT_TYPE_MAP = {
        5120: np.dtype('<i1'),  # BYTE
        5121: np.dtype('<u1'),  # UNSIGNED_BYTE
        5122: np.dtype('<i2'),  # SHORT
        5123: np.dtype('<u2'),  # UNSIGNED_SHORT
        5125: np.dtype('<u4'),  # UNSIGNED_INT
        5126: np.dtype('<f4'),  # FLOAT
    }

    # Type to component count mapping
    TYPE_SIZE_MAP = {
        'SCALAR': 1,
        'VEC2': 2,
        'VEC3': 3,
        'VEC4': 4,
        'MAT2': 4,
        'MAT3': 9,
        'MAT4': 16,
    }

    def __init__(self, gltf: GLTF2):
        """
        Initialize accessor reader.

        Args:
            gltf: GLTF2 object
        """
        self.gltf = gltf
        self._buffer_cache = {}

    def element_size(self, accessor: Accessor) -> int:
        """Size in bytes of one accessor element."""
        dtype = self.COMPONENT_TYPE_MAP.get(accessor.componentType)
        if dtype is None:
            raise AccessorLayoutError(f"Unknown component type: {accessor.componentType}")
        elements_per_item = self.TYPE_SIZE_MAP.get(accessor.type)
        if elements_per_item is None:
            raise AccessorLayoutError(f"Unknown accessor type: {accessor.type}")
        return dtype.itemsize * elements_per_item

    def get_accessor(self, accessor_idx: Optional[int]) -> Accessor:
        """Look up an accessor, raising GLBParseError for bad indices."""
        if accessor_idx is None or accessor_idx < 0:
            raise GLBParseError(f"Invalid accessor index: {accessor_idx}")
        if accessor_idx >= len(self.gltf.accessors):
            raise GLBParseError(f"Accessor index {accessor_idx} out of range")
        return self.gltf.accessors[accessor_idx]

    def read_typed(self, accessor_idx: int, accessor_type: str,
                   component_type: int = FLOAT) -> np.ndarray:
        """
        Read an accessor as a read-only typed view.

        The accessor must have exactly the expected element layout; its
        declared element size is compared with the expected one before any
        bytes are reinterpreted.

        Args:
            accessor_idx: Index of accessor
            accessor_type: Expected element type ('SCALAR', 'VEC3', ...)
            component_type: Expected component type (default FLOAT)

        Returns:
            Array of shape (count,) for scalars, (count, n) otherwise

        Raises:
            AccessorLayoutError: If the layout does not match or the data is out of bounds
        """
        accessor = self.get_accessor(accessor_idx)

        expected_dtype = self.COMPONENT_TYPE_MAP[component_type]
        expected_size = expected_dtype.itemsize * self.TYPE_SIZE_MAP[accessor_type]
        actual_size = self.element_size(accessor)
        if actual_size != expected_size:
            raise AccessorLayoutError(
                f"Invalid buffer view access on accessor {accessor_idx}. "
                f"Expected element size {expected_size} got {actual_size} instead"
            )
        if accessor.type != accessor_type or accessor.componentType != component_type:
            raise AccessorLayoutError(
                f"Accessor {accessor_idx} has layout {accessor.type}/{accessor.componentType}, "
                f"expected {accessor_type}/{component_type}"
            )

        return self.read_accessor(accessor_idx)

    def read_accessor(self, accessor_idx: int) -> np.ndarray:
        """
        Read data from accessor.

        Args:
            accessor_idx: Index of accessor

        Returns:
            Read-only numpy array with accessor data

        Raises:
            GLBParseError: If accessor cannot be read
        """
        accessor = self.get_accessor(accessor_idx)

        if accessor.sparse is not None:
            raise AccessorLayoutError(f"Sparse accessor {accessor_idx} is not supported")

        element_size = self.element_size(accessor)
        dtype = self.COMPONENT_TYPE_MAP[accessor.componentType]
        elements_per_item = self.TYPE_SIZE_MAP[accessor.type]

        # Get buffer view
        if accessor.bufferView is None:
            # Zero-initialized
            return self._create_zero_data(accessor)

        if accessor.bufferView >= len(self.gltf.bufferViews):
            raise GLBParseError(f"Buffer view index {accessor.bufferView} out of range")
        buffer_view = self.gltf.bufferViews[accessor.bufferView]
        if buffer_view.buffer >= len(self.gltf.buffers):
            raise GLBParseError(f"Buffer index {buffer_view.buffer} out of range")
        buffer = self.gltf.buffers[buffer_view.buffer]

        # Get buffer data
        buffer_data = self._get_buffer_data(buffer)

        view_offset = buffer_view.byteOffset or 0
        view_length = buffer_view.byteLength
        if view_length is None:
            view_length = len(buffer_data) - view_offset
        if view_offset + view_length > len(buffer_data):
            raise AccessorLayoutError(
                f"Buffer view {accessor.bufferView} exceeds buffer size "
                f"({view_offset + view_length} > {len(buffer_data)})"
            )

        stride = buffer_view.byteStride or element_size
        if stride < element_size:
            raise AccessorLayoutError(
                f"Buffer view {accessor.bufferView} stride {stride} is smaller than element size {element_size}"
            )

        accessor_offset = accessor.byteOffset or 0
        shape = (accessor.count, elements_per_item)
        if accessor.count == 0:
            data = np.zeros(shape, dtype=dtype)
        else:
            span = (accessor.count - 1) * stride + element_size
            if accessor_offset + span > view_length:
                raise AccessorLayoutError(
                    f"Accessor {accessor_idx} reads past the end of buffer view {accessor.bufferView}"
                )
            data = np.ndarray(
                shape=shape,
                dtype=dtype,
                buffer=buffer_data,
                offset=view_offset + accessor_offset,
                strides=(stride, dtype.itemsize),
            )

        if elements_per_item == 1:
            data = data.reshape(accessor.count)
        data.flags.writeable = False

        logger.debug(f"Read accessor {accessor_idx}: shape={data.shape}, dtype={data.dtype}")
        return data

    def _get_buffer_data(self, buffer: Buffer) -> bytes:
        """Get raw buffer data."""
        # Check cache
        buffer_id = id(buffer)
        if buffer_id in self._buffer_cache:
            return self._buffer_cache[buffer_id]

        # Load buffer data
        if buffer.uri is None:
            # Binary chunk (GLB format)
            data = self.gltf.binary_blob()
            if data is None:
                raise GLBParseError("Binary buffer expected but not found")
        else:
            # External reference or data URI
            try:
                data = self.gltf.get_data_from_buffer_uri(buffer.uri)
            except (OSError, ValueError) as e:
                raise GLBParseError(f"Failed to read buffer '{buffer.uri}': {e}")
            if data is None:
                raise GLBParseError(f"Unrecognized buffer uri '{buffer.uri}'")

        data = bytes(data)

        # Cache for future use
        self._buffer_cache[buffer_id] = data
        return data

    def _create_zero_data(self, accessor: Accessor) -> np.ndarray:
        """Create zero-initialized data for accessor."""
        dtype = self.COMPONENT_TYPE_MAP[accessor.componentType]
        elements_per_item = self.TYPE_SIZE_MAP[accessor.type]

        if elements_per_item > 1:
            shape = (accessor.count, elements_per_item)
        else:
            shape = (accessor.count,)

        data = np.zeros(shape, dtype=dtype)
        data.flags.writeable = False
        return data
