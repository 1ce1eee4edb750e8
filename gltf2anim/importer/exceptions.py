"""
Custom exceptions for the glTF importer module.
"""


class ImporterError(Exception):
    """Base exception for importer errors."""
    pass


class GLBParseError(ImporterError):
    """Raised when a glTF/GLB file or one of its buffers cannot be read."""
    pass


class AccessorLayoutError(GLBParseError):
    """Raised when accessor data does not have the expected element layout."""
    pass


class SkeletonError(ImporterError):
    """Raised when skeleton extraction fails."""
    pass


class AnimationError(ImporterError):
    """Raised when animation extraction fails."""
    pass


class AnimationNotFoundError(AnimationError):
    """Raised when the requested animation does not exist."""
    pass


class ValidationError(ImporterError):
    """
    Raised when a built structure breaks its own invariants.

    This points at a bug in the importer rather than at bad input data.
    """
    pass


class SkeletonValidationError(ValidationError):
    """Raised when the output skeleton fails validation."""
    pass


class AnimationValidationError(ValidationError):
    """Raised when an output animation fails validation."""
    pass


class UnsupportedOperationError(ImporterError):
    """Raised for conversion operations glTF input cannot provide."""
    pass
