"""Custom exceptions for the seqvec package."""

# Base exceptions
from .base import (
    seqvecError,
    ConfigurationError,
    ResourceError,
    FileSystemError,
)

# Validation exceptions
from .validation import (
    ValidationError,
    RecordParseError,
)

# Container exceptions
from .container import (
    ContainerError,
    ContainerFormatError,
    TypeMismatchError,
    UnsupportedCodecError,
    ContainerStateError,
    SerializationError,
    VerificationError,
)

__all__ = [
    # Base
    "seqvecError",
    "ConfigurationError",
    "ResourceError",
    "FileSystemError",

    # Validation
    "ValidationError",
    "RecordParseError",

    # Container
    "ContainerError",
    "ContainerFormatError",
    "TypeMismatchError",
    "UnsupportedCodecError",
    "ContainerStateError",
    "SerializationError",
    "VerificationError",
]
