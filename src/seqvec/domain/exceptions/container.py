"""SequenceFile container exceptions."""

from typing import Optional
from .base import seqvecError

class ContainerError(seqvecError):
    """Base class for container read/write errors."""

    def __init__(self, message: str, *, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if path:
            self.add_context('path', str(path))


class ContainerFormatError(ContainerError):
    """Raised when stored bytes do not follow the SequenceFile layout."""

    def __init__(self, message: str, *, offset: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        if offset is not None:
            self.add_context('offset', offset)

    def _get_default_error_code(self) -> str:
        return "CONTAINER_FORMAT_INVALID"


class TypeMismatchError(ContainerError):
    """Raised when a key or value class differs from the expected one."""

    def __init__(
        self,
        role: str,
        expected: str,
        actual: str,
        **kwargs
    ):
        message = f"{role} class mismatch: expected {expected}, found {actual}"
        super().__init__(message, **kwargs)
        self.role = role
        self.expected = expected
        self.actual = actual
        self.add_context('role', role)
        self.add_context('expected', expected)
        self.add_context('actual', actual)
        self.add_suggestion("Use --key-type/--value-type auto to accept the stored classes")

    def _get_default_error_code(self) -> str:
        return "TYPE_MISMATCH"


class UnsupportedCodecError(ContainerError):
    """Raised for compression codecs that cannot be decoded."""

    def __init__(self, codec: str, **kwargs):
        super().__init__(f"Unsupported compression codec: {codec}", **kwargs)
        self.codec = codec
        self.add_context('codec', codec)

    def _get_default_error_code(self) -> str:
        return "UNSUPPORTED_CODEC"


class ContainerStateError(ContainerError):
    """Raised when a closed container handle is used."""

    def _get_default_error_code(self) -> str:
        return "CONTAINER_CLOSED"


class SerializationError(ContainerError):
    """Raised when a value cannot be encoded or decoded by its Writable."""

    def __init__(self, message: str, *, writable: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if writable:
            self.add_context('writable', writable)

    def _get_default_error_code(self) -> str:
        return "SERIALIZATION_FAILED"


class VerificationError(ContainerError):
    """Raised when re-reading a freshly written container disagrees with its input."""

    def __init__(
        self,
        message: str,
        *,
        expected_count: Optional[int] = None,
        actual_count: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if expected_count is not None:
            self.add_context('expected_count', expected_count)
        if actual_count is not None:
            self.add_context('actual_count', actual_count)

    def _get_default_error_code(self) -> str:
        return "VERIFICATION_FAILED"
