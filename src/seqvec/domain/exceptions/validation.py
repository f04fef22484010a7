"""Input validation exceptions."""

from typing import Optional, Any
from .base import seqvecError

class ValidationError(seqvecError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if field_name:
            self.add_context('field_name', field_name)
        if field_value is not None:
            self.add_context('field_value', str(field_value))

    def _get_default_error_code(self) -> str:
        return "VALIDATION_ERROR"


class RecordParseError(ValidationError):
    """Raised when a CSV line cannot be turned into a record."""

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
        source: Optional[str] = None,
        **kwargs
    ):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message, **kwargs)
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            self.add_context('line_number', line_number)
        if line is not None:
            self.add_context('line', line)
        if source:
            self.add_context('source', source)

    def _get_default_error_code(self) -> str:
        return "RECORD_PARSE_FAILED"
