import pytest

from seqvec.domain.exceptions import (
    seqvecError,
    ConfigurationError,
    FileSystemError,
    ResourceError,
    ValidationError,
    RecordParseError,
    ContainerError,
    ContainerFormatError,
    TypeMismatchError,
    UnsupportedCodecError,
    SerializationError,
    VerificationError,
)


class TestBaseError:

    def test_default_error_code(self):
        err = ContainerError("boom")
        assert err.error_code == "SEQVEC_ERROR"
        assert err.context == {}
        assert str(err) == "boom"

    def test_explicit_error_code(self):
        assert ContainerError("boom", error_code="X").error_code == "X"

    def test_chaining_helpers(self):
        err = ContainerError("boom").add_context("a", 1).add_suggestion("try again")
        assert err.context == {"a": 1}
        assert str(err) == "boom -- Suggestions: try again"

    def test_empty_helpers_ignored(self):
        err = ContainerError("boom").add_context("", 1).add_suggestion("")
        assert err.context == {}
        assert err.suggestions == []


class TestConfigurationError:

    def test_field_prefix(self):
        err = ConfigurationError("bad value", config_field="importing.column_count")
        assert str(err) == "[importing.column_count] bad value"
        assert err.context["config_field"] == "importing.column_count"
        assert err.error_code == "CONFIGURATION_ERROR"

    def test_without_field(self):
        assert str(ConfigurationError("bad")) == "bad"


class TestHierarchy:

    @pytest.mark.parametrize("err,parent", [
        (ConfigurationError("x"), seqvecError),
        (FileSystemError("x"), ResourceError),
        (RecordParseError("x"), ValidationError),
        (ContainerFormatError("x"), ContainerError),
        (TypeMismatchError("key", "a", "b"), ContainerError),
        (UnsupportedCodecError("c"), ContainerError),
        (SerializationError("x"), ContainerError),
        (VerificationError("x"), ContainerError),
    ])
    def test_parents(self, err, parent):
        assert isinstance(err, parent)
        assert isinstance(err, seqvecError)


class TestSpecificErrors:

    def test_file_system_context(self):
        err = FileSystemError("cannot read", path="/tmp/x", operation="read")
        assert err.context == {"path": "/tmp/x", "operation": "read"}
        assert err.error_code == "FILE_SYSTEM_ERROR"

    def test_record_parse_error_prefix(self):
        err = RecordParseError("bad", line_number=3, line="A,1", source="in.csv")
        assert err.message == "line 3: bad"
        assert err.context["source"] == "in.csv"
        assert err.line == "A,1"

    def test_type_mismatch_message(self):
        err = TypeMismatchError("value", "x.Expected", "x.Actual", path="/data/c")
        assert err.message == "value class mismatch: expected x.Expected, found x.Actual"
        assert err.context["path"] == "/data/c"
        assert err.suggestions

    def test_format_error_offset(self):
        err = ContainerFormatError("bad", offset=0)
        assert err.context["offset"] == 0
        assert err.error_code == "CONTAINER_FORMAT_INVALID"

    def test_verification_counts(self):
        err = VerificationError("short", expected_count=2, actual_count=1)
        assert err.context == {"expected_count": 2, "actual_count": 1}
