import pytest
from pathlib import Path

from seqvec.config.settings import (
    Settings,
    ImportSettings,
    DumpSettings,
    ContainerSettings,
    LoggingSettings,
    LogLevel,
    Command,
    WRITABLE_CHOICES,
    NUM_COLUMNS,
    DEFAULT_IMPORT_INPUT,
    DEFAULT_DUMP_INPUT,
    parse_sync_marker,
    get_settings,
    set_settings,
    reset_settings,
)
from seqvec.container.sequence_file import CompressionType, SYNC_INTERVAL
from seqvec.domain.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "centroids.csv"
    path.write_text("A,1,2,3\n")
    return path


class TestEnums:

    def test_log_level_values(self):
        assert LogLevel.DEBUG.value == "DEBUG"
        assert LogLevel.INFO.value == "INFO"
        assert LogLevel.WARNING.value == "WARNING"

    def test_command_values(self):
        assert Command("import") is Command.IMPORT
        assert Command("dump") is Command.DUMP


class TestImportSettings:
    """Test ImportSettings defaults and validation."""

    def test_default_values(self):
        settings = ImportSettings()
        assert settings.input_path == DEFAULT_IMPORT_INPUT
        assert settings.column_count == NUM_COLUMNS == 4
        assert settings.verify is True

    def test_valid(self, csv_file, tmp_path):
        ImportSettings(input_path=csv_file, output_path=tmp_path / "out").validate()

    def test_column_count_too_small(self, csv_file, tmp_path):
        settings = ImportSettings(input_path=csv_file, output_path=tmp_path / "out", column_count=0)
        with pytest.raises(ConfigurationError) as exc_info:
            settings.validate()
        assert exc_info.value.config_field == "importing.column_count"

    def test_missing_input(self, tmp_path):
        settings = ImportSettings(input_path=tmp_path / "missing.csv", output_path=tmp_path / "out")
        with pytest.raises(ConfigurationError, match="Input CSV does not exist"):
            settings.validate()

    def test_output_is_directory(self, csv_file, tmp_path):
        settings = ImportSettings(input_path=csv_file, output_path=tmp_path)
        with pytest.raises(ConfigurationError, match="Output path is a directory"):
            settings.validate()


class TestDumpSettings:

    def test_default_values(self):
        settings = DumpSettings()
        assert settings.input_path == DEFAULT_DUMP_INPUT
        assert settings.key_type == "int"
        assert settings.value_type == "cluster"

    def test_invalid_type(self, csv_file):
        settings = DumpSettings(input_path=csv_file, value_type="float")
        with pytest.raises(ConfigurationError) as exc_info:
            settings.validate()
        assert exc_info.value.config_field == "dumping.value_type"

    def test_auto_is_a_choice(self, csv_file):
        assert "auto" in WRITABLE_CHOICES
        DumpSettings(input_path=csv_file, key_type="auto", value_type="auto").validate()

    def test_missing_container(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Container does not exist"):
            DumpSettings(input_path=tmp_path / "nope").validate()


class TestContainerSettings:

    def test_default_values(self):
        settings = ContainerSettings()
        assert settings.compression is CompressionType.NONE
        assert settings.sync_interval == SYNC_INTERVAL
        assert settings.sync_marker is None
        assert settings.metadata == {}

    def test_non_positive_interval(self):
        with pytest.raises(ConfigurationError):
            ContainerSettings(sync_interval=0).validate()

    def test_marker_length(self):
        with pytest.raises(ConfigurationError, match="16 bytes"):
            ContainerSettings(sync_marker=b"\x00" * 8).validate()


class TestParseSyncMarker:

    def test_hex_marker(self):
        assert parse_sync_marker("00" * 15 + "ff") == b"\x00" * 15 + b"\xff"

    def test_empty(self):
        assert parse_sync_marker(None) is None
        assert parse_sync_marker("") is None

    @pytest.mark.parametrize("text", ["abc", "zz" * 16, "00" * 17])
    def test_invalid(self, text):
        with pytest.raises(ConfigurationError, match="Invalid sync marker"):
            parse_sync_marker(text)


class TestLoggingSettings:

    def test_default_values(self):
        settings = LoggingSettings()
        assert settings.level == LogLevel.INFO
        assert settings.file_path is None
        assert settings.console_output is True

    def test_missing_log_directory(self, tmp_path):
        settings = LoggingSettings(file_path=tmp_path / "missing" / "run.log")
        with pytest.raises(ConfigurationError, match="Log directory does not exist"):
            settings.validate()


class TestSettings:

    def test_import_only_validates_import_sections(self, csv_file, tmp_path):
        """Test that the dump section is not checked for an import run."""
        settings = Settings(
            command=Command.IMPORT,
            importing=ImportSettings(input_path=csv_file, output_path=tmp_path / "out"),
        )
        settings.validate()

    def test_dump_only_validates_dump_sections(self, csv_file):
        settings = Settings(
            command=Command.DUMP,
            dumping=DumpSettings(input_path=csv_file),
            container=ContainerSettings(sync_interval=0),
        )
        settings.validate()

    def test_to_dict(self, csv_file):
        settings = Settings(
            importing=ImportSettings(input_path=csv_file),
            container=ContainerSettings(sync_marker=b"\x01" * 16),
        )
        data = settings.to_dict()
        assert data["command"] == "import"
        assert data["importing"]["input_path"] == str(csv_file)
        assert data["container"]["compression"] == "none"
        assert data["container"]["sync_marker"] == "01" * 16
        assert data["runtime"]["log_level"] == "INFO"


class TestGlobalSettings:

    def test_get_before_set(self):
        with pytest.raises(ConfigurationError, match="Settings not initialized"):
            get_settings()

    def test_set_and_get(self, csv_file, tmp_path):
        settings = Settings(importing=ImportSettings(input_path=csv_file, output_path=tmp_path / "out"))
        set_settings(settings)
        assert get_settings() is settings

    def test_set_validates(self, tmp_path):
        settings = Settings(importing=ImportSettings(input_path=tmp_path / "missing.csv"))
        with pytest.raises(ConfigurationError):
            set_settings(settings)
        reset_settings()
        with pytest.raises(ConfigurationError):
            get_settings()
