import pytest
from pathlib import Path

from seqvec.config.integration import (
    ImportConfig,
    DumpConfig,
    get_import_config,
    get_dump_config,
)
from seqvec.config.settings import (
    Settings,
    ImportSettings,
    DumpSettings,
    ContainerSettings,
    Command,
    set_settings,
    reset_settings,
)
from seqvec.container.sequence_file import CompressionType
from seqvec.domain.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("A,1,2,3\n")
    return path


class TestImportConfig:

    def test_paths_coerced(self):
        config = ImportConfig(input_path="a.csv", output_path="a")
        assert config.input_path == Path("a.csv")
        assert config.output_path == Path("a")

    def test_from_settings(self, csv_file, tmp_path):
        settings = Settings(
            importing=ImportSettings(input_path=csv_file, output_path=tmp_path / "o", column_count=3, verify=False),
            container=ContainerSettings(
                compression=CompressionType.RECORD,
                sync_marker=b"\x00" * 16,
                lax_precision=True,
                metadata={"source": "test"},
            ),
            show_progress=False,
        )
        config = ImportConfig.from_settings(settings)

        assert config.input_path == csv_file
        assert config.column_count == 3
        assert config.verify is False
        assert config.compression is CompressionType.RECORD
        assert config.sync_marker == b"\x00" * 16
        assert config.lax_precision is True
        assert config.metadata == {"source": "test"}
        assert config.metadata is not settings.container.metadata
        assert config.show_progress is False

    def test_get_import_config(self, csv_file, tmp_path):
        set_settings(Settings(importing=ImportSettings(input_path=csv_file, output_path=tmp_path / "o")))
        assert get_import_config().output_path == tmp_path / "o"


class TestDumpConfig:

    def test_defaults(self):
        config = DumpConfig()
        assert config.input_path == Path("/ZTE_Demo/cluster_raw")
        assert config.key_type == "int"
        assert config.value_type == "cluster"

    def test_get_dump_config(self, csv_file):
        set_settings(Settings(command=Command.DUMP, dumping=DumpSettings(input_path=csv_file, key_type="auto")))
        config = get_dump_config()
        assert config.input_path == csv_file
        assert config.key_type == "auto"

    def test_get_without_settings(self):
        with pytest.raises(ConfigurationError):
            get_dump_config()
