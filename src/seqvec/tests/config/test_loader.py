import pytest
from argparse import Namespace
from pathlib import Path

from seqvec.config.loader import ConfigurationLoader, configure_from_cli
from seqvec.config.settings import LogLevel, Command, DEFAULT_IMPORT_OUTPUT
from seqvec.container.sequence_file import CompressionType, SYNC_INTERVAL
from seqvec.domain.exceptions import ConfigurationError


class TestConfigurationLoader:

    def test_load_defaults(self):
        """Test that load_defaults returns correct default settings."""
        settings = ConfigurationLoader().load_defaults()

        assert settings.command is Command.IMPORT
        assert str(settings.importing.input_path) == "/ZTE_Demo/SKM_Iterations/centroids.csv"
        assert settings.importing.output_path == DEFAULT_IMPORT_OUTPUT
        assert settings.importing.column_count == 4
        assert str(settings.dumping.input_path) == "/ZTE_Demo/cluster_raw"
        assert settings.container.compression is CompressionType.NONE
        assert settings.container.sync_interval == SYNC_INTERVAL
        assert settings.logging.level == LogLevel.INFO
        assert settings.show_progress is True
        assert settings.dry_run is False

    def test_empty_args(self):
        settings = ConfigurationLoader().load_from_cli_args(Namespace())
        assert settings.command is Command.IMPORT
        assert settings.importing.output_path == DEFAULT_IMPORT_OUTPUT

    def test_import_args(self, tmp_path):
        args = Namespace(
            cmd="import",
            input=str(tmp_path / "in.csv"),
            output=str(tmp_path / "out.seq"),
            columns=6,
            no_verify=True,
            compression="block",
            sync_interval=500,
            sync_marker="ab" * 16,
            lax_precision=True,
            no_progress=True,
        )
        settings = ConfigurationLoader().load_from_cli_args(args)

        assert settings.importing.input_path == tmp_path / "in.csv"
        assert settings.importing.output_path == tmp_path / "out.seq"
        assert settings.importing.column_count == 6
        assert settings.importing.verify is False
        assert settings.container.compression is CompressionType.BLOCK
        assert settings.container.sync_interval == 500
        assert settings.container.sync_marker == b"\xab" * 16
        assert settings.container.lax_precision is True
        assert settings.show_progress is False

    def test_output_derived_from_input(self, tmp_path):
        args = Namespace(cmd="import", input=str(tmp_path / "points.csv"), output=None)
        settings = ConfigurationLoader().load_from_cli_args(args)
        assert settings.importing.output_path == tmp_path / "points"

    def test_output_only(self, tmp_path):
        args = Namespace(cmd="import", input=None, output=str(tmp_path / "o"))
        settings = ConfigurationLoader().load_from_cli_args(args)
        assert settings.importing.output_path == tmp_path / "o"

    def test_dump_args(self, tmp_path):
        args = Namespace(cmd="dump", input=str(tmp_path / "c"), key_type="auto", value_type="vector")
        settings = ConfigurationLoader().load_from_cli_args(args)

        assert settings.command is Command.DUMP
        assert settings.dumping.input_path == tmp_path / "c"
        assert settings.dumping.key_type == "auto"
        assert settings.dumping.value_type == "vector"
        assert settings.importing.output_path == DEFAULT_IMPORT_OUTPUT

    def test_logging_args(self, tmp_path):
        args = Namespace(cmd="dump", debug=True, log_file=str(tmp_path / "run.log"), log_dir=str(tmp_path))
        settings = ConfigurationLoader().load_from_cli_args(args)

        assert settings.logging.level == LogLevel.DEBUG
        assert settings.logging.file_path == tmp_path / "run.log"
        assert settings.logging.log_dir == tmp_path
        assert settings.debug_mode is True

    def test_bad_sync_marker_passes_through(self):
        args = Namespace(cmd="import", sync_marker="xyz")
        with pytest.raises(ConfigurationError, match="Invalid sync marker"):
            ConfigurationLoader().load_from_cli_args(args)

    def test_underivable_output_wrapped(self):
        """Test that non-configuration errors are wrapped."""
        args = Namespace(cmd="import", input="/data/centroids", output=None)
        with pytest.raises(ConfigurationError, match="Failed to load configuration"):
            ConfigurationLoader().load_from_cli_args(args)


class TestConfigureFromCli:

    def test_validates(self, tmp_path):
        args = Namespace(cmd="import", input=str(tmp_path / "missing.csv"))
        with pytest.raises(ConfigurationError, match="Input CSV does not exist"):
            configure_from_cli(args)

    def test_zero_sync_interval_rejected(self, tmp_path):
        """Test that an explicit zero interval reaches validation instead of the default."""
        csv = tmp_path / "in.csv"
        csv.write_text("A,1,2,3\n")
        args = Namespace(cmd="import", input=str(csv), sync_interval=0)

        assert ConfigurationLoader().load_from_cli_args(args).container.sync_interval == 0
        with pytest.raises(ConfigurationError, match="sync_interval must be positive"):
            configure_from_cli(args)

    def test_valid_import(self, tmp_path):
        csv = tmp_path / "in.csv"
        csv.write_text("A,1,2,3\n")
        settings = configure_from_cli(Namespace(cmd="import", input=str(csv)))
        assert settings.importing.output_path == tmp_path / "in"
