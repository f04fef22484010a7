import pytest
from pathlib import Path
from unittest.mock import patch

from seqvec.config.resolvers import _resolve_log_dir, _resolve_output_path, default_log_dir


class TestResolveLogDir:

    def test_log_file_wins(self, tmp_path):
        """Test that an explicit log file decides the directory."""
        log_file = tmp_path / "logs" / "run.log"
        assert _resolve_log_dir(log_dir="/elsewhere", log_file=str(log_file)) == tmp_path / "logs"

    def test_log_dir(self, tmp_path):
        assert _resolve_log_dir(log_dir=str(tmp_path), log_file=None) == tmp_path

    def test_default(self, tmp_path):
        with patch('seqvec.config.resolvers.default_log_dir', return_value=tmp_path):
            assert _resolve_log_dir(log_dir=None, log_file=None) == tmp_path

    def test_default_log_dir_is_per_user(self):
        assert "seqvec" in str(default_log_dir())


class TestResolveOutputPath:

    def test_explicit_output(self, tmp_path):
        assert _resolve_output_path(str(tmp_path / "out"), tmp_path / "in.csv") == tmp_path / "out"

    def test_derived_from_input(self):
        derived = _resolve_output_path(None, Path("/ZTE_Demo/SKM_Iterations/centroids.csv"))
        assert derived == Path("/ZTE_Demo/SKM_Iterations/centroids")

    def test_input_without_suffix(self):
        with pytest.raises(ValueError, match="Cannot derive an output path"):
            _resolve_output_path(None, Path("/data/centroids"))
