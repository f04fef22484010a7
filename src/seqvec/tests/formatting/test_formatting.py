import numpy as np
import pytest

from seqvec.domain.models import VectorValue, ClusterModel, ClusterRecord
from seqvec.formatting import (
    format_double,
    format_vector,
    format_cluster,
    format_entry,
)


class TestFormatDouble:
    """Java Double.toString rendering."""

    @pytest.mark.parametrize("value,expected", [
        (1.0, "1.0"),
        (2.5, "2.5"),
        (-3.0, "-3.0"),
        (0.0, "0.0"),
        (-0.0, "-0.0"),
        (0.001, "0.001"),
        (1234567.0, "1234567.0"),
        (0.10000000149011612, "0.10000000149011612"),
        (1e-5, "1.0E-5"),
        (1.5e-4, "1.5E-4"),
        (1e7, "1.0E7"),
        (12345678.9, "1.23456789E7"),
        (-2.5e10, "-2.5E10"),
        (float("nan"), "NaN"),
        (float("inf"), "Infinity"),
        (float("-inf"), "-Infinity"),
    ])
    def test_values(self, value, expected):
        assert format_double(value) == expected

    def test_numpy_scalar(self):
        assert format_double(np.float64(4.0)) == "4.0"


class TestFormatVector:

    def test_fully_itemized(self):
        vector = VectorValue(np.array([1.0, 0.0, 3.0]), name="ignored")
        assert format_vector(vector) == "{1.0,0.0,3.0}"

    def test_empty(self):
        assert format_vector(VectorValue(np.array([]))) == "{}"


class TestFormatCluster:

    def _model(self, **overrides):
        fields = dict(
            cluster_id=4,
            num_observations=10,
            total_observations=10,
            center=VectorValue(np.array([1.0, 2.25])),
            radius=VectorValue(np.array([0.5, 0.125])),
            converged=False,
        )
        fields.update(overrides)
        return ClusterModel(**fields)

    def test_kmeans_cluster(self):
        record = ClusterRecord(class_name="k", payload=b"", model=self._model())
        assert format_cluster(record) == "CL-4{n=10 c=[1.000, 2.250] r=[0.500, 0.125]}"

    def test_converged_cluster(self):
        record = ClusterRecord(class_name="k", payload=b"", model=self._model(converged=True))
        assert format_cluster(record).startswith("VL-4{")

    def test_canopy(self):
        record = ClusterRecord(class_name="c", payload=b"", model=self._model(kind="canopy"))
        assert format_cluster(record).startswith("C-4{n=10")

    def test_sparse_center_uses_indices(self):
        """Test that vectors with zeros only list their non-zero items."""
        model = self._model(center=VectorValue(np.array([0.0, 3.0, 0.0]), name="c"))
        text = format_cluster(ClusterRecord(class_name="k", payload=b"", model=model))
        assert "c=c = [1:3.000]" in text

    def test_ties_round_away_from_zero(self):
        model = self._model(
            center=VectorValue(np.array([0.0625, 1.0])),
            radius=VectorValue(np.array([-0.0625, 0.1235])),
        )
        text = format_cluster(ClusterRecord(class_name="k", payload=b"", model=model))
        assert text == "CL-4{n=10 c=[0.063, 1.000] r=[-0.063, 0.124]}"

    def test_large_and_special_values(self):
        model = self._model(
            center=VectorValue(np.array([1e20, float("nan")])),
            radius=VectorValue(np.array([float("inf"), 1e-9])),
        )
        text = format_cluster(ClusterRecord(class_name="k", payload=b"", model=model))
        assert "c=[100000000000000000000.000, NaN]" in text
        assert "r=[Infinity, 0.000]" in text

    def test_opaque_cluster(self):
        record = ClusterRecord(
            class_name="org.apache.mahout.clustering.fuzzykmeans.SoftCluster",
            payload=b"\x00" * 12,
        )
        assert format_cluster(record) == "SoftCluster[12 bytes]"


class TestFormatEntry:

    def test_vector_entry(self):
        vector = VectorValue(np.array([1.0, 2.0, 3.0]), name="A")
        assert format_entry("A", vector) == "A , {1.0,2.0,3.0}"

    def test_int_key(self):
        record = ClusterRecord(class_name="x.Y", payload=b"\x01")
        assert format_entry(7, record) == "7 , Y[1 bytes]"

    def test_plain_values(self):
        assert format_entry(1, 2) == "1 , 2"
