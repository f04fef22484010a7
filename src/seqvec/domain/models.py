"""Core domain models for records, vectors and container entries."""

from dataclasses import dataclass
from typing import Optional, Tuple, Any

import numpy as np

@dataclass(frozen=True)
class Record:
    """A named vector parsed from one CSV line."""
    name: str
    features: Tuple[float, ...]

    @property
    def size(self) -> int:
        return len(self.features)

    def to_vector(self) -> "VectorValue":
        """Wrap the features as a named dense vector, ready for serialization."""
        return VectorValue(
            values=np.asarray(self.features, dtype=np.float64),
            name=self.name,
        )


@dataclass(eq=False)
class VectorValue:
    """In-memory form of a Mahout vector.

    ``dense`` and ``sequential`` select the on-disk layout; a sparse vector
    only stores its non-zero entries. ``lax_precision`` stores values as
    32-bit floats instead of 64-bit doubles.
    """
    values: np.ndarray
    name: Optional[str] = None
    dense: bool = True
    sequential: bool = True
    lax_precision: bool = False

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=np.float64)

    @property
    def size(self) -> int:
        return int(self.values.shape[0])

    def tolist(self) -> list:
        return self.values.tolist()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, VectorValue):
            return NotImplemented
        return (
            self.name == other.name
            and self.values.shape == other.values.shape
            and bool(np.array_equal(self.values, other.values))
        )


@dataclass(eq=False)
class ClusterModel:
    """Decoded state of a k-means or canopy cluster."""
    cluster_id: int
    num_observations: int
    total_observations: int
    center: VectorValue
    radius: VectorValue
    measure: Optional[str] = None
    converged: Optional[bool] = None
    kind: str = "kmeans"

    @property
    def identifier(self) -> str:
        if self.kind == "canopy":
            return f"C-{self.cluster_id}"
        return f"{'VL' if self.converged else 'CL'}-{self.cluster_id}"


@dataclass(eq=False)
class ClusterRecord:
    """Payload of a ClusterWritable.

    ``payload`` always holds the serialized cluster bytes that follow the
    class name; ``model`` is only set for cluster classes we know how to
    decode.
    """
    class_name: str
    payload: bytes
    model: Optional[ClusterModel] = None

    @property
    def simple_name(self) -> str:
        return self.class_name.rsplit(".", 1)[-1]

    @property
    def decoded(self) -> bool:
        return self.model is not None


@dataclass(frozen=True)
class ContainerEntry:
    """One key/value pair read back from a container."""
    index: int
    key: Any
    value: Any
