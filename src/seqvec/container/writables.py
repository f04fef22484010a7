"""Writable envelopes for SequenceFile keys and values.

Each Writable knows its Java class name (as stored in the file header), how
to serialize a Python value and how to read it back. Only the classes this
tool produces or consumes are implemented.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Any

import numpy as np

from seqvec.container.binary import DataInput, DataOutput
from seqvec.domain.exceptions import (
    ContainerFormatError,
    ConfigurationError,
    SerializationError,
)
from seqvec.domain.models import VectorValue, ClusterModel, ClusterRecord

logger = logging.getLogger(__name__)

TEXT_CLASS = "org.apache.hadoop.io.Text"
INT_CLASS = "org.apache.hadoop.io.IntWritable"
LONG_CLASS = "org.apache.hadoop.io.LongWritable"
VECTOR_CLASS = "org.apache.mahout.math.VectorWritable"
CLUSTER_CLASS = "org.apache.mahout.clustering.iterator.ClusterWritable"

KLUSTER_CLASS = "org.apache.mahout.clustering.kmeans.Kluster"
CANOPY_CLASS = "org.apache.mahout.clustering.canopy.Canopy"
DEFAULT_MEASURE = "org.apache.mahout.common.distance.EuclideanDistanceMeasure"

FLAG_DENSE = 0x01
FLAG_SEQUENTIAL = 0x02
FLAG_NAMED = 0x04
FLAG_LAX_PRECISION = 0x08
NUM_FLAGS = 4


class Writable(ABC):
    """Serializer for one Java Writable class."""
    class_name: str = ""
    alias: str = ""

    @abstractmethod
    def accepts(self, value: Any) -> bool:
        ...

    @abstractmethod
    def write(self, out: DataOutput, value: Any) -> None:
        ...

    @abstractmethod
    def read(self, inp: DataInput) -> Any:
        ...

    def to_bytes(self, value: Any) -> bytes:
        out = DataOutput()
        self.write(out, value)
        return out.getvalue()

    def from_bytes(self, data: bytes) -> Any:
        inp = DataInput.from_bytes(data)
        value = self.read(inp)
        left = inp.remaining()
        if left:
            raise SerializationError(
                f"{left} trailing bytes after {self.alias} value",
                writable=self.class_name,
            )
        return value

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.class_name}>"


class TextWritable(Writable):
    class_name = TEXT_CLASS
    alias = "text"

    def accepts(self, value):
        return isinstance(value, str)

    def write(self, out, value):
        data = value.encode("utf-8", "surrogateescape")
        out.write_vint(len(data))
        out.write(data)

    def read(self, inp):
        length = inp.read_vint()
        return inp.read_fully(length).decode("utf-8", "replace")


class IntWritable(Writable):
    class_name = INT_CLASS
    alias = "int"

    def accepts(self, value):
        return (
            isinstance(value, (int, np.integer)) and not isinstance(value, bool)
            and -2**31 <= value < 2**31
        )

    def write(self, out, value):
        out.write_int(int(value))

    def read(self, inp):
        return inp.read_int()


class LongWritable(Writable):
    class_name = LONG_CLASS
    alias = "long"

    def accepts(self, value):
        return (
            isinstance(value, (int, np.integer)) and not isinstance(value, bool)
            and -2**63 <= value < 2**63
        )

    def write(self, out, value):
        out.write_long(int(value))

    def read(self, inp):
        return inp.read_long()


class VectorWritable(Writable):
    """Mahout ``VectorWritable``: flags byte, varint size, values, optional name."""
    class_name = VECTOR_CLASS
    alias = "vector"

    def accepts(self, value):
        return isinstance(value, VectorValue)

    def write(self, out, value: VectorValue):
        flags = 0
        if value.dense:
            flags |= FLAG_DENSE
        if value.sequential:
            flags |= FLAG_SEQUENTIAL
        if value.name is not None:
            flags |= FLAG_NAMED
        if value.lax_precision:
            flags |= FLAG_LAX_PRECISION
        out.write_byte(flags)
        out.write_unsigned_varint(value.size)

        dtype = ">f4" if value.lax_precision else ">f8"
        if value.dense:
            out.write(value.values.astype(dtype).tobytes())
        else:
            nonzero = np.flatnonzero(value.values)
            out.write_unsigned_varint(len(nonzero))
            last = 0
            for index in nonzero.tolist():
                if value.sequential:
                    out.write_unsigned_varint(index - last)
                    last = index
                else:
                    out.write_unsigned_varint(index)
                out.write(np.array(value.values[index], dtype=dtype).tobytes())

        if value.name is not None:
            out.write_utf(value.name)

    def read(self, inp) -> VectorValue:
        flags = inp.read_unsigned_byte()
        if flags >> NUM_FLAGS:
            raise SerializationError(
                f"Unknown vector flags set: {flags:b}", writable=self.class_name
            )
        dense = bool(flags & FLAG_DENSE)
        sequential = bool(flags & FLAG_SEQUENTIAL)
        named = bool(flags & FLAG_NAMED)
        lax = bool(flags & FLAG_LAX_PRECISION)
        dtype = np.dtype(">f4" if lax else ">f8")

        size = inp.read_unsigned_varint()
        if dense:
            raw = inp.read_fully(size * dtype.itemsize)
            values = np.frombuffer(raw, dtype=dtype).astype(np.float64)
        else:
            values = np.zeros(size, dtype=np.float64)
            count = inp.read_unsigned_varint()
            last = 0
            for _ in range(count):
                index = inp.read_unsigned_varint()
                if sequential:
                    index += last
                    last = index
                if index >= size:
                    raise SerializationError(
                        f"Vector index {index} out of range for size {size}",
                        writable=self.class_name,
                    )
                values[index] = np.frombuffer(inp.read_fully(dtype.itemsize), dtype=dtype)[0]

        name = inp.read_utf() if named else None
        return VectorValue(
            values=values, name=name, dense=dense,
            sequential=sequential, lax_precision=lax,
        )


_VECTOR = VectorWritable()


def encode_cluster(model: ClusterModel, class_name: Optional[str] = None) -> ClusterRecord:
    """Serialize a cluster model into the payload a ClusterWritable carries."""
    if class_name is None:
        class_name = CANOPY_CLASS if model.kind == "canopy" else KLUSTER_CLASS
    out = DataOutput()
    out.write_utf(model.measure or DEFAULT_MEASURE)
    out.write_int(model.cluster_id)
    out.write_long(model.num_observations)
    out.write_long(model.total_observations)
    _VECTOR.write(out, model.center)
    _VECTOR.write(out, model.radius)
    if class_name == KLUSTER_CLASS:
        out.write_boolean(bool(model.converged))
    return ClusterRecord(class_name=class_name, payload=out.getvalue(), model=model)


def decode_cluster(class_name: str, payload: bytes) -> Optional[ClusterModel]:
    """Decode a known cluster payload; None when the class or bytes are not understood."""
    if class_name not in (KLUSTER_CLASS, CANOPY_CLASS):
        return None
    inp = DataInput.from_bytes(payload)
    try:
        measure = inp.read_utf()
        cluster_id = inp.read_int()
        num_observations = inp.read_long()
        total_observations = inp.read_long()
        center = _VECTOR.read(inp)
        radius = _VECTOR.read(inp)
        converged = inp.read_boolean() if class_name == KLUSTER_CLASS else None
    except (ContainerFormatError, SerializationError) as e:
        logger.debug("Cannot decode %s payload: %s", class_name, e)
        return None
    if inp.remaining():
        logger.debug(
            "Cannot decode %s payload: %d bytes left over", class_name, inp.remaining()
        )
        return None
    return ClusterModel(
        cluster_id=cluster_id,
        num_observations=num_observations,
        total_observations=total_observations,
        center=center,
        radius=radius,
        measure=measure,
        converged=converged,
        kind="canopy" if class_name == CANOPY_CLASS else "kmeans",
    )


class ClusterWritable(Writable):
    """Mahout ``ClusterWritable``: a polymorphic class name followed by the cluster bytes."""
    class_name = CLUSTER_CLASS
    alias = "cluster"

    def accepts(self, value):
        return isinstance(value, ClusterRecord)

    def write(self, out, value: ClusterRecord):
        out.write_utf(value.class_name)
        out.write(value.payload)

    def read(self, inp) -> ClusterRecord:
        class_name = inp.read_utf()
        left = inp.remaining()
        if left is None:
            raise SerializationError(
                "ClusterWritable must be read from a bounded buffer",
                writable=self.class_name,
            )
        payload = inp.read_fully(left)
        return ClusterRecord(
            class_name=class_name,
            payload=payload,
            model=decode_cluster(class_name, payload),
        )

    def from_bytes(self, data: bytes) -> ClusterRecord:
        return self.read(DataInput.from_bytes(data))


WRITABLES: Dict[str, Writable] = {
    w.class_name: w
    for w in (TextWritable(), IntWritable(), LongWritable(), VectorWritable(), ClusterWritable())
}

ALIASES: Dict[str, str] = {w.alias: name for name, w in WRITABLES.items()}


def resolve_class_name(name: Optional[str]) -> Optional[str]:
    """Map an alias (``text``, ``int``, ...) to its Java class name.

    ``None`` and ``"auto"`` mean "accept whatever is stored" and return None.
    """
    if name is None or name == "auto":
        return None
    if name in ALIASES:
        return ALIASES[name]
    if name in WRITABLES:
        return name
    raise ConfigurationError(
        f"Unknown writable type: {name}",
        config_field="writable",
    ).add_suggestion(f"Use one of: {', '.join(sorted(ALIASES))}, auto")


def get_writable(class_name: str) -> Writable:
    try:
        return WRITABLES[class_name]
    except KeyError:
        raise SerializationError(
            f"No serializer registered for {class_name}",
            writable=class_name,
        ) from None
