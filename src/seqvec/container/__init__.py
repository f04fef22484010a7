"""SequenceFile container codec."""

from .sequence_file import (
    CompressionType,
    SequenceFileHeader,
    SequenceFileReader,
    SequenceFileWriter,
)
from .writables import (
    TEXT_CLASS,
    INT_CLASS,
    LONG_CLASS,
    VECTOR_CLASS,
    CLUSTER_CLASS,
    encode_cluster,
    resolve_class_name,
)

__all__ = [
    "CompressionType",
    "SequenceFileHeader",
    "SequenceFileReader",
    "SequenceFileWriter",
    "TEXT_CLASS",
    "INT_CLASS",
    "LONG_CLASS",
    "VECTOR_CLASS",
    "CLUSTER_CLASS",
    "encode_cluster",
    "resolve_class_name",
]
