"""Hadoop SequenceFile reader and writer.

Layout (version 6)::

    "SEQ" version keyClass valueClass compressed blockCompressed [codec]
    metadata sync
    record*                   -- int recordLen, int keyLen, key, value
    (int -1, sync)            -- sync escape, between records

Block-compressed files store groups of records instead: a sync escape,
a vint record count and four compressed buffers (key lengths, keys,
value lengths, values).
"""

import hashlib
import logging
import struct
import time
import uuid
import zlib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, Optional, Any, Union

from seqvec.container.binary import DataInput, DataOutput
from seqvec.container.writables import (
    TextWritable,
    get_writable,
)
from seqvec.domain.exceptions import (
    ContainerFormatError,
    ContainerStateError,
    TypeMismatchError,
    UnsupportedCodecError,
)
from seqvec.domain.models import ContainerEntry

logger = logging.getLogger(__name__)

MAGIC = b"SEQ"
VERSION = 6
BLOCK_COMPRESS_VERSION = 4
CUSTOM_COMPRESS_VERSION = 5
VERSION_WITH_METADATA = 6

SYNC_ESCAPE = -1
SYNC_HASH_SIZE = 16
SYNC_SIZE = 4 + SYNC_HASH_SIZE
SYNC_INTERVAL = 100 * SYNC_SIZE

DEFAULT_BLOCK_SIZE = 1000000

DEFAULT_CODEC = "org.apache.hadoop.io.compress.DefaultCodec"
GZIP_CODEC = "org.apache.hadoop.io.compress.GzipCodec"
SUPPORTED_CODECS = (DEFAULT_CODEC, GZIP_CODEC)

_INT = struct.Struct(">i")
_TEXT = TextWritable()

PathLike = Union[str, Path]


class CompressionType(Enum):
    """SequenceFile compression modes."""
    NONE = "none"
    RECORD = "record"
    BLOCK = "block"


def new_sync_marker() -> bytes:
    """Random 16-byte marker, generated the way Hadoop's writer does it."""
    seed = f"{uuid.uuid4()}@{time.time_ns()}".encode("utf-8")
    return hashlib.md5(seed).digest()


def _compress(codec: str, data: bytes) -> bytes:
    if codec == DEFAULT_CODEC:
        return zlib.compress(data)
    if codec == GZIP_CODEC:
        co = zlib.compressobj(wbits=16 + zlib.MAX_WBITS)
        return co.compress(data) + co.flush()
    raise UnsupportedCodecError(codec)


def _decompress(codec: str, data: bytes) -> bytes:
    wbits = 16 + zlib.MAX_WBITS if codec == GZIP_CODEC else zlib.MAX_WBITS
    try:
        return zlib.decompress(data, wbits)
    except zlib.error as e:
        raise ContainerFormatError(f"Cannot decompress {codec} data: {e}") from e


@dataclass
class SequenceFileHeader:
    """Everything stored before the first record."""
    version: int
    key_class: str
    value_class: str
    compression: CompressionType = CompressionType.NONE
    codec: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    sync_marker: bytes = b""
    data_offset: int = 0

    def to_bytes(self) -> bytes:
        out = DataOutput()
        out.write(MAGIC)
        out.write_byte(self.version)
        _TEXT.write(out, self.key_class)
        _TEXT.write(out, self.value_class)
        out.write_boolean(self.compression is not CompressionType.NONE)
        out.write_boolean(self.compression is CompressionType.BLOCK)
        if self.compression is not CompressionType.NONE:
            _TEXT.write(out, self.codec or DEFAULT_CODEC)
        out.write_int(len(self.metadata))
        for key in sorted(self.metadata):
            _TEXT.write(out, key)
            _TEXT.write(out, self.metadata[key])
        out.write(self.sync_marker)
        return out.getvalue()

    @classmethod
    def read(cls, inp: DataInput) -> "SequenceFileHeader":
        magic = inp.read(len(MAGIC))
        if magic != MAGIC:
            raise ContainerFormatError("Not a SequenceFile: bad magic", offset=0)
        version = inp.read_unsigned_byte()
        if not BLOCK_COMPRESS_VERSION <= version <= VERSION:
            raise ContainerFormatError(
                f"Unsupported SequenceFile version {version}", offset=len(MAGIC)
            ).add_suggestion(
                f"Versions {BLOCK_COMPRESS_VERSION} to {VERSION} are supported"
            )

        key_class = _TEXT.read(inp)
        value_class = _TEXT.read(inp)
        compressed = inp.read_boolean()
        block = inp.read_boolean()
        if block and not compressed:
            raise ContainerFormatError("Block compression flag set without compression")

        codec = None
        if compressed:
            codec = _TEXT.read(inp) if version >= CUSTOM_COMPRESS_VERSION else DEFAULT_CODEC
            if codec not in SUPPORTED_CODECS:
                raise UnsupportedCodecError(codec)

        metadata: Dict[str, str] = {}
        if version >= VERSION_WITH_METADATA:
            count = inp.read_int()
            if count < 0:
                raise ContainerFormatError(
                    f"Invalid metadata entry count {count}", offset=inp.position
                )
            for _ in range(count):
                key = _TEXT.read(inp)
                metadata[key] = _TEXT.read(inp)

        sync_marker = inp.read_fully(SYNC_HASH_SIZE)

        if not compressed:
            compression = CompressionType.NONE
        elif block:
            compression = CompressionType.BLOCK
        else:
            compression = CompressionType.RECORD

        return cls(
            version=version,
            key_class=key_class,
            value_class=value_class,
            compression=compression,
            codec=codec,
            metadata=metadata,
            sync_marker=sync_marker,
            data_offset=inp.position,
        )


class SequenceFileWriter:
    """Writes key/value pairs to a new SequenceFile.

    Use as a context manager; the file is closed on every exit path.
    An existing file at ``path`` is overwritten.
    """

    def __init__(
        self,
        path: PathLike,
        key_class: str,
        value_class: str,
        *,
        compression: CompressionType = CompressionType.NONE,
        codec: str = DEFAULT_CODEC,
        metadata: Optional[Dict[str, str]] = None,
        sync_marker: Optional[bytes] = None,
        sync_interval: int = SYNC_INTERVAL,
        block_size: int = DEFAULT_BLOCK_SIZE,
    ):
        if sync_marker is not None and len(sync_marker) != SYNC_HASH_SIZE:
            raise ValueError(f"sync_marker must be {SYNC_HASH_SIZE} bytes")
        if compression is not CompressionType.NONE and codec not in SUPPORTED_CODECS:
            raise UnsupportedCodecError(codec, path=str(path))

        self.path = Path(path)
        self.key_writable = get_writable(key_class)
        self.value_writable = get_writable(value_class)
        self.header = SequenceFileHeader(
            version=VERSION,
            key_class=key_class,
            value_class=value_class,
            compression=compression,
            codec=codec if compression is not CompressionType.NONE else None,
            metadata=dict(metadata or {}),
            sync_marker=sync_marker or new_sync_marker(),
        )
        self.sync_interval = sync_interval
        self.block_size = block_size
        self.count = 0

        self._file = None
        self._closed = False
        self._pos = 0
        self._last_sync = 0
        self._reset_block()

    def open(self) -> "SequenceFileWriter":
        if self._closed:
            raise ContainerStateError("Writer already closed", path=str(self.path))
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "wb")
        try:
            header = self.header.to_bytes()
            self._write(header)
        except BaseException:
            self.close()
            raise
        self.header.data_offset = len(header)
        logger.debug(
            "Opened %s for writing (%s -> %s, compression=%s)",
            self.path, self.header.key_class, self.header.value_class,
            self.header.compression.value,
        )
        return self

    def __enter__(self) -> "SequenceFileWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def append(self, key: Any, value: Any) -> None:
        if self._file is None or self._closed:
            raise ContainerStateError("Writer is not open", path=str(self.path))
        if not self.key_writable.accepts(key):
            raise TypeMismatchError(
                "key", self.header.key_class, type(key).__name__, path=str(self.path)
            )
        if not self.value_writable.accepts(value):
            raise TypeMismatchError(
                "value", self.header.value_class, type(value).__name__, path=str(self.path)
            )

        key_bytes = self.key_writable.to_bytes(key)
        value_bytes = self.value_writable.to_bytes(value)

        if self.header.compression is CompressionType.BLOCK:
            self._buffer_record(key_bytes, value_bytes)
        else:
            if self.header.compression is CompressionType.RECORD:
                value_bytes = _compress(self.header.codec, value_bytes)
            self._check_and_write_sync()
            self._write(_INT.pack(len(key_bytes) + len(value_bytes)))
            self._write(_INT.pack(len(key_bytes)))
            self._write(key_bytes)
            self._write(value_bytes)
        self.count += 1

    def sync(self) -> None:
        """Write a sync escape unless one was just written."""
        if self._last_sync != self._pos:
            self._write(_INT.pack(SYNC_ESCAPE))
            self._write(self.header.sync_marker)
            self._last_sync = self._pos

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._file is None:
            return
        try:
            if self.header.compression is CompressionType.BLOCK:
                self._flush_block()
            self._file.flush()
        finally:
            self._file.close()
            logger.debug("Closed %s after %d entries (%d bytes)", self.path, self.count, self._pos)

    def _write(self, data: bytes) -> None:
        self._file.write(data)
        self._pos += len(data)

    def _check_and_write_sync(self) -> None:
        if self._pos >= self._last_sync + self.sync_interval:
            self.sync()

    def _reset_block(self) -> None:
        self._block_count = 0
        self._key_lengths = DataOutput()
        self._keys = DataOutput()
        self._value_lengths = DataOutput()
        self._values = DataOutput()

    def _buffer_record(self, key_bytes: bytes, value_bytes: bytes) -> None:
        self._key_lengths.write_vint(len(key_bytes))
        self._keys.write(key_bytes)
        self._value_lengths.write_vint(len(value_bytes))
        self._values.write(value_bytes)
        self._block_count += 1
        if len(self._keys) + len(self._values) >= self.block_size:
            self._flush_block()

    def _flush_block(self) -> None:
        if not self._block_count:
            return
        self.sync()
        out = DataOutput()
        out.write_vint(self._block_count)
        for buf in (self._key_lengths, self._keys, self._value_lengths, self._values):
            compressed = _compress(self.header.codec, buf.getvalue())
            out.write_vint(len(compressed))
            out.write(compressed)
        self._write(out.getvalue())
        self._reset_block()


class SequenceFileReader:
    """Iterates the entries of an existing SequenceFile in stored order.

    ``expected_key_class`` / ``expected_value_class`` (Java class names) are
    checked against the header when given.
    """

    def __init__(
        self,
        path: PathLike,
        expected_key_class: Optional[str] = None,
        expected_value_class: Optional[str] = None,
    ):
        self.path = Path(path)
        self.expected_key_class = expected_key_class
        self.expected_value_class = expected_value_class
        self.header: Optional[SequenceFileHeader] = None
        self._file = None
        self._in: Optional[DataInput] = None
        self._closed = False

    def open(self) -> "SequenceFileReader":
        if self._closed:
            raise ContainerStateError("Reader already closed", path=str(self.path))
        self._file = open(self.path, "rb")
        try:
            self._in = DataInput(self._file)
            self.header = SequenceFileHeader.read(self._in)
            self._check_types()
            self.key_writable = get_writable(self.header.key_class)
            self.value_writable = get_writable(self.header.value_class)
        except BaseException:
            self.close()
            raise
        logger.debug(
            "Opened %s (v%d, %s -> %s, compression=%s)",
            self.path, self.header.version, self.header.key_class,
            self.header.value_class, self.header.compression.value,
        )
        return self

    def __enter__(self) -> "SequenceFileReader":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._closed = True
        if self._file is not None:
            self._file.close()
            self._file = None

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[ContainerEntry]:
        return self.entries()

    def entries(self) -> Iterator[ContainerEntry]:
        if self._in is None or self._closed:
            raise ContainerStateError("Reader is not open", path=str(self.path))
        if self.header.compression is CompressionType.BLOCK:
            yield from self._block_entries()
        else:
            yield from self._record_entries()

    def _check_types(self) -> None:
        if self.expected_key_class and self.expected_key_class != self.header.key_class:
            raise TypeMismatchError(
                "key", self.expected_key_class, self.header.key_class, path=str(self.path)
            )
        if self.expected_value_class and self.expected_value_class != self.header.value_class:
            raise TypeMismatchError(
                "value", self.expected_value_class, self.header.value_class, path=str(self.path)
            )

    def _read_int_or_eof(self) -> Optional[int]:
        data = self._in.read(4)
        if not data:
            return None
        if len(data) != 4:
            raise ContainerFormatError(
                "Truncated record header", offset=self._in.position, path=str(self.path)
            )
        return _INT.unpack(data)[0]

    def _check_sync(self) -> None:
        offset = self._in.position
        marker = self._in.read_fully(SYNC_HASH_SIZE)
        if marker != self.header.sync_marker:
            raise ContainerFormatError(
                "File is corrupt: sync check failed", offset=offset, path=str(self.path)
            )

    def _record_entries(self) -> Iterator[ContainerEntry]:
        index = 0
        while True:
            length = self._read_int_or_eof()
            if length is None:
                return
            if length == SYNC_ESCAPE:
                self._check_sync()
                length = self._read_int_or_eof()
                if length is None:
                    return
            key_length = self._in.read_int()
            if length < 0 or not 0 <= key_length <= length:
                raise ContainerFormatError(
                    f"Invalid record lengths (record={length}, key={key_length})",
                    offset=self._in.position, path=str(self.path),
                )
            key_bytes = self._in.read_fully(key_length)
            value_bytes = self._in.read_fully(length - key_length)
            if self.header.compression is CompressionType.RECORD:
                value_bytes = _decompress(self.header.codec, value_bytes)
            yield self._decode(index, key_bytes, value_bytes)
            index += 1

    def _read_buffer(self) -> bytes:
        length = self._in.read_vint()
        return _decompress(self.header.codec, self._in.read_fully(length))

    def _block_entries(self) -> Iterator[ContainerEntry]:
        index = 0
        while True:
            escape = self._read_int_or_eof()
            if escape is None:
                return
            if escape != SYNC_ESCAPE:
                raise ContainerFormatError(
                    "Missing sync escape before compressed block",
                    offset=self._in.position, path=str(self.path),
                )
            self._check_sync()
            count = self._in.read_vint()
            key_lengths = DataInput.from_bytes(self._read_buffer())
            keys = self._read_buffer()
            value_lengths = DataInput.from_bytes(self._read_buffer())
            values = self._read_buffer()

            key_pos = value_pos = 0
            for _ in range(count):
                key_length = key_lengths.read_vint()
                value_length = value_lengths.read_vint()
                key_bytes = keys[key_pos:key_pos + key_length]
                value_bytes = values[value_pos:value_pos + value_length]
                if len(key_bytes) != key_length or len(value_bytes) != value_length:
                    raise ContainerFormatError(
                        "Compressed block shorter than its length table", path=str(self.path)
                    )
                key_pos += key_length
                value_pos += value_length
                yield self._decode(index, key_bytes, value_bytes)
                index += 1

    def _decode(self, index: int, key_bytes: bytes, value_bytes: bytes) -> ContainerEntry:
        return ContainerEntry(
            index=index,
            key=self.key_writable.from_bytes(key_bytes),
            value=self.value_writable.from_bytes(value_bytes),
        )
