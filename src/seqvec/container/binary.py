"""Big-endian primitives shared by the SequenceFile codec and its Writables.

Covers the java.io.DataOutput subset used by Hadoop and Mahout, Hadoop's
zero-compressed VLong (``WritableUtils``) and Mahout's unsigned LEB128
varints (``Varint``).
"""

import io
import struct
from typing import BinaryIO, Optional

from seqvec.domain.exceptions import ContainerFormatError, SerializationError

_INT = struct.Struct(">i")
_LONG = struct.Struct(">q")
_FLOAT = struct.Struct(">f")
_DOUBLE = struct.Struct(">d")
_SHORT = struct.Struct(">H")

MAX_UTF_LENGTH = 65535


def encode_modified_utf8(text: str) -> bytes:
    """Encode ``text`` the way ``DataOutput.writeUTF`` does, without the length prefix."""
    units = text.encode("utf-16-be", "surrogatepass")
    out = bytearray()
    for i in range(0, len(units), 2):
        c = (units[i] << 8) | units[i + 1]
        if 0x0001 <= c <= 0x007F:
            out.append(c)
        elif c <= 0x07FF:
            out += bytes((0xC0 | (c >> 6), 0x80 | (c & 0x3F)))
        else:
            out += bytes((0xE0 | (c >> 12), 0x80 | ((c >> 6) & 0x3F), 0x80 | (c & 0x3F)))
    return bytes(out)


def decode_modified_utf8(data: bytes) -> str:
    units = []
    i = 0
    n = len(data)
    while i < n:
        b = data[i]
        if b < 0x80:
            units.append(b)
            i += 1
        elif b & 0xE0 == 0xC0 and i + 1 < n and data[i + 1] & 0xC0 == 0x80:
            units.append(((b & 0x1F) << 6) | (data[i + 1] & 0x3F))
            i += 2
        elif (
            b & 0xF0 == 0xE0 and i + 2 < n
            and data[i + 1] & 0xC0 == 0x80 and data[i + 2] & 0xC0 == 0x80
        ):
            units.append(((b & 0x0F) << 12) | ((data[i + 1] & 0x3F) << 6) | (data[i + 2] & 0x3F))
            i += 3
        else:
            raise SerializationError(f"Malformed modified UTF-8 input around byte {i}")
    return struct.pack(f">{len(units)}H", *units).decode("utf-16-be", "surrogatepass")


class DataOutput:
    """Growable big-endian output buffer."""

    def __init__(self):
        self._buf = bytearray()

    def __len__(self) -> int:
        return len(self._buf)

    def getvalue(self) -> bytes:
        return bytes(self._buf)

    def write(self, data: bytes) -> None:
        self._buf += data

    def write_byte(self, value: int) -> None:
        self._buf.append(value & 0xFF)

    def write_boolean(self, value: bool) -> None:
        self.write_byte(1 if value else 0)

    def write_int(self, value: int) -> None:
        self._buf += _INT.pack(value)

    def write_long(self, value: int) -> None:
        self._buf += _LONG.pack(value)

    def write_float(self, value: float) -> None:
        self._buf += _FLOAT.pack(value)

    def write_double(self, value: float) -> None:
        self._buf += _DOUBLE.pack(value)

    def write_utf(self, text: str) -> None:
        encoded = encode_modified_utf8(text)
        if len(encoded) > MAX_UTF_LENGTH:
            raise SerializationError(
                f"Encoded string too long: {len(encoded)} bytes"
            ).add_suggestion(f"Keep names under {MAX_UTF_LENGTH} encoded bytes")
        self._buf += _SHORT.pack(len(encoded))
        self._buf += encoded

    def write_vlong(self, value: int) -> None:
        """Hadoop ``WritableUtils.writeVLong``."""
        if -112 <= value <= 127:
            self.write_byte(value)
            return
        length = -112
        if value < 0:
            value ^= -1
            length = -120
        tmp = value
        while tmp != 0:
            tmp >>= 8
            length -= 1
        self.write_byte(length)
        length = -(length + 120) if length < -120 else -(length + 112)
        for idx in range(length, 0, -1):
            self.write_byte(value >> ((idx - 1) * 8))

    write_vint = write_vlong

    def write_unsigned_varint(self, value: int) -> None:
        """Mahout ``Varint.writeUnsignedVarInt``."""
        if value < 0:
            raise SerializationError(f"Unsigned varint cannot encode {value}")
        while value & ~0x7F:
            self.write_byte((value & 0x7F) | 0x80)
            value >>= 7
        self.write_byte(value)


class DataInput:
    """Big-endian reader over a binary stream."""

    def __init__(self, stream: BinaryIO, position: int = 0):
        self._stream = stream
        self.position = position

    @classmethod
    def from_bytes(cls, data: bytes) -> "DataInput":
        return cls(io.BytesIO(data))

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; may return fewer at end of stream."""
        data = self._stream.read(size)
        self.position += len(data)
        return data

    def read_fully(self, size: int) -> bytes:
        if size < 0:
            raise ContainerFormatError(f"Negative length {size}", offset=self.position)
        data = self.read(size)
        if len(data) != size:
            raise ContainerFormatError(
                f"Unexpected end of data: wanted {size} bytes, got {len(data)}",
                offset=self.position,
            )
        return data

    def remaining(self) -> Optional[int]:
        """Bytes left when the stream is an in-memory buffer, else None."""
        if isinstance(self._stream, io.BytesIO):
            return len(self._stream.getbuffer()) - self._stream.tell()
        return None

    def read_byte(self) -> int:
        b = self.read_fully(1)[0]
        return b - 256 if b > 127 else b

    def read_unsigned_byte(self) -> int:
        return self.read_fully(1)[0]

    def read_boolean(self) -> bool:
        return self.read_unsigned_byte() != 0

    def read_int(self) -> int:
        return _INT.unpack(self.read_fully(4))[0]

    def read_long(self) -> int:
        return _LONG.unpack(self.read_fully(8))[0]

    def read_float(self) -> float:
        return _FLOAT.unpack(self.read_fully(4))[0]

    def read_double(self) -> float:
        return _DOUBLE.unpack(self.read_fully(8))[0]

    def read_utf(self) -> str:
        length = _SHORT.unpack(self.read_fully(2))[0]
        return decode_modified_utf8(self.read_fully(length))

    def read_vlong(self) -> int:
        """Hadoop ``WritableUtils.readVLong``."""
        first = self.read_byte()
        if first >= -112:
            return first
        size = (-119 - first) if first < -120 else (-111 - first)
        value = 0
        for _ in range(size - 1):
            value = (value << 8) | self.read_unsigned_byte()
        return value ^ -1 if first < -120 else value

    read_vint = read_vlong

    def read_unsigned_varint(self) -> int:
        value = 0
        shift = 0
        b = self.read_unsigned_byte()
        while b & 0x80:
            value |= (b & 0x7F) << shift
            shift += 7
            if shift > 35:
                raise SerializationError("Variable length quantity is too long")
            b = self.read_unsigned_byte()
        return value | (b << shift)
