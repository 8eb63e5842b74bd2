"""
The compact binary format shared by every serialized ceremony artifact.

It is the postcard encoding of the FROST library objects exchanged by other
installations of the ceremony tool:

- a header made of a one byte format version and the four byte big-endian
  CRC-32 of the ciphersuite ID opens every library object, also when it is
  nested in another one,
- scalars and identifiers are 32-byte big-endian integers,
- group elements are 33-byte SEC 1 compressed points,
- lengths and small integers are unsigned LEB128 varints,
- maps are a varint entry count followed by entries sorted by identifier,
- optional values are a 0 or 1 tag byte, followed by the value when present.

The identifier-tagged commitments and signature share envelopes have no
header of their own, and the aggregate signature is the raw 65 bytes
`R || z`.
"""

import zlib
from typing import Callable, Dict, Optional, TypeVar
from .constants import CONTEXT, POINT_LENGTH, Q, SCALAR_LENGTH
from .errors import DeserializationError
from .point import Point

VERSION: int = 0
CIPHERSUITE_TAG: bytes = zlib.crc32(CONTEXT).to_bytes(4, "big")
HEADER: bytes = bytes([VERSION]) + CIPHERSUITE_TAG

T = TypeVar("T")

# Varints are capped at 32 bits, more than any length an artifact needs.
_MAX_VARINT_BYTES = 5


def serialize_scalar(value: int) -> bytes:
    return value.to_bytes(SCALAR_LENGTH, "big")


def deserialize_scalar(data: bytes) -> int:
    """
    Decode a canonical scalar.

    Raises:
    DeserializationError: If the input is not 32 bytes or encodes a value
    greater than or equal to the group order.
    """
    if len(data) != SCALAR_LENGTH:
        raise DeserializationError(f"scalar must be {SCALAR_LENGTH} bytes long")
    value = int.from_bytes(data, "big")
    if value >= Q:
        raise DeserializationError("scalar is not canonical")
    return value


def deserialize_point(data: bytes) -> Point:
    try:
        return Point.sec_deserialize(data)
    except ValueError as e:
        raise DeserializationError(f"invalid group element: {e}") from e


class Writer:
    """Accumulates the fields of an artifact in the compact format."""

    def __init__(self, header: bool = True):
        self._buffer = bytearray()
        if header:
            self.header()

    def header(self) -> "Writer":
        self._buffer += HEADER
        return self

    def scalar(self, value: int) -> "Writer":
        self._buffer += serialize_scalar(value)
        return self

    def identifier(self, value: int) -> "Writer":
        if not 0 < value < Q:
            raise ValueError("Identifier must be a non-zero scalar.")
        return self.scalar(value)

    def point(self, value: Point) -> "Writer":
        self._buffer += value.sec_serialize()
        return self

    def varint(self, value: int) -> "Writer":
        if value < 0:
            raise ValueError("Varints must be non-negative.")
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self._buffer.append(byte | 0x80)
            else:
                self._buffer.append(byte)
                return self

    def blob(self, value: bytes) -> "Writer":
        self.varint(len(value))
        self._buffer += value
        return self

    def optional_varint(self, value: Optional[int]) -> "Writer":
        if value is None:
            self._buffer.append(0)
            return self
        self._buffer.append(1)
        return self.varint(value)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class Reader:
    """
    Reads the fields of an artifact in the compact format.

    Every method raises DeserializationError when the input is truncated or
    a field is malformed, and `finish` rejects trailing bytes.
    """

    def __init__(self, data: bytes, header: bool = True, kind: Optional[str] = None):
        self._data = bytes(data)
        self._offset = 0
        self._kind = kind or "artifact"
        if header:
            self.header()

    def header(self) -> None:
        if self._take(len(HEADER)) != HEADER:
            raise DeserializationError(
                f"{self._kind} has an unknown version or ciphersuite"
            )

    def _take(self, length: int) -> bytes:
        end = self._offset + length
        if end > len(self._data):
            raise DeserializationError(f"{self._kind} is truncated")
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def scalar(self) -> int:
        return deserialize_scalar(self._take(SCALAR_LENGTH))

    def identifier(self) -> int:
        value = self.scalar()
        if value == 0:
            raise DeserializationError("identifier must not be zero")
        return value

    def point(self) -> Point:
        return deserialize_point(self._take(POINT_LENGTH))

    def varint(self) -> int:
        value = 0
        for i in range(_MAX_VARINT_BYTES):
            byte = self._take(1)[0]
            value |= (byte & 0x7F) << (7 * i)
            if not byte & 0x80:
                return value
        raise DeserializationError(f"{self._kind} contains an oversized varint")

    def blob(self) -> bytes:
        return self._take(self.varint())

    def identifier_map(self, read_value: Callable[["Reader"], T]) -> Dict[int, T]:
        """
        Read a map serialized as an entry count followed by entries in
        strictly increasing identifier order.
        """
        entries = {}
        previous = 0
        for _ in range(self.varint()):
            identifier = self.identifier()
            if identifier <= previous:
                raise DeserializationError(
                    f"{self._kind} has duplicated or unordered identifiers"
                )
            entries[identifier] = read_value(self)
            previous = identifier
        return entries

    def optional_varint(self) -> Optional[int]:
        tag = self._take(1)[0]
        if tag == 0:
            return None
        if tag != 1:
            raise DeserializationError(f"{self._kind} has an invalid option tag")
        return self.varint()

    def at_end(self) -> bool:
        return self._offset == len(self._data)

    def finish(self) -> None:
        if self._offset != len(self._data):
            raise DeserializationError(f"{self._kind} has trailing bytes")
