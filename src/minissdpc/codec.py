"""
Length prefix codec for the minissdpd protocol.

Every variable length field on the wire is preceded by its length, encoded as
big-endian groups of 7 bits. Each byte except the last has its high bit set
to signal that more bytes follow:

.. code::

    0         -> 00
    127       -> 7f
    128       -> 81 00
    268435456 -> 81 80 80 80 00

A length prefix is at most :data:`MAX_LENGTH_BYTES` bytes long, which bounds
the lengths that can be represented to :data:`MAX_LENGTH`.
"""

from typing import BinaryIO, Optional, Protocol

from minissdpc.errors import (
    InvalidLengthError,
    LengthTooLongError,
    MalformedFieldError,
    TransportError,
)

MAX_LENGTH_BYTES = 5
MAX_LENGTH = 2 ** (7 * MAX_LENGTH_BYTES) - 1

CONTINUATION_BIT = 0x80
PAYLOAD_MASK = 0x7F

# upper bound on the size of a single read from a stream
READ_CHUNK_SIZE = 64 * 1024


class Writable(Protocol):
    def write(self, data: bytes) -> Optional[int]: ...


def encoded_length(length: int) -> bytes:
    """
    Return the minimal length prefix for the given length.

    :param length: A non-negative length, at most :data:`MAX_LENGTH`.
    :raises InvalidLengthError: if the length is negative or too large to encode.
    """
    if length < 0 or length > MAX_LENGTH:
        raise InvalidLengthError(length)

    groups = [length & PAYLOAD_MASK]
    length >>= 7
    while length:
        groups.append(length & PAYLOAD_MASK | CONTINUATION_BIT)
        length >>= 7
    return bytes(reversed(groups))


def encode_length(length: int, out: Optional[Writable]) -> int:
    """
    Write the length prefix for the given length to a stream.

    :param length: A non-negative length, at most :data:`MAX_LENGTH`.
    :param out: Stream to write the prefix to.
    :return: The number of bytes written.
    :raises InvalidLengthError: if the length cannot be encoded. Nothing is written.
    :raises TransportError: if there is no stream, or writing to it fails.
    """
    buffer = encoded_length(length)
    write_all(out, buffer)
    return len(buffer)


def encode_string(value: str, out: Optional[Writable]) -> int:
    """
    Write a string to a stream as its length prefix followed by its UTF-8 bytes.

    :return: The number of bytes written, prefix included.
    """
    payload = value.encode("utf-8")
    written = encode_length(len(payload), out)
    write_all(out, payload)
    return written + len(payload)


def write_all(out: Optional[Writable], buffer: bytes):
    if out is None:
        raise TransportError("could not write to buffer: no output stream")
    try:
        out.write(buffer)
    except OSError as e:
        raise TransportError(f"could not write to buffer: {e}") from e


def decode_length(io: BinaryIO) -> int:
    """
    Read a length prefix from a stream.

    :raises LengthTooLongError: if the prefix does not end within
        :data:`MAX_LENGTH_BYTES` bytes. No more than that is read.
    :raises EOFError: if the stream ends before the prefix does.
    """
    length = 0
    for _ in range(MAX_LENGTH_BYTES):
        byte = read_byte(io)
        length = length << 7 | byte & PAYLOAD_MASK
        if not byte & CONTINUATION_BIT:
            return length
    raise LengthTooLongError(MAX_LENGTH_BYTES)


def read_string(io: BinaryIO) -> str:
    """
    Read a length prefixed UTF-8 string from a stream.

    :raises MalformedFieldError: if the bytes read are not valid UTF-8.
    """
    length = decode_length(io)
    payload = read(io, length)
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedFieldError(f"field is not valid UTF-8: {e}") from e


def read_byte(io: BinaryIO) -> int:
    return read(io, 1)[0]


def read(io: BinaryIO, count: int) -> bytes:
    """
    Read exactly ``count`` bytes, at most :data:`READ_CHUNK_SIZE` at a time.

    :raises EOFError: if the stream ends first.
    """
    buffer = bytearray()
    while len(buffer) < count:
        chunk = io.read(min(count - len(buffer), READ_CHUNK_SIZE))
        if not chunk:
            raise EOFError(f"expected {count} bytes, stream ended after {len(buffer)}")
        buffer += chunk
    return bytes(buffer)
