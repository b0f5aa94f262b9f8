from io import BytesIO

import pytest
from hypothesis import given

from minissdpc.codec import (
    MAX_LENGTH,
    MAX_LENGTH_BYTES,
    READ_CHUNK_SIZE,
    decode_length,
    encode_length,
    encode_string,
    encoded_length,
    read,
    read_string,
)
from minissdpc.errors import (
    InvalidLengthError,
    LengthTooLongError,
    MalformedFieldError,
    TransportError,
)
from minissdpc.testing.strategies import lengths

ENCODED_LENGTHS = [
    (0, bytes([0])),
    (1, bytes([1])),
    (127, bytes([127])),
    (128, bytes([129, 0])),
    (16383, bytes([0xFF, 0x7F])),
    (16384, bytes([0x81, 0x80, 0x00])),
    (268435456, bytes([129, 128, 128, 128, 0])),
    (MAX_LENGTH, bytes([0xFF, 0xFF, 0xFF, 0xFF, 0x7F])),
]


class BrokenStream:
    def write(self, data):
        raise BrokenPipeError("pipe closed")


class SizeRecordingStream(BytesIO):
    def __init__(self, data: bytes):
        super().__init__(data)
        self.sizes = []

    def read(self, size=-1):
        self.sizes.append(size)
        return super().read(size)


@pytest.mark.parametrize("length, encoded", ENCODED_LENGTHS)
def test_encode_length(length, encoded):
    out = BytesIO()
    written = encode_length(length, out)
    assert out.getvalue() == encoded
    assert written == len(encoded)


@pytest.mark.parametrize("length, encoded", ENCODED_LENGTHS)
def test_decode_length(length, encoded):
    assert decode_length(BytesIO(encoded)) == length


@given(length=lengths())
def test_decode_encoded_length(length):
    assert decode_length(BytesIO(encoded_length(length))) == length


@given(length=lengths())
def test_encoded_length_is_minimal(length):
    expected_size = max(1, -(-length.bit_length() // 7))
    assert len(encoded_length(length)) == expected_size


def test_decode_length_leaves_following_bytes():
    io = BytesIO(bytes([0x81, 0x00, 0x2A]))
    assert decode_length(io) == 128
    assert io.read() == bytes([0x2A])


def test_negative_length():
    out = BytesIO()
    with pytest.raises(InvalidLengthError):
        encode_length(-1, out)
    assert out.getvalue() == b""


def test_negative_length_without_stream():
    """
    The length is checked before the stream.
    """
    with pytest.raises(InvalidLengthError):
        encode_length(-1, None)


def test_length_too_large():
    out = BytesIO()
    with pytest.raises(InvalidLengthError):
        encode_length(MAX_LENGTH + 1, out)
    assert out.getvalue() == b""


def test_missing_stream():
    with pytest.raises(TransportError):
        encode_length(1, None)


def test_broken_stream():
    with pytest.raises(TransportError) as error:
        encode_length(1, BrokenStream())
    assert isinstance(error.value.__cause__, BrokenPipeError)


@pytest.mark.parametrize("extra", [b"", b"\x00", b"\x80\x00"])
def test_decode_length_too_long(extra):
    io = BytesIO(bytes([0x80] * MAX_LENGTH_BYTES) + extra)
    with pytest.raises(LengthTooLongError):
        decode_length(io)
    # nothing past the maximum prefix size is consumed
    assert io.tell() == MAX_LENGTH_BYTES


@pytest.mark.parametrize("encoded", [b"", b"\x81", b"\x81\x80\x80"])
def test_decode_length_truncated(encoded):
    with pytest.raises(EOFError):
        decode_length(BytesIO(encoded))


def test_encode_string():
    out = BytesIO()
    written = encode_string("minissdp", out)
    assert out.getvalue() == b"\x08minissdp"
    assert written == len("minissdp") + 1


def test_encode_string_counts_utf8_bytes():
    out = BytesIO()
    written = encode_string("café", out)
    assert out.getvalue() == b"\x05caf\xc3\xa9"
    assert written == 6


def test_read_string():
    io = BytesIO(b"\x08minissdp\x00")
    assert read_string(io) == "minissdp"
    assert read_string(io) == ""


def test_read_string_truncated():
    with pytest.raises(EOFError):
        read_string(BytesIO(b"\x08mini"))


def test_read_short():
    with pytest.raises(EOFError):
        read(BytesIO(b"ab"), 3)


def test_read_string_invalid_utf8():
    with pytest.raises(MalformedFieldError) as error:
        read_string(BytesIO(b"\x02\xff\xfe"))
    assert isinstance(error.value.__cause__, UnicodeDecodeError)


def test_read_in_chunks():
    data = bytes(range(256)) * 1024
    io = SizeRecordingStream(data)
    assert read(io, len(data)) == data
    assert max(io.sizes) == READ_CHUNK_SIZE
    assert len(io.sizes) == len(data) // READ_CHUNK_SIZE


def test_read_huge_length_prefix_bounded():
    """
    A corrupt prefix claiming the largest length fails at the end of the
    stream without asking for the whole length in one read.
    """
    io = SizeRecordingStream(encoded_length(MAX_LENGTH) + b"minissdp")
    with pytest.raises(EOFError):
        read_string(io)
    assert max(io.sizes) <= READ_CHUNK_SIZE
