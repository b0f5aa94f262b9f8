"""
Errors raised by the minissdpd codec and client.
"""


class MinissdpError(Exception):
    """
    Base class for all errors raised by this package.
    """


class InvalidLengthError(MinissdpError, ValueError):
    """
    A length prefix was requested for a value that cannot be encoded.
    """

    def __init__(self, length: int):
        self.length = length

    def __str__(self) -> str:
        return f"invalid length: {self.length}"


class LengthTooLongError(MinissdpError, ValueError):
    """
    A length prefix read from a stream did not terminate within the maximum
    number of bytes.

    The peer may not be speaking the minissdpd protocol, or the stream may be
    corrupted.
    """

    def __init__(self, max_length_bytes: int):
        self.max_length_bytes = max_length_bytes

    def __str__(self) -> str:
        return f"length prefix longer than {self.max_length_bytes} bytes"


class NilConnectionError(MinissdpError):
    """
    Reading or writing was attempted on a client with no open connection.
    """

    def __str__(self) -> str:
        return "no connection to minissdpd, call connect first"


class AlreadyOpenError(MinissdpError, RuntimeError):
    """
    Connect was called on a client that already has an open connection.
    """

    def __str__(self) -> str:
        return "connection to minissdpd is already open"


class TransportError(MinissdpError):
    """
    An underlying socket or stream operation failed.

    The original :class:`OSError` is available as ``__cause__``.
    """


class MalformedFieldError(MinissdpError, ValueError):
    """
    A field read from a stream is not valid UTF-8.

    The original :class:`UnicodeDecodeError` is available as ``__cause__``.
    """
