"""
Module defining a Service, and its encoding on the minissdpd wire.
"""

from dataclasses import dataclass
from typing import BinaryIO, Optional

from minissdpc.codec import Writable, encode_string, read_byte, read_string


@dataclass(frozen=True)
class Service:
    """
    A service advertised by minissdpd.

    Services are registered with all four fields, but the daemon never sends
    the server banner back when answering a query, so decoded services always
    have an empty ``server``.
    """

    type: str
    usn: str
    server: str = ""
    location: str = ""

    def encode_to(self, out: Optional[Writable]) -> int:
        """
        Write this service as a registration record: type, usn, server and
        location, each with a length prefix.

        :param out: Stream to write the record to.
        :return: The number of bytes written.
        """
        written = 0
        for value in (self.type, self.usn, self.server, self.location):
            written += encode_string(value, out)
        return written


def decode_service(io: BinaryIO) -> Service:
    location = read_string(io)
    service_type = read_string(io)
    usn = read_string(io)
    return Service(type=service_type, usn=usn, location=location)


def decode_services(io: BinaryIO) -> list[Service]:
    """
    Read a count byte followed by that many service records from a stream.

    Records hold location, type and usn, in that order. If any record cannot
    be read the error propagates and no services are returned.

    :raises EOFError: if the stream ends part way through.
    :raises LengthTooLongError: if a field has a malformed length prefix.
    """
    count = read_byte(io)
    return [decode_service(io) for _ in range(count)]
