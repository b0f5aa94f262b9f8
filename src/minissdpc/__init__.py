"""
Module providing a client for minissdpd, the SSDP daemon, over its Unix socket.

Requests are a single request type byte followed by length prefixed strings.
A service is registered with its type, unique service name, server banner and
location:

.. code

    04 | 1d urn:Dummy:device:controllee:1 | 04 1234 | 09 Dummy 1.0 | 1a http://127.0.0.1/setup.xml

Queries are answered with a count byte followed by that many services, each
made of its location, type and unique service name.

The :class:`Client` class holds the connection to the daemon and provides the
requests, while :mod:`minissdpc.codec` and :mod:`minissdpc.service` implement
the encoding.
"""

from minissdpc.client import Client, RequestType, DEFAULT_SOCKET
from minissdpc.codec import (
    MAX_LENGTH,
    MAX_LENGTH_BYTES,
    decode_length,
    encode_length,
    encoded_length,
)
from minissdpc.errors import (
    MinissdpError,
    InvalidLengthError,
    LengthTooLongError,
    NilConnectionError,
    AlreadyOpenError,
    TransportError,
    MalformedFieldError,
)
from minissdpc.service import Service, decode_services

__version__ = "1.0.0"
