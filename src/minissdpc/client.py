"""
A module containing a client for the minissdpd Unix socket protocol.
"""

import logging
from enum import IntEnum
from socket import socket, AF_UNIX, SOCK_STREAM
from typing import BinaryIO, Optional

from minissdpc.codec import encode_string, read_byte
from minissdpc.errors import AlreadyOpenError, NilConnectionError, TransportError
from minissdpc.service import Service, decode_services

DEFAULT_SOCKET = "/var/run/minissdpd.sock"

# An empty pair of filters, as expected by the daemon after a request for all services.
ALL_SERVICES_FILTER = bytes([0x01, 0x00])


class RequestType(IntEnum):
    """
    The first byte of every request, telling the daemon what is being asked for.
    """

    BY_TYPE = 1
    BY_USN = 2
    ALL = 3
    REGISTER = 4


class Client:
    """
    Client for a minissdpd daemon listening on a Unix socket.

    The client holds a single connection, which is reused for every request
    until it is closed. Requests are sent one at a time and answered before
    the next is sent, so a client must not be shared between threads.

    :param socket_path: Path of the daemon's socket. Defaults to :data:`DEFAULT_SOCKET`.
    """

    def __init__(self, socket_path: Optional[str] = None):
        if socket_path is None:
            socket_path = DEFAULT_SOCKET
        self.socket_path = socket_path
        self.logger = logging.getLogger(__name__)
        self._socket: Optional[socket] = None
        self._reader: Optional[BinaryIO] = None

    @property
    def is_open(self) -> bool:
        return self._socket is not None

    def connect(self):
        """
        Open the connection to the daemon.

        :raises AlreadyOpenError: if the connection is already open. The open
            connection is kept.
        :raises TransportError: if the socket could not be connected.
        """
        if self.is_open:
            raise AlreadyOpenError
        connection = socket(AF_UNIX, SOCK_STREAM)
        try:
            connection.connect(self.socket_path)
        except OSError as e:
            connection.close()
            raise TransportError(
                f"could not connect to socket {self.socket_path}: {e}"
            ) from e
        self._socket = connection
        self._reader = connection.makefile("rb")
        self.logger.debug(f"Connected to minissdpd at {self.socket_path}")

    def close(self):
        """
        Close the connection to the daemon. Does nothing if it is not open.
        """
        if not self.is_open:
            return
        self._reader.close()
        self._socket.close()
        self._reader = None
        self._socket = None
        self.logger.debug(f"Closed connection to minissdpd at {self.socket_path}")

    def set_timeout(self, timeout: Optional[float]):
        """
        Set a timeout, in seconds, on the blocking operations of the open
        connection. ``None`` blocks forever.

        An operation that times out raises :class:`TransportError`, after which
        the connection should be closed.
        """
        self._check_open()
        self._socket.settimeout(timeout)

    def write(self, data: bytes) -> int:
        """
        Write raw bytes to the daemon.

        :return: The number of bytes written.
        :raises NilConnectionError: if the connection is not open.
        """
        self._check_open()
        try:
            self._socket.sendall(data)
        except OSError as e:
            raise TransportError(f"could not write to minissdpd: {e}") from e
        return len(data)

    def write_string(self, value: str) -> int:
        """
        Write a string to the daemon, preceded by its length prefix.

        :return: The number of bytes written, prefix included.
        :raises NilConnectionError: if the connection is not open.
        """
        self._check_open()
        return encode_string(value, self)

    def register_service(self, service: Service):
        """
        Ask the daemon to advertise a new service. The daemon does not reply.
        """
        self._send_request_type(RequestType.REGISTER)
        written = service.encode_to(self)
        self.logger.debug(f"Registered service {service.usn} ({written} bytes)")

    def get_services_by_type(self, service_filter: str) -> list[Service]:
        """
        Get the services whose type matches the given filter.

        The response starts with a status byte. A zero status is taken to be
        the whole response and nothing more is read after it, so a daemon that
        follows a zero status with more bytes leaves them unread on the
        connection.
        """
        return self._get_filtered_services(RequestType.BY_TYPE, service_filter)

    def get_services_by_usn(self, service_filter: str) -> list[Service]:
        """
        Get the services whose unique service name matches the given filter.

        Answered like :meth:`get_services_by_type`, including the handling of
        a zero status byte.
        """
        return self._get_filtered_services(RequestType.BY_USN, service_filter)

    def get_services_all(self) -> list[Service]:
        """
        Get every service known to the daemon.
        """
        self._send_request_type(RequestType.ALL)
        self.write(ALL_SERVICES_FILTER)
        services = self._read(decode_services)
        self.logger.debug(f"Received {len(services)} services")
        return services

    def _get_filtered_services(
        self, request_type: RequestType, service_filter: str
    ) -> list[Service]:
        """
        Send a filtered query and read the status byte and any services after it.

        A zero status must be the whole response. Bytes following it are not
        consumed and would be read as the start of the next response.
        """
        self._send_request_type(request_type)
        self.write_string(service_filter)
        status = self._read(read_byte)
        # a zero status, or nothing after the status, means nothing matched
        if status == 0 or not self._read(lambda io: io.peek(1)):
            self.logger.debug(
                f"No services matching {request_type.name} {service_filter!r}"
            )
            return []
        services = self._read(decode_services)
        self.logger.debug(
            f"Received {len(services)} services matching {request_type.name} {service_filter!r}"
        )
        return services

    def _send_request_type(self, request_type: RequestType):
        self.logger.debug(f"Sending {request_type.name} request")
        self.write(bytes([request_type]))

    def _read(self, decode):
        self._check_open()
        try:
            return decode(self._reader)
        except OSError as e:
            raise TransportError(f"could not read from minissdpd: {e}") from e

    def _check_open(self):
        if not self.is_open:
            raise NilConnectionError

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
