"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket. microserve answers exactly one request
per connection and then closes it:

    accept ──► read_request() ──► send_response() ──► close()

TCP is a byte stream, so the request head can arrive in several recv()
chunks. read_request() buffers until it sees the blank line that ends the
headers (\r\n\r\n), the peer closes, or the size limit is hit.

=============================================================================
"""

import socket
import time
import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)


HEADER_TERMINATOR = b"\r\n\r\n"


@dataclass
class Connection:
    """
    A single client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used in log lines.
        created_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 8192
    timeout: Optional[float] = 30.0
    max_request_size: int = 1024 * 1024

    closed: bool = field(default=False, repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    def read_request(self) -> Optional[bytes]:
        """
        Read the request head.

        Returns:
            The bytes received up to and including the header terminator,
            whatever arrived before the peer closed, or None if the peer
            closed without sending anything.

        Raises:
            TimeoutError: Nothing complete arrived within the timeout.
            ValueError: The request exceeds max_request_size.
        """
        buffer = b""

        try:
            while HEADER_TERMINATOR not in buffer:
                chunk = self._recv()
                if not chunk:
                    break

                buffer += chunk

                if len(buffer) > self.max_request_size:
                    raise ValueError(f"Request too large: {len(buffer)} bytes")
        except socket.timeout:
            raise TimeoutError("Request read timeout")

        if not buffer:
            return None

        end = buffer.find(HEADER_TERMINATOR)
        return buffer if end == -1 else buffer[:end + len(HEADER_TERMINATOR)]

    def _recv(self) -> bytes:
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    def send_response(self, data: bytes) -> bool:
        """
        Send the full response with sendall().

        Returns:
            True if sent, False if the peer went away.
        """
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def close(self):
        """
        Close the connection: shutdown(SHUT_WR) sends our FIN, whatever the
        client still sends is drained, then the socket is released. Closing
        with unread data would reset the connection under the client.

        Safe to call twice.
        """
        if self.closed:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # peer already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            self.socket.close()
        except OSError:
            pass

        self.closed = True
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
