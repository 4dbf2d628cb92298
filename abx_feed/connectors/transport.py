"""
Transport Session - One TCP connection to the feed server.

The protocol has no framing: message boundaries are implied by fixed sizes
(2-byte requests, 17-byte records). ``receive_exact`` therefore never returns
a short read. Orderly closure, including closure part-way through a record,
is reported as ``None`` ("no more data"); every other failure raises
ReceiveError.

Usage:
    with TransportSession.open("127.0.0.1", 3000) as session:
        session.send(encode_request(Opcode.STREAM_ALL))
        while (data := session.receive_exact(RECORD_SIZE)) is not None:
            ...
"""

import socket
from typing import Callable, Optional

from ..core.exceptions import FeedConnectionError, SendError, ReceiveError
from ..monitoring.logger import get_logger


logger = get_logger(__name__)


class TransportSession:
    """
    Exclusive owner of one connected stream socket.
    
    Sessions are never shared between phases. ``close()`` is idempotent and
    is also called on leaving a ``with`` block, so every exit path releases
    the socket.
    """
    
    def __init__(self, sock: socket.socket, host: str, port: int):
        self._sock: Optional[socket.socket] = sock
        self.host = host
        self.port = port
    
    @classmethod
    def open(cls, host: str, port: int, timeout: Optional[float] = None) -> "TransportSession":
        """
        Connect to the feed server.
        
        No retry is attempted at this layer.
        
        Args:
            host: Server address
            port: Server port
            timeout: Per-operation timeout in seconds, or None to block forever
        
        Returns:
            Connected session
        
        Raises:
            FeedConnectionError if the socket cannot be created or connected
        """
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise FeedConnectionError(
                f"Connection to {host}:{port} failed: {e}",
                host=host,
                port=port,
                errno=e.errno
            )
        
        # create_connection applies the timeout to later operations too
        sock.settimeout(timeout)
        logger.debug("Connected", host=host, port=port)
        return cls(sock, host, port)
    
    @property
    def is_open(self) -> bool:
        return self._sock is not None
    
    def send(self, data: bytes) -> None:
        """
        Write all of ``data``.
        
        Raises:
            SendError if the socket is closed or the write fails
        """
        if self._sock is None:
            raise SendError("Send on closed session", host=self.host, port=self.port)
        
        try:
            self._sock.sendall(data)
        except OSError as e:
            raise SendError(f"Send failed: {e}", host=self.host, port=self.port, errno=e.errno)
    
    def receive_exact(self, size: int) -> Optional[bytes]:
        """
        Block until exactly ``size`` bytes have arrived.
        
        Interrupted reads are retried. A partial buffer left over when the
        peer closes is discarded.
        
        Returns:
            ``size`` bytes, or None if the peer closed the connection
        
        Raises:
            ReceiveError on any other read failure (including a timeout)
        """
        if self._sock is None:
            raise ReceiveError("Receive on closed session", host=self.host, port=self.port)
        
        buffer = bytearray()
        while len(buffer) < size:
            try:
                chunk = self._sock.recv(size - len(buffer))
            except InterruptedError:
                continue
            except OSError as e:
                raise ReceiveError(
                    f"Receive failed: {e}",
                    host=self.host,
                    port=self.port,
                    received=len(buffer),
                    expected=size
                )
            
            if not chunk:
                if buffer:
                    logger.debug(
                        "Peer closed mid-record; discarding partial read",
                        received=len(buffer),
                        expected=size
                    )
                return None
            
            buffer.extend(chunk)
        
        return bytes(buffer)
    
    def close(self) -> None:
        """Release the socket. Safe to call more than once."""
        if self._sock is None:
            return
        
        sock, self._sock = self._sock, None
        try:
            sock.close()
        except OSError as e:
            logger.debug("Error closing socket", host=self.host, port=self.port, error=str(e))
    
    def __enter__(self) -> "TransportSession":
        return self
    
    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
    
    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"TransportSession({self.host}:{self.port}, {state})"


# Factory used by the orchestrator and recovery engine; tests substitute fakes.
TransportFactory = Callable[[str, int], TransportSession]


def default_transport_factory(timeout: Optional[float] = None) -> TransportFactory:
    """Return a factory opening real TCP sessions with the given timeout."""
    
    def factory(host: str, port: int) -> TransportSession:
        return TransportSession.open(host, port, timeout=timeout)
    
    return factory
