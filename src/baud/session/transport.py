"""
Telnet transport.

Wraps a telnetlib3 client connection as a plain duplex byte stream.
Option negotiation (echo, suppress go-ahead, terminal type, window
size) happens inside telnetlib3; the session engine only ever sees
application bytes.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Protocol

import telnetlib3

from baud.exceptions import ConnectionTimeoutError, NotConnectedError, TransportError
from baud.logging import get_logger

if TYPE_CHECKING:
    from telnetlib3 import TelnetReader, TelnetWriter

logger = get_logger(__name__)


class Transport(Protocol):
    """Duplex byte stream to the remote system."""

    @property
    def is_connected(self) -> bool: ...

    async def read_chunk(self, size: int = 4096) -> bytes: ...

    async def write(self, data: bytes) -> None: ...

    def close(self) -> None: ...


class TelnetTransport:
    """
    Telnet connection to a BBS.

    Example:
        >>> transport = await TelnetTransport.connect("bbs.example.com", 23)
        >>> async with transport:
        ...     await transport.write(b"guest\\r\\n")
        ...     data = await transport.read_chunk()
    """

    def __init__(
        self,
        reader: TelnetReader,
        writer: TelnetWriter,
        host: str = "",
        port: int = 23,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._host = host
        self._port = port
        self._connected = True
        self._closed = False

    @classmethod
    async def connect(
        cls,
        host: str,
        port: int = 23,
        *,
        timeout: float = 30.0,
        term: str = "VT100",
        cols: int = 80,
        rows: int = 24,
    ) -> TelnetTransport:
        """
        Open a telnet connection.

        Args:
            host: Hostname or IP address.
            port: TCP port.
            timeout: Seconds to wait for the connection.
            term: Terminal type announced to the server.
            cols: Window width announced to the server.
            rows: Window height announced to the server.

        Returns:
            Connected transport.

        Raises:
            ConnectionTimeoutError: If the server does not answer in time.
            TransportError: If the connection is refused or fails.
        """
        logger.debug(f"Connecting to {host}:{port} (term={term}, {cols}x{rows})")
        try:
            reader, writer = await asyncio.wait_for(
                telnetlib3.open_connection(
                    host,
                    port,
                    encoding=False,
                    term=term,
                    cols=cols,
                    rows=rows,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise ConnectionTimeoutError(host, port, timeout, cause=e) from e
        except OSError as e:
            raise TransportError(
                f"Could not connect to {host}:{port}: {e.strerror or e}", cause=e
            ) from e

        logger.info(f"Connected to {host}:{port}")
        return cls(reader, writer, host=host, port=port)

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def is_connected(self) -> bool:
        """True until the connection is closed by either side."""
        return self._connected and not self._reader.at_eof()

    async def read_chunk(self, size: int = 4096) -> bytes:
        """
        Read up to ``size`` bytes.

        Returns:
            Received bytes, or b"" once the remote closed the connection.

        Raises:
            NotConnectedError: If the transport was closed locally.
            TransportError: If the read fails.
        """
        if not self._connected:
            raise NotConnectedError()

        try:
            data = await self._reader.read(size)
        except OSError as e:
            self._connected = False
            raise TransportError(f"Error reading from BBS: {e}", cause=e) from e

        if not data:
            logger.debug("Remote closed the connection")
            self._connected = False
        return data

    async def write(self, data: bytes) -> None:
        """
        Send bytes to the remote.

        Raises:
            NotConnectedError: If the transport is closed.
            TransportError: If the write fails.
        """
        if not self._connected:
            raise NotConnectedError()

        try:
            self._writer.write(data)
            await self._writer.drain()
        except OSError as e:
            self._connected = False
            raise TransportError(f"Error writing to BBS: {e}", cause=e) from e

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._closed:
            return

        self._closed = True
        self._connected = False
        try:
            self._writer.close()
        except OSError as e:
            logger.debug(f"Error closing connection: {e}")
        logger.debug(f"Closed connection to {self._host}:{self._port}")

    async def __aenter__(self) -> TelnetTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "connected" if self._connected else "closed"
        return f"TelnetTransport({self._host}:{self._port}, {state})"


__all__ = ["Transport", "TelnetTransport"]
