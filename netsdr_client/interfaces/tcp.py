# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client.interfaces.tcp.py

Asynchronous TCP control channel.

Splits the inbound byte stream into NetSDR frames using the 13-bit length
field of each header and delivers every frame through on_message_received.
"""

import asyncio
import logging
from typing import Optional

import async_timeout

from .transport import AsyncControlTransport
from ..core.config import DEFAULT_CONTROL_PORT
from ..core.messages import HEADER_SIZE, unpack_header
from ..exceptions import (
    MalformedFrameError,
    NotConnectedError,
    TransportError
)

logger = logging.getLogger(__name__)


class AsyncTCPControlTransport(AsyncControlTransport):
    """
    asyncio streams based control channel.

    Args:
        host: Receiver hostname/IP
        port: Control port (default 50000)
        timeout: Connect timeout in seconds
    """
    def __init__(
        self,
        host: str,
        port: int = DEFAULT_CONTROL_PORT,
        timeout: float = 5.0
    ):
        super().__init__()
        self.host = host
        self.port = port
        self.timeout = timeout
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._receive_task: Optional[asyncio.Task] = None
        self._connect_lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    async def connect(self) -> None:
        """
        Connect to the receiver control port.

        Overlapping calls share one connection attempt; a caller arriving
        while another is connecting returns once that attempt is settled.

        Raises:
            TransportError: Connection refused or timed out
        """
        async with self._connect_lock:
            if self.connected:
                return

            try:
                async with async_timeout.timeout(self.timeout):
                    reader, writer = await asyncio.open_connection(
                        self.host, self.port
                    )
            except (OSError, asyncio.TimeoutError) as e:
                raise TransportError(f"Connection to {self.host}:{self.port} failed: {e}") from e

            self._reader, self._writer = reader, writer
            self._receive_task = asyncio.create_task(
                self._receive_loop(reader, writer),
                name=f"NetSDR-TCP-{self.host}:{self.port}"
            )
            logger.info(f"Connected to {self.host}:{self.port}")

    async def disconnect(self) -> None:
        """Close the connection"""
        task, self._receive_task = self._receive_task, None
        if task and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.error(f"Receive task ended with error: {e}")
        writer, self._writer = self._writer, None
        self._reader = None
        if writer:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug(f"Error while closing socket: {e}")
            logger.info(f"Disconnected from {self.host}:{self.port}")

    async def send_message(self, data: bytes) -> None:
        if not self.connected:
            raise NotConnectedError("Not connected")

        try:
            self._writer.write(data)
            await self._writer.drain()
            logger.debug(f"Sent {len(data)} bytes: {bytes(data).hex(' ')}")
        except OSError as e:
            raise TransportError(f"Send failed: {e}") from e

    @staticmethod
    async def _read_frame(reader: asyncio.StreamReader) -> bytes:
        """Read exactly one frame from the stream"""
        header = await reader.readexactly(HEADER_SIZE)
        _, length = unpack_header(header)
        if length < HEADER_SIZE:
            raise MalformedFrameError(f"Impossible frame length {length}")
        body = await reader.readexactly(length - HEADER_SIZE)
        return header + body

    async def _receive_loop(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter
    ) -> None:
        """Main receive loop for one connection"""
        while True:
            try:
                frame = await self._read_frame(reader)
            except asyncio.CancelledError:
                raise
            except asyncio.IncompleteReadError:
                logger.info(f"Connection closed by {self.host}:{self.port}")
                break
            except MalformedFrameError as e:
                # No resync point after a bad length; the connection is dropped
                self._handle_error(e)
                break
            except OSError as e:
                self._handle_error(TransportError(f"Receive error: {e}"))
                break

            logger.debug(f"Received {len(frame)} bytes: {frame.hex(' ')}")
            self._dispatch(frame)

        writer.close()

    def __repr__(self) -> str:
        return (f"AsyncTCPControlTransport(host={self.host}, port={self.port}, "
                f"connected={self.connected})")
