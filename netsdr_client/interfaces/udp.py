# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client.interfaces.udp.py

Asynchronous UDP data channel.

Binds the sample port while listening; each datagram is one data item frame.
"""

import asyncio
import logging
from typing import Optional

from .transport import AsyncDataTransport
from ..core.config import DEFAULT_DATA_PORT
from ..exceptions import TransportError

logger = logging.getLogger(__name__)


class _DatagramProtocol(asyncio.DatagramProtocol):
    def __init__(self, owner: "AsyncUDPDataTransport"):
        self._owner = owner

    def datagram_received(self, data: bytes, addr) -> None:
        self._owner._dispatch(data)

    def error_received(self, exc: Exception) -> None:
        self._owner._handle_error(TransportError(f"Receive error: {exc}"))


class AsyncUDPDataTransport(AsyncDataTransport):
    """
    Datagram endpoint delivering sample frames.

    Args:
        port: Local UDP port (default 60000)
        host: Local bind address
    """
    def __init__(self, port: int = DEFAULT_DATA_PORT, host: str = "0.0.0.0"):
        super().__init__()
        self.host = host
        self.port = port
        self._transport: Optional[asyncio.DatagramTransport] = None
        self._stop: Optional[asyncio.Event] = None

    @property
    def listening(self) -> bool:
        return self._transport is not None

    async def start_listening(self) -> None:
        """
        Bind and receive until stop_listening() is called.

        Raises:
            TransportError: Bind failed
        """
        if self.listening:
            return

        loop = asyncio.get_running_loop()
        self._stop = asyncio.Event()
        try:
            self._transport, _ = await loop.create_datagram_endpoint(
                lambda: _DatagramProtocol(self),
                local_addr=(self.host, self.port)
            )
        except OSError as e:
            self._stop = None
            raise TransportError(f"Cannot bind {self.host}:{self.port}: {e}") from e

        logger.info(f"Listening for samples on {self.host}:{self.port}")
        try:
            await self._stop.wait()
        finally:
            self._transport.close()
            self._transport = None
            self._stop = None
            logger.info(f"Stopped listening on {self.host}:{self.port}")

    def stop_listening(self) -> None:
        if self._stop is not None:
            self._stop.set()

    def __repr__(self) -> str:
        return (f"AsyncUDPDataTransport(host={self.host}, port={self.port}, "
                f"listening={self.listening})")
