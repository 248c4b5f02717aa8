# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client.interfaces.transport.py

Base Transport Interfaces

Defines the abstract control channel (connection oriented, request/reply)
and data channel (connectionless sample feed) used by the session.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Callable

logger = logging.getLogger(__name__)

MessageCallback = Callable[[bytes], None]


class _MessageSource:
    """Shared 'message arrived' notification plumbing"""
    def __init__(self):
        self.on_message_received: Optional[MessageCallback] = None
        self.on_error: Optional[Callable[[Exception], None]] = None

    def _dispatch(self, data: bytes) -> None:
        """Deliver one inbound message to the subscriber"""
        if not self.on_message_received:
            logger.debug(f"{self!r}: no subscriber, dropping {len(data)} bytes")
            return
        try:
            self.on_message_received(data)
        except Exception as e:
            logger.exception(f"Message handler error: {e}")

    def _handle_error(self, error: Exception) -> None:
        """Internal error handling"""
        logger.error(f"Transport error: {error}")
        if self.on_error:
            try:
                self.on_error(error)
            except Exception as e:
                logger.error(f"Error callback failed: {e}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class AsyncControlTransport(_MessageSource, ABC):
    """
    Abstract base class for the control channel.

    Attributes:
        on_message_received: Called with each complete inbound frame
    """

    @property
    @abstractmethod
    def connected(self) -> bool:
        """True while the channel is open"""

    @abstractmethod
    async def connect(self) -> None:
        """Open the channel"""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the channel; must be safe when already closed"""

    @abstractmethod
    async def send_message(self, data: bytes) -> None:
        """
        Queue a frame for transmission.

        Returns once the bytes are accepted, not when a reply arrives.

        Raises:
            NotConnectedError: Channel closed
            TransportError: Write failed
        """

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


class AsyncDataTransport(_MessageSource, ABC):
    """
    Abstract base class for the sample data channel.

    Attributes:
        on_message_received: Called with each inbound datagram
    """

    @property
    @abstractmethod
    def listening(self) -> bool:
        """True while the receive loop runs"""

    @abstractmethod
    async def start_listening(self) -> None:
        """Run the receive loop until stop_listening() is called"""

    @abstractmethod
    def stop_listening(self) -> None:
        """Ask the receive loop to finish; safe when not listening"""
