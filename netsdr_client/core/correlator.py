# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client.core.correlator.py

Single-slot request/response rendezvous for the control channel.

The control channel carries both replies and unsolicited messages and the
protocol gives no reliable request tag, so the first frame to arrive while a
request is pending is taken as its reply. Only one request may be pending.
A reply arriving after its request timed out finds no pending slot and is
discarded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import async_timeout

from ..exceptions import (
    CommandInFlightError,
    NotConnectedError,
    RequestTimeoutError
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class ResponseCorrelator:
    """
    Pairs one outgoing control frame with the next inbound frame.

    Args:
        send_fn: Coroutine function transmitting a raw frame
        timeout: Seconds to wait for the reply
    """
    def __init__(
        self,
        send_fn: Callable[[bytes], Awaitable[None]],
        timeout: float = DEFAULT_TIMEOUT
    ):
        self._send_fn = send_fn
        self.timeout = timeout
        self._slot: Optional[asyncio.Future] = None

    @property
    def pending(self) -> bool:
        """True while a request awaits its reply"""
        return self._slot is not None and not self._slot.done()

    async def send(self, frame: bytes) -> bytes:
        """
        Transmit frame and wait for the next inbound control frame.

        Returns:
            Raw reply frame

        Raises:
            CommandInFlightError: Another request is still pending
            RequestTimeoutError: No reply inside the window
            TransportError: Propagated from send_fn
        """
        if self.pending:
            raise CommandInFlightError("A control request is already awaiting its reply")

        slot = asyncio.get_running_loop().create_future()
        self._slot = slot
        try:
            await self._send_fn(frame)
            async with async_timeout.timeout(self.timeout):
                return await slot
        except asyncio.TimeoutError:
            logger.debug(f"No reply within {self.timeout}s for {bytes(frame).hex()}")
            raise RequestTimeoutError(f"No reply within {self.timeout}s") from None
        finally:
            if not slot.done():
                slot.cancel()
            if self._slot is slot:
                self._slot = None

    def resolve(self, frame: bytes) -> bool:
        """
        Hand an inbound frame to the pending request.

        Returns:
            True if a request consumed the frame, False if none was pending
        """
        slot = self._slot
        if slot is None or slot.done():
            return False
        self._slot = None
        slot.set_result(bytes(frame))
        return True

    def cancel(self) -> None:
        """Fail the pending request with NotConnectedError, if any"""
        slot, self._slot = self._slot, None
        if slot is not None and not slot.done():
            slot.set_exception(NotConnectedError("Control channel closed while awaiting reply"))
            logger.debug("Pending control request abandoned")

    def __repr__(self) -> str:
        return f"ResponseCorrelator(timeout={self.timeout}, pending={self.pending})"
