# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
tests/conftest.py

Provides:
- Logging configuration for all tests
- In-memory control and data transports
- Session fixtures wired to the fakes
"""

import asyncio
import logging
from typing import Generator, List, Optional

import pytest

from netsdr_client.core.config import SessionConfig
from netsdr_client.core.session import NetSDRSession
from netsdr_client.exceptions import NotConnectedError
from netsdr_client.interfaces.transport import (
    AsyncControlTransport,
    AsyncDataTransport
)


class FakeControlTransport(AsyncControlTransport):
    """
    Control channel that records sent frames.

    With echo enabled every sent frame is delivered straight back as the
    reply, the way the receiver acknowledges a set request with the new value.
    """
    def __init__(self, echo: bool = True):
        super().__init__()
        self.echo = echo
        self.sent: List[bytes] = []
        self.connect_calls = 0
        self.disconnect_calls = 0
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self.connect_calls += 1
        self._connected = True

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self._connected = False

    async def send_message(self, data: bytes) -> None:
        if not self._connected:
            raise NotConnectedError("Not connected")
        self.sent.append(bytes(data))
        if self.echo:
            self._dispatch(bytes(data))

    def deliver(self, frame: bytes) -> None:
        """Simulate an inbound control frame"""
        self._dispatch(frame)


class FakeDataTransport(AsyncDataTransport):
    """Data channel whose receive loop idles until stopped"""
    def __init__(self):
        super().__init__()
        self.start_calls = 0
        self.stop_calls = 0
        self._stop: Optional[asyncio.Event] = None

    @property
    def listening(self) -> bool:
        return self._stop is not None

    async def start_listening(self) -> None:
        self.start_calls += 1
        self._stop = asyncio.Event()
        try:
            await self._stop.wait()
        finally:
            self._stop = None

    def stop_listening(self) -> None:
        self.stop_calls += 1
        if self._stop is not None:
            self._stop.set()

    def deliver(self, frame: bytes) -> None:
        """Simulate an inbound datagram"""
        self._dispatch(frame)


@pytest.fixture(scope="session", autouse=True)
def configure_logging() -> Generator[None, None, None]:
    """Configure logging for all tests"""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    yield


@pytest.fixture
def control() -> FakeControlTransport:
    return FakeControlTransport()


@pytest.fixture
def data() -> FakeDataTransport:
    return FakeDataTransport()


@pytest.fixture
def config(tmp_path) -> SessionConfig:
    return SessionConfig(
        samples_path=str(tmp_path / "samples.bin"),
        response_timeout=0.2,
    )


@pytest.fixture
def session(control, data, config) -> NetSDRSession:
    return NetSDRSession(control, data, config)


def pytest_configure(config: pytest.Config) -> None:
    """Pytest configuration hook"""
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers",
        "network: mark test that opens loopback sockets"
    )
