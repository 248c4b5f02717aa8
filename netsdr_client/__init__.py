# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client - asyncio client for NetSDR receivers

Provides:
- NetSDR control message and data frame codecs
- TCP control / UDP data transports
- Session engine with IQ capture to file
"""

__version__ = "0.1.0"

from .core.config import SessionConfig, DEFAULT_CONFIG
from .core.messages import MsgType, ControlItemCode
from .core.session import (
    NetSDRSession,
    SessionState,
    CommandStatus,
    CommandResult
)
from .core.sink import SampleSink

from .interfaces import (
    AsyncControlTransport,
    AsyncDataTransport,
    AsyncTCPControlTransport,
    AsyncUDPDataTransport
)

from .exceptions import (
    NetSDRError,
    TransportError,
    NotConnectedError,
    ProtocolError,
    MalformedFrameError,
    RequestTimeoutError,
    CommandInFlightError,
    SinkIOError,
    ConfigurationError
)

__all__ = [
    # Core
    'SessionConfig',
    'DEFAULT_CONFIG',
    'MsgType',
    'ControlItemCode',
    'NetSDRSession',
    'SessionState',
    'CommandStatus',
    'CommandResult',
    'SampleSink',

    # Interfaces
    'AsyncControlTransport',
    'AsyncDataTransport',
    'AsyncTCPControlTransport',
    'AsyncUDPDataTransport',

    # Exceptions
    'NetSDRError',
    'TransportError',
    'NotConnectedError',
    'ProtocolError',
    'MalformedFrameError',
    'RequestTimeoutError',
    'CommandInFlightError',
    'SinkIOError',
    'ConfigurationError',

    # Utilities
    'configure_logging',
    'get_version',

    # Metadata
    '__version__'
]


def configure_logging(level: str = "INFO") -> None:
    """
    Configure package-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    import logging
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )


def get_version() -> str:
    """Return the package version."""
    return __version__
