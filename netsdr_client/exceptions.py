# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client.exceptions.py

Exception hierarchy for the NetSDR client.

Codecs, the correlator and the transports raise these. The session engine
catches them at its public boundary and reports failed results instead.
"""


class NetSDRError(Exception):
    """Base exception for all NetSDR client errors"""


class TransportError(NetSDRError):
    """Socket-level failure on the control or data channel"""


class NotConnectedError(TransportError):
    """Send attempted without an active control connection"""


class ProtocolError(NetSDRError):
    """Base exception for wire-format problems"""


class MalformedFrameError(ProtocolError):
    """Frame too short, inconsistent length header or unknown code"""


class RequestTimeoutError(NetSDRError):
    """No reply arrived inside the response window"""


class CommandInFlightError(NetSDRError):
    """A command was issued while another one is still awaiting its reply"""


class SinkIOError(NetSDRError):
    """Opening, writing or closing the sample file failed"""


class ConfigurationError(NetSDRError, ValueError):
    """Invalid configuration value"""


__all__ = [
    'NetSDRError',
    'TransportError',
    'NotConnectedError',
    'ProtocolError',
    'MalformedFrameError',
    'RequestTimeoutError',
    'CommandInFlightError',
    'SinkIOError',
    'ConfigurationError',
]
