# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client Transport Interfaces

Provides:
- Base classes for control and data channels
- asyncio TCP control channel
- asyncio UDP data channel
"""

from .transport import (
    AsyncControlTransport,
    AsyncDataTransport
)
from .tcp import AsyncTCPControlTransport
from .udp import AsyncUDPDataTransport

__all__ = [
    'AsyncControlTransport',
    'AsyncDataTransport',
    'AsyncTCPControlTransport',
    'AsyncUDPDataTransport',
]
