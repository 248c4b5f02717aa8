# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client Core Module

Contains:
- Control message and sample frame codecs
- Single-slot response correlator
- Append-only sample sink
- Session engine and its configuration
"""

# Configuration
from .config import SessionConfig, DEFAULT_CONFIG

# Frame construction and parsing
from .messages import (
    MsgType,
    ControlItemCode,
    ControlCommand,
    ControlReply,
    encode_control_item,
    encode_data_item,
    decode_message,
)
from .samples import (
    DataFrame,
    decode_data_frame,
    expand_samples,
    pack_samples,
)

# Request/response and persistence
from .correlator import ResponseCorrelator
from .sink import SampleSink

# Session engine
from .session import (
    NetSDRSession,
    SessionState,
    CommandStatus,
    CommandResult,
)

# Public API
__all__ = [
    # Configuration
    'SessionConfig',
    'DEFAULT_CONFIG',

    # Codecs
    'MsgType',
    'ControlItemCode',
    'ControlCommand',
    'ControlReply',
    'encode_control_item',
    'encode_data_item',
    'decode_message',
    'DataFrame',
    'decode_data_frame',
    'expand_samples',
    'pack_samples',

    # Engine
    'ResponseCorrelator',
    'SampleSink',
    'NetSDRSession',
    'SessionState',
    'CommandStatus',
    'CommandResult',
]
