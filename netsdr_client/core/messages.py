# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client.core.messages.py

NetSDR control message encoding/decoding.

Every frame starts with a 16-bit little-endian header: the low 13 bits hold
the total frame length (header included), the high 3 bits the message type.
Control items follow the header with a 2-byte item code, data items with a
2-byte sequence number.

Handles:
- Header packing/unpacking, including the 8194-byte data item special case
- Control item and data item frame construction
- Frame parsing into ControlReply tuples
- Builders for the receiver commands used by the session
"""

from __future__ import annotations

import struct
import logging
from enum import IntEnum
from typing import NamedTuple, Optional, Tuple

from ..exceptions import MalformedFrameError

logger = logging.getLogger(__name__)

# Constants
HEADER_SIZE = 2
ITEM_CODE_SIZE = 2
SEQUENCE_SIZE = 2
MAX_MESSAGE_LENGTH = 0x1FFF
MAX_DATA_ITEM_LENGTH = 8194  # Encoded as 0 in the length field
LENGTH_MASK = 0x1FFF
TYPE_SHIFT = 13


class MsgType(IntEnum):
    """NetSDR message types (high 3 bits of the header)"""
    SET_CONTROL_ITEM = 0        # Host sets an item / target replies with new value
    CURRENT_CONTROL_ITEM = 1    # Host requests current value / unsolicited update
    CONTROL_ITEM_RANGE = 2      # Host requests item range
    ACK = 3                     # Data item acknowledgement
    DATA_ITEM_0 = 4
    DATA_ITEM_1 = 5
    DATA_ITEM_2 = 6
    DATA_ITEM_3 = 7

    @property
    def is_data_item(self) -> bool:
        return self >= MsgType.DATA_ITEM_0


class ControlItemCode(IntEnum):
    """Control item codes used by the client"""
    RECEIVER_STATE = 0x0018
    RECEIVER_FREQUENCY = 0x0020
    RF_FILTER = 0x0044
    AD_MODES = 0x008A
    IQ_OUTPUT_DATA_SAMPLE_RATE = 0x00B8


# Receiver state parameter bytes
IQ_DATA_MODE = 0x80          # Complex I/Q data
RECEIVER_RUN = 0x02
RECEIVER_IDLE = 0x01
FIFO_16BIT_CAPTURE = 0x01
CONTIGUOUS_24BIT_CAPTURE = 0x80

# Capture mode byte for each sample width the receiver can stream
CAPTURE_MODES = {
    16: FIFO_16BIT_CAPTURE,
    24: CONTIGUOUS_24BIT_CAPTURE,
}


class ControlReply(NamedTuple):
    """Decoded NetSDR frame"""
    msg_type: MsgType
    item_code: Optional[ControlItemCode]  # None for data items
    sequence: Optional[int]               # None for control items
    body: bytes


class ControlCommand(NamedTuple):
    """Outgoing control item request"""
    msg_type: MsgType
    item_code: ControlItemCode
    parameters: bytes = b''

    def encode(self) -> bytes:
        """Return the wire frame for this command"""
        return encode_control_item(self.msg_type, self.item_code, self.parameters)

    def __repr__(self) -> str:
        return (f"ControlCommand({self.msg_type.name}, {self.item_code.name}, "
                f"params={self.parameters.hex()})")


def pack_header(msg_type: MsgType, length: int) -> bytes:
    """
    Build the 2-byte frame header.

    Args:
        msg_type: Message type
        length: Total frame length including the header

    Raises:
        MalformedFrameError: If the length cannot be represented
    """
    msg_type = MsgType(msg_type)
    if msg_type.is_data_item and length == MAX_DATA_ITEM_LENGTH:
        length = 0
    elif not 0 <= length <= MAX_MESSAGE_LENGTH:
        raise MalformedFrameError(f"Message length {length} exceeds {MAX_MESSAGE_LENGTH}")
    return struct.pack('<H', length | (int(msg_type) << TYPE_SHIFT))


def unpack_header(data: bytes) -> Tuple[MsgType, int]:
    """
    Parse the 2-byte frame header.

    Returns:
        (msg_type, total_length) with the 8194-byte data item case expanded
    """
    if len(data) < HEADER_SIZE:
        raise MalformedFrameError(f"Header needs {HEADER_SIZE} bytes, got {len(data)}")
    (word,) = struct.unpack_from('<H', data)
    msg_type = MsgType(word >> TYPE_SHIFT)
    length = word & LENGTH_MASK
    if msg_type.is_data_item and length == 0:
        length = MAX_DATA_ITEM_LENGTH
    return msg_type, length


def encode_control_item(
    msg_type: MsgType,
    item_code: ControlItemCode,
    parameters: bytes = b''
) -> bytes:
    """
    Build a control item frame: header, item code, parameters.

    Raises:
        MalformedFrameError: On a data item type or oversize parameters
    """
    if MsgType(msg_type).is_data_item:
        raise MalformedFrameError(f"{MsgType(msg_type).name} is not a control item type")
    length = HEADER_SIZE + ITEM_CODE_SIZE + len(parameters)
    return (pack_header(msg_type, length)
            + struct.pack('<H', int(item_code))
            + bytes(parameters))


def encode_data_item(
    msg_type: MsgType,
    body: bytes,
    sequence: int = 0
) -> bytes:
    """Build a data item frame: header, sequence number, body."""
    if not MsgType(msg_type).is_data_item:
        raise MalformedFrameError(f"{MsgType(msg_type).name} is not a data item type")
    length = HEADER_SIZE + SEQUENCE_SIZE + len(body)
    return (pack_header(msg_type, length)
            + struct.pack('<H', sequence & 0xFFFF)
            + bytes(body))


def decode_message(frame: bytes) -> ControlReply:
    """
    Parse a complete NetSDR frame.

    Args:
        frame: Raw frame bytes as delivered by a transport

    Returns:
        ControlReply with item_code set for control items and
        sequence set for data items

    Raises:
        MalformedFrameError: Short frame, length mismatch or unknown item code
    """
    msg_type, length = unpack_header(frame)
    if length != len(frame):
        raise MalformedFrameError(
            f"Header length {length} does not match frame size {len(frame)}"
        )
    if len(frame) < HEADER_SIZE + 2:
        raise MalformedFrameError(f"Frame too short: {len(frame)} bytes")

    (field,) = struct.unpack_from('<H', frame, HEADER_SIZE)
    body = bytes(frame[HEADER_SIZE + 2:])

    if msg_type.is_data_item:
        return ControlReply(msg_type, None, field, body)

    try:
        item_code = ControlItemCode(field)
    except ValueError:
        raise MalformedFrameError(f"Unknown control item code 0x{field:04x}") from None
    return ControlReply(msg_type, item_code, None, body)


def truncated_le(value: int, width: int) -> bytes:
    """Little-endian 64-bit representation of value cut to width bytes"""
    return struct.pack('<Q', value & 0xFFFFFFFFFFFFFFFF)[:width]


# Command builders

def sample_rate_command(hz: int) -> ControlCommand:
    """IQ output sample rate, 5-byte truncated little-endian"""
    return ControlCommand(
        MsgType.SET_CONTROL_ITEM,
        ControlItemCode.IQ_OUTPUT_DATA_SAMPLE_RATE,
        truncated_le(hz, 5)
    )


def rf_filter_command(mode: int = 0) -> ControlCommand:
    """RF filter selection, 0 = automatic"""
    return ControlCommand(
        MsgType.SET_CONTROL_ITEM,
        ControlItemCode.RF_FILTER,
        struct.pack('<H', mode)
    )


def ad_mode_command(pattern: bytes = b'\x00\x03') -> ControlCommand:
    return ControlCommand(MsgType.SET_CONTROL_ITEM, ControlItemCode.AD_MODES, bytes(pattern))


def receiver_state_command(
    run: bool,
    channel_count: int = 1,
    sample_bits: int = 16
) -> ControlCommand:
    """
    Start or stop IQ capture.

    Start carries [data mode, run, capture mode, channel count], where the
    capture mode selects the sample width; stop carries [0, idle, 0, 0].

    Raises:
        ValueError: No capture mode streams samples of that width
    """
    if run:
        try:
            capture_mode = CAPTURE_MODES[sample_bits]
        except KeyError:
            raise ValueError(f"No capture mode for {sample_bits}-bit samples") from None
        params = bytes([IQ_DATA_MODE, RECEIVER_RUN, capture_mode, channel_count & 0xFF])
    else:
        params = bytes([0x00, RECEIVER_IDLE, 0x00, 0x00])
    return ControlCommand(MsgType.SET_CONTROL_ITEM, ControlItemCode.RECEIVER_STATE, params)


def receiver_frequency_command(hz: int, channel: int) -> ControlCommand:
    """Channel byte followed by 5-byte truncated little-endian frequency"""
    params = bytes([channel & 0xFF]) + truncated_le(hz, 5)
    return ControlCommand(MsgType.SET_CONTROL_ITEM, ControlItemCode.RECEIVER_FREQUENCY, params)


def get_control_item(item_code: ControlItemCode, parameters: bytes = b'') -> ControlCommand:
    """Request the current value of an item"""
    return ControlCommand(MsgType.CURRENT_CONTROL_ITEM, ControlItemCode(item_code), parameters)
