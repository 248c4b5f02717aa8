# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client.core.samples.py

Data channel frame decoding and IQ sample expansion.

Sample bodies are tightly packed little-endian signed integers. A body whose
length is not a whole number of samples loses its trailing partial sample.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, NamedTuple

from .messages import MsgType, decode_message
from ..exceptions import MalformedFrameError

logger = logging.getLogger(__name__)


class DataFrame(NamedTuple):
    """Decoded data item"""
    msg_type: MsgType
    sequence: int
    body: bytes


def _sample_size(bit_width: int) -> int:
    if bit_width <= 0 or bit_width % 8 or bit_width > 32:
        raise ValueError(f"Unsupported sample width: {bit_width} bits")
    return bit_width // 8


def decode_data_frame(frame: bytes) -> DataFrame:
    """
    Parse a data channel frame.

    Raises:
        MalformedFrameError: On a bad header or a control item frame
    """
    reply = decode_message(frame)
    if not reply.msg_type.is_data_item:
        raise MalformedFrameError(f"Expected data item, got {reply.msg_type.name}")
    return DataFrame(reply.msg_type, reply.sequence, reply.body)


def expand_samples(body: bytes, bit_width: int = 16) -> List[int]:
    """
    Expand a packed body into signed integer samples.

    Args:
        body: Packed little-endian samples
        bit_width: Sample width in bits (8, 16, 24 or 32)

    Returns:
        len(body) // (bit_width // 8) samples in body order
    """
    size = _sample_size(bit_width)
    whole = len(body) - len(body) % size
    if whole != len(body):
        logger.debug(f"Dropping {len(body) - whole} trailing byte(s) of partial sample")
    return [
        int.from_bytes(body[i:i + size], 'little', signed=True)
        for i in range(0, whole, size)
    ]


def pack_samples(samples: Iterable[int], bit_width: int = 16) -> bytes:
    """Serialize samples as fixed-width little-endian signed values"""
    size = _sample_size(bit_width)
    out = bytearray()
    for sample in samples:
        out += int(sample).to_bytes(size, 'little', signed=True)
    return bytes(out)
