# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client.core.config.py

Session configuration for the NetSDR client.

Holds the network endpoints, the response window and the receiver setup
values sent during connection establishment.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
import logging
from typing import Any, Mapping

from .messages import CAPTURE_MODES
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONTROL_PORT = 50000
DEFAULT_DATA_PORT = 60000
DEFAULT_RESPONSE_TIMEOUT = 5.0
DEFAULT_SAMPLE_RATE = 100000
SUPPORTED_SAMPLE_BITS = tuple(sorted(CAPTURE_MODES))


@dataclass
class SessionConfig:
    """
    NetSDR session parameters.

    Attributes:
        host: Receiver address
        control_port: TCP control channel port
        data_port: UDP data channel port
        response_timeout: Seconds to wait for a control reply
        sample_rate: IQ output sample rate in Hz
        rf_filter_mode: RF filter selection (0 = automatic)
        ad_mode: Raw A/D mode parameter pattern
        sample_bits: Sample width requested from the receiver (16 or 24)
        channel_count: Channel count carried by the start command
        samples_path: File receiving the decoded sample stream
    """
    host: str = "127.0.0.1"
    control_port: int = DEFAULT_CONTROL_PORT
    data_port: int = DEFAULT_DATA_PORT
    response_timeout: float = DEFAULT_RESPONSE_TIMEOUT
    sample_rate: int = DEFAULT_SAMPLE_RATE
    rf_filter_mode: int = 0
    ad_mode: bytes = b"\x00\x03"
    sample_bits: int = 16
    channel_count: int = 1
    samples_path: str = "samples.bin"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Check every field for a usable value.

        Raises:
            ConfigurationError: On the first invalid field
        """
        for name in ("control_port", "data_port"):
            port = getattr(self, name)
            if not 0 < port < 65536:
                raise ConfigurationError(f"{name} out of range: {port}")
        if self.response_timeout <= 0:
            raise ConfigurationError(
                f"response_timeout must be positive, got {self.response_timeout}"
            )
        if not 0 <= self.sample_rate < (1 << 40):
            raise ConfigurationError(f"sample_rate does not fit 5 bytes: {self.sample_rate}")
        if not 0 <= self.rf_filter_mode <= 0xFFFF:
            raise ConfigurationError(f"rf_filter_mode out of range: {self.rf_filter_mode}")
        if len(self.ad_mode) != 2:
            raise ConfigurationError("ad_mode must be exactly 2 bytes")
        if self.sample_bits not in SUPPORTED_SAMPLE_BITS:
            raise ConfigurationError(
                f"sample_bits must be one of {SUPPORTED_SAMPLE_BITS}, got {self.sample_bits}"
            )
        if not 1 <= self.channel_count <= 0xFF:
            raise ConfigurationError(f"channel_count out of range: {self.channel_count}")
        if not self.samples_path:
            raise ConfigurationError("samples_path must not be empty")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "SessionConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        kwargs = {k: v for k, v in values.items() if k in known}
        if isinstance(kwargs.get("ad_mode"), (list, tuple)):
            kwargs["ad_mode"] = bytes(kwargs["ad_mode"])
        return cls(**kwargs)


DEFAULT_CONFIG = SessionConfig()
