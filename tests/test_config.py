# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
tests/test_config.py

Tests for session configuration defaults and validation.
"""

import pytest

from netsdr_client.core.config import DEFAULT_CONFIG, SessionConfig
from netsdr_client.exceptions import ConfigurationError


def test_defaults():
    assert DEFAULT_CONFIG.control_port == 50000
    assert DEFAULT_CONFIG.data_port == 60000
    assert DEFAULT_CONFIG.response_timeout == 5.0
    assert DEFAULT_CONFIG.sample_rate == 100000
    assert DEFAULT_CONFIG.ad_mode == b'\x00\x03'
    assert DEFAULT_CONFIG.sample_bits == 16
    assert DEFAULT_CONFIG.samples_path == "samples.bin"


@pytest.mark.parametrize("field,value", [
    ("control_port", 0),
    ("data_port", 70000),
    ("response_timeout", 0),
    ("sample_rate", 1 << 40),
    ("rf_filter_mode", 0x10000),
    ("ad_mode", b'\x00'),
    ("sample_bits", 12),
    ("sample_bits", 8),
    ("sample_bits", 32),
    ("channel_count", 0),
    ("samples_path", ""),
])
def test_invalid_values(field, value):
    with pytest.raises(ConfigurationError):
        SessionConfig(**{field: value})


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        SessionConfig(sample_bits=7)


def test_from_dict():
    config = SessionConfig.from_dict({
        "host": "10.0.0.5",
        "ad_mode": [0, 1],
        "unknown": True,
    })
    assert config.host == "10.0.0.5"
    assert config.ad_mode == b'\x00\x01'
    assert config.control_port == 50000


@pytest.mark.parametrize("bits", [16, 24])
def test_streamable_sample_widths(bits):
    assert SessionConfig(sample_bits=bits).sample_bits == bits
