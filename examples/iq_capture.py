# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
examples/iq_capture.py

Capture IQ samples from a NetSDR receiver to a file.

This example demonstrates:
- Building the TCP control and UDP data transports
- Connecting a session (sample rate, RF filter and A/D mode setup)
- Tuning a receiver channel
- Streaming samples to disk for a fixed duration
- Graceful shutdown on interrupt

Run with:
    python examples/iq_capture.py 192.168.1.50 --frequency 14250000 --seconds 10
"""

import argparse
import asyncio
import logging

from netsdr_client import (
    AsyncTCPControlTransport,
    AsyncUDPDataTransport,
    NetSDRSession,
    SessionConfig,
    configure_logging,
)

logger = logging.getLogger("iq_capture")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Record NetSDR IQ samples")
    parser.add_argument("host", help="Receiver address")
    parser.add_argument("--control-port", type=int, default=50000)
    parser.add_argument("--data-port", type=int, default=60000)
    parser.add_argument("--frequency", type=int, default=14250000, help="Hz")
    parser.add_argument("--channel", type=int, default=0)
    parser.add_argument("--seconds", type=float, default=5.0)
    parser.add_argument("--output", default="samples.bin")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args()


async def capture(args: argparse.Namespace) -> None:
    config = SessionConfig(
        host=args.host,
        control_port=args.control_port,
        data_port=args.data_port,
        samples_path=args.output,
    )
    control = AsyncTCPControlTransport(config.host, config.control_port)
    data = AsyncUDPDataTransport(config.data_port)

    async with NetSDRSession(control, data, config) as session:
        if not session.connected:
            logger.error("Receiver unreachable")
            return

        result = await session.change_frequency(args.frequency, args.channel)
        logger.info(f"Tune to {args.frequency} Hz: {result.status.name}")

        await session.start_iq()
        try:
            await asyncio.sleep(args.seconds)
        finally:
            await session.stop_iq()

        logger.info(
            f"Captured {session.frames_received} frames "
            f"({session.frames_dropped} dropped) into {args.output}"
        )


def main() -> None:
    args = parse_args()
    configure_logging(args.log_level)
    try:
        asyncio.run(capture(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
