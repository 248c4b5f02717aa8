# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client.core.session.py

NetSDR client session engine.

Handles:
- Connection establishment with the receiver setup sequence
- Start/stop of IQ acquisition
- Frequency changes and control item queries
- Routing inbound control frames to the response correlator
- Routing inbound data frames to the sample sink

Public operations never raise for a missing connection, a reply timeout, a
malformed frame or a sink failure; they log and return a CommandResult.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, NamedTuple, Optional

from .config import DEFAULT_CONFIG, SessionConfig
from .correlator import ResponseCorrelator
from .messages import (
    ControlCommand,
    ControlItemCode,
    ControlReply,
    ad_mode_command,
    decode_message,
    get_control_item,
    receiver_frequency_command,
    receiver_state_command,
    rf_filter_command,
    sample_rate_command,
)
from .samples import decode_data_frame, expand_samples
from .sink import SampleSink
from ..exceptions import (
    MalformedFrameError,
    RequestTimeoutError,
    SinkIOError,
    TransportError,
)

if TYPE_CHECKING:
    from ..interfaces.transport import AsyncControlTransport, AsyncDataTransport

logger = logging.getLogger(__name__)

# Seconds to wait for the data channel receive loop to wind down
LISTEN_STOP_TIMEOUT = 1.0


class SessionState(Enum):
    """Session lifecycle states"""
    DISCONNECTED = auto()
    CONNECTED = auto()
    STREAMING = auto()


class CommandStatus(Enum):
    """Outcome of a control command"""
    OK = auto()
    NOT_CONNECTED = auto()
    TIMEOUT = auto()
    TRANSPORT_ERROR = auto()


class CommandResult(NamedTuple):
    """Control command outcome with the decoded reply when one arrived"""
    status: CommandStatus
    reply: Optional[ControlReply] = None

    @property
    def ok(self) -> bool:
        return self.status is CommandStatus.OK


class NetSDRSession:
    """
    Client session for one NetSDR receiver.

    Owns the control and data transports supplied by the caller, a single
    response correlator slot and, while streaming, the sample sink.

    Args:
        control_transport: Control channel (TCP)
        data_transport: Sample channel (UDP)
        config: Session configuration (defaults to DEFAULT_CONFIG)
        sink_factory: Callable(path, bit_width) returning a sample sink
    """

    def __init__(
        self,
        control_transport: "AsyncControlTransport",
        data_transport: "AsyncDataTransport",
        config: Optional[SessionConfig] = None,
        sink_factory: Callable[[str, int], SampleSink] = SampleSink
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._control = control_transport
        self._data = data_transport
        self._sink_factory = sink_factory

        self._correlator = ResponseCorrelator(
            self._control.send_message,
            timeout=self.config.response_timeout
        )
        self._connect_lock = asyncio.Lock()
        self._command_lock = asyncio.Lock()
        self._sink: Optional[SampleSink] = None
        self._listen_task: Optional[asyncio.Task] = None
        self._iq_started = False
        self._closed = False

        self.frames_received = 0
        self.frames_dropped = 0

        self._control.on_message_received = self._on_control_message
        self._data.on_message_received = self._on_data_message

        logger.info(
            f"Session initialized for {self.config.host}:{self.config.control_port}"
        )

    @property
    def iq_started(self) -> bool:
        """True while IQ acquisition is active"""
        return self._iq_started

    @property
    def connected(self) -> bool:
        return self._control.connected

    @property
    def state(self) -> SessionState:
        if not self._control.connected:
            return SessionState.DISCONNECTED
        if self._iq_started:
            return SessionState.STREAMING
        return SessionState.CONNECTED

    @property
    def sink(self) -> Optional[SampleSink]:
        """Current sample sink, present only while streaming"""
        return self._sink

    # Lifecycle

    async def connect(self) -> bool:
        """
        Connect and send the receiver setup sequence.

        Sample rate, RF filter and A/D mode are each awaited before the next
        is sent. Does nothing when already connected, including for a call
        that overlapped a connect in progress and waited for it.

        Returns:
            True if every setup command was acknowledged
        """
        async with self._connect_lock:
            if self._control.connected:
                logger.debug("Already connected")
                return True

            try:
                await self._control.connect()
            except TransportError as e:
                logger.error(f"Connect failed: {e}")
                return False

            setup = (
                sample_rate_command(self.config.sample_rate),
                rf_filter_command(self.config.rf_filter_mode),
                ad_mode_command(self.config.ad_mode),
            )
            all_ok = True
            for command in setup:
                result = await self.send_command(command)
                all_ok = all_ok and result.ok

        logger.info(f"Connected to {self.config.host}:{self.config.control_port}")
        return all_ok

    async def disconnect(self) -> None:
        """Close the control channel, stop streaming; safe from any state"""
        if self._iq_started:
            self._iq_started = False
            await self._stop_listening()
        self._close_sink()
        self._correlator.cancel()
        try:
            await self._control.disconnect()
        except TransportError as e:
            logger.error(f"Disconnect failed: {e}")
        logger.info("Session disconnected")

    async def close(self) -> None:
        """Disconnect and release transport subscriptions; repeatable"""
        if self._closed:
            return
        await self.disconnect()
        if self._control.on_message_received == self._on_control_message:
            self._control.on_message_received = None
        if self._data.on_message_received == self._on_data_message:
            self._data.on_message_received = None
        self._closed = True

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # Acquisition

    async def start_iq(self) -> CommandResult:
        """
        Start IQ acquisition.

        The sink is opened and the data channel started whatever the outcome
        of the start command's reply.
        """
        if not self._control.connected:
            logger.warning("No active connection.")
            return CommandResult(CommandStatus.NOT_CONNECTED)

        result = await self.send_command(
            receiver_state_command(
                True, self.config.channel_count, self.config.sample_bits
            )
        )
        if not result.ok:
            logger.warning(f"Start command not confirmed ({result.status.name}), streaming anyway")

        self._open_sink()
        self._iq_started = True
        if self._listen_task is None or self._listen_task.done():
            self._listen_task = asyncio.create_task(self._listen())
            # Let the receive loop start before returning to the caller
            await asyncio.sleep(0)
        logger.info("IQ acquisition started")
        return result

    async def stop_iq(self) -> CommandResult:
        """Stop IQ acquisition and close the sink"""
        if not self._control.connected:
            logger.warning("No active connection.")
            return CommandResult(CommandStatus.NOT_CONNECTED)

        result = await self.send_command(receiver_state_command(False))

        self._iq_started = False
        await self._stop_listening()
        self._close_sink()
        logger.info("IQ acquisition stopped")
        return result

    async def change_frequency(self, hz: int, channel: int) -> CommandResult:
        """Tune a receiver channel; acquisition state is unchanged"""
        return await self.send_command(receiver_frequency_command(hz, channel))

    async def request_control_item(self, item_code: ControlItemCode) -> CommandResult:
        """Ask the receiver for the current value of a control item"""
        return await self.send_command(get_control_item(item_code))

    async def send_command(self, command: ControlCommand) -> CommandResult:
        """
        Send one control command through the correlator.

        Commands are serialized so only one awaits a reply at any time.
        """
        if not self._control.connected:
            logger.warning("No active connection.")
            return CommandResult(CommandStatus.NOT_CONNECTED)

        async with self._command_lock:
            logger.debug(f"Sending {command!r}")
            try:
                raw = await self._correlator.send(command.encode())
            except RequestTimeoutError:
                logger.warning(f"{command.item_code.name}: no reply, request timed out")
                return CommandResult(CommandStatus.TIMEOUT)
            except TransportError as e:
                logger.error(f"{command.item_code.name}: send failed: {e}")
                return CommandResult(CommandStatus.TRANSPORT_ERROR)

        try:
            reply = decode_message(raw)
        except MalformedFrameError as e:
            logger.warning(f"Undecodable reply {raw.hex(' ')}: {e}")
            reply = None
        return CommandResult(CommandStatus.OK, reply)

    # Data channel

    async def _listen(self) -> None:
        try:
            await self._data.start_listening()
        except TransportError as e:
            logger.error(f"Data channel failed: {e}")

    async def _stop_listening(self) -> None:
        self._data.stop_listening()
        task, self._listen_task = self._listen_task, None
        if task is None:
            return
        try:
            await asyncio.wait_for(task, LISTEN_STOP_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning("Data channel did not stop in time")

    def _open_sink(self) -> None:
        self._close_sink()
        sink = self._sink_factory(self.config.samples_path, self.config.sample_bits)
        try:
            sink.open()
        except SinkIOError as e:
            logger.error(f"Sample sink unavailable, samples will be dropped: {e}")
        self._sink = sink

    def _close_sink(self) -> None:
        sink, self._sink = self._sink, None
        if sink is not None:
            sink.close()

    # Inbound messages

    def _on_control_message(self, frame: bytes) -> None:
        logger.debug(f"Response received: {bytes(frame).hex(' ')}")
        if self._correlator.resolve(frame):
            return
        # Unsolicited or late reply
        try:
            reply = decode_message(frame)
            logger.info(
                f"Unsolicited {reply.msg_type.name} for "
                f"{reply.item_code.name if reply.item_code else 'data item'}: {reply.body.hex()}"
            )
        except MalformedFrameError as e:
            logger.warning(f"Unsolicited malformed control frame: {e}")

    def _on_data_message(self, frame: bytes) -> None:
        self.frames_received += 1
        try:
            data = decode_data_frame(frame)
        except MalformedFrameError as e:
            self.frames_dropped += 1
            logger.warning(f"Dropping malformed data frame: {e}")
            return

        samples = expand_samples(data.body, self.config.sample_bits)
        logger.debug(f"Samples received: seq={data.sequence} count={len(samples)}")

        sink = self._sink
        if sink is None or not sink.append(samples):
            if samples:
                self.frames_dropped += 1

    def __repr__(self) -> str:
        return (f"NetSDRSession({self.state.name}, "
                f"frames={self.frames_received}, dropped={self.frames_dropped})")
