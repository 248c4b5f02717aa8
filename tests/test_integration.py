# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
tests/test_integration.py

End-to-end session tests.

Covers:
- Full workflow over in-memory transports
- Full workflow against a loopback receiver emulator (TCP + UDP)
- Concurrent connects against a loopback echo server
"""

import asyncio
import socket
import struct

import pytest

from netsdr_client import (
    AsyncTCPControlTransport,
    AsyncUDPDataTransport,
    NetSDRSession,
    SessionConfig,
    SessionState,
)
from netsdr_client.core.messages import (
    ControlItemCode,
    MsgType,
    decode_message,
    encode_data_item,
)
from netsdr_client.core.samples import pack_samples


@pytest.mark.asyncio
async def test_complete_workflow(session, control, data, config):
    await session.connect()
    await session.change_frequency(7_100_000, 0)
    await session.start_iq()
    data.deliver(encode_data_item(MsgType.DATA_ITEM_0, pack_samples([5, 6, 7, 8])))
    await session.stop_iq()
    await session.disconnect()

    assert control.connect_calls == 1
    assert control.disconnect_calls == 1
    assert len(control.sent) >= 5
    assert data.start_calls == 1
    assert data.stop_calls == 1
    assert not session.iq_started
    assert session.state == SessionState.DISCONNECTED
    with open(config.samples_path, 'rb') as fh:
        assert struct.unpack('<4h', fh.read()) == (5, 6, 7, 8)


def free_udp_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.mark.network
@pytest.mark.slow
@pytest.mark.asyncio
async def test_loopback_receiver(tmp_path):
    """Emulated receiver acknowledges every command and streams on start"""
    data_port = free_udp_port()
    commands = []

    async def stream_samples():
        # Leave the client time to bind its data port
        await asyncio.sleep(0.2)
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as out:
            for seq in range(3):
                body = pack_samples([seq * 4 + i for i in range(4)])
                out.sendto(encode_data_item(MsgType.DATA_ITEM_0, body, seq),
                           ('127.0.0.1', data_port))
                await asyncio.sleep(0.01)

    async def handle(reader, writer):
        try:
            while True:
                header = await reader.readexactly(2)
                length = struct.unpack('<H', header)[0] & 0x1FFF
                frame = header + await reader.readexactly(length - 2)
                command = decode_message(frame)
                commands.append(command.item_code)
                writer.write(frame)
                await writer.drain()
                if command.item_code == ControlItemCode.RECEIVER_STATE and command.body[1] == 0x02:
                    asyncio.ensure_future(stream_samples())
        except asyncio.IncompleteReadError:
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle, '127.0.0.1', 0)
    control_port = server.sockets[0].getsockname()[1]
    config = SessionConfig(
        host='127.0.0.1',
        control_port=control_port,
        data_port=data_port,
        samples_path=str(tmp_path / "samples.bin"),
        response_timeout=1.0,
    )
    session = NetSDRSession(
        AsyncTCPControlTransport('127.0.0.1', control_port),
        AsyncUDPDataTransport(data_port, host='127.0.0.1'),
        config,
    )
    try:
        assert await session.connect()
        assert (await session.change_frequency(14_250_000, 1)).ok
        assert (await session.start_iq()).ok
        deadline = asyncio.get_running_loop().time() + 2.0
        while session.frames_received < 3 and asyncio.get_running_loop().time() < deadline:
            await asyncio.sleep(0.01)
        assert (await session.stop_iq()).ok
    finally:
        await session.close()
        server.close()
        await server.wait_closed()

    assert commands[:4] == [
        ControlItemCode.IQ_OUTPUT_DATA_SAMPLE_RATE,
        ControlItemCode.RF_FILTER,
        ControlItemCode.AD_MODES,
        ControlItemCode.RECEIVER_FREQUENCY,
    ]
    with open(config.samples_path, 'rb') as fh:
        raw = fh.read()
    assert list(struct.unpack(f'<{len(raw) // 2}h', raw)) == list(range(12))


@pytest.mark.network
@pytest.mark.asyncio
async def test_overlapping_connects_loopback(tmp_path):
    """Concurrent connects open one control connection and close cleanly"""
    connections = []

    async def handle(reader, writer):
        connections.append(writer)
        try:
            while True:
                header = await reader.readexactly(2)
                length = struct.unpack('<H', header)[0] & 0x1FFF
                writer.write(header + await reader.readexactly(length - 2))
                await writer.drain()
        except asyncio.IncompleteReadError:
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle, '127.0.0.1', 0)
    control_port = server.sockets[0].getsockname()[1]
    config = SessionConfig(
        host='127.0.0.1',
        control_port=control_port,
        data_port=free_udp_port(),
        samples_path=str(tmp_path / "samples.bin"),
        response_timeout=1.0,
    )
    session = NetSDRSession(
        AsyncTCPControlTransport('127.0.0.1', control_port),
        AsyncUDPDataTransport(config.data_port, host='127.0.0.1'),
        config,
    )
    try:
        results = await asyncio.gather(session.connect(), session.connect())
        assert results == [True, True]
        assert session.state == SessionState.CONNECTED
    finally:
        await session.close()
        server.close()
        await server.wait_closed()

    assert len(connections) == 1
    assert session.state == SessionState.DISCONNECTED
