"""Broadcast channel tests against in-memory fake connections."""

import orjson
import pytest

from utils.broadcast import BroadcastChannel
from utils.schemas import VideoEvent


class _FakeConnection:
    def __init__(self) -> None:
        self.accepted = False
        self.closed = False
        self.sent: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, data: str) -> None:
        self.sent.append(orjson.loads(data))

    async def close(self, code: int = 1000) -> None:
        self.closed = True


class _BrokenConnection(_FakeConnection):
    async def send_text(self, data: str) -> None:
        raise RuntimeError("connection already closed")


def _frame(event: str, **payload) -> str:
    return orjson.dumps({"event": event, **payload}).decode()


@pytest.mark.asyncio
async def test_connect_accepts_and_registers():
    channel = BroadcastChannel()
    client = _FakeConnection()

    connection_id = await channel.connect(client)

    assert client.accepted
    assert connection_id
    assert channel.connection_count == 1


@pytest.mark.asyncio
async def test_play_video_reaches_sender_and_peers_unmodified():
    channel = BroadcastChannel()
    a, b = _FakeConnection(), _FakeConnection()
    a_id = await channel.connect(a)
    await channel.connect(b)

    await channel.relay(_frame("play-video", data=7), sender=a_id)

    assert a.sent == [{"event": "play-video", "data": 7}]
    assert b.sent == [{"event": "play-video", "data": 7}]


@pytest.mark.asyncio
async def test_play_video_without_payload_relays_null():
    channel = BroadcastChannel()
    a = _FakeConnection()
    await channel.connect(a)

    await channel.relay(_frame("play-video"))

    assert a.sent == [{"event": "play-video", "data": None}]


@pytest.mark.asyncio
async def test_stop_video_reaches_silent_clients_without_payload():
    channel = BroadcastChannel()
    sender, silent = _FakeConnection(), _FakeConnection()
    sender_id = await channel.connect(sender)
    await channel.connect(silent)

    await channel.relay(_frame("stop-video", data="ignored"), sender=sender_id)

    assert sender.sent == [{"event": "stop-video"}]
    assert silent.sent == [{"event": "stop-video"}]


@pytest.mark.asyncio
async def test_events_are_relayed_in_receive_order():
    channel = BroadcastChannel()
    a = _FakeConnection()
    await channel.connect(a)

    await channel.relay(_frame("play-video", data=1))
    await channel.relay(_frame("stop-video"))
    await channel.relay(_frame("play-video", data=2))

    assert a.sent == [
        {"event": "play-video", "data": 1},
        {"event": "stop-video"},
        {"event": "play-video", "data": 2},
    ]


@pytest.mark.asyncio
async def test_late_joiner_receives_no_history():
    channel = BroadcastChannel()
    early = _FakeConnection()
    await channel.connect(early)
    await channel.relay(_frame("play-video", data=3))

    late = _FakeConnection()
    await channel.connect(late)

    assert late.sent == []


@pytest.mark.asyncio
async def test_disconnected_client_is_not_sent_to_and_disconnect_is_silent():
    channel = BroadcastChannel()
    a, b = _FakeConnection(), _FakeConnection()
    await channel.connect(a)
    b_id = await channel.connect(b)

    channel.disconnect(b_id)
    channel.disconnect(b_id)

    assert a.sent == []
    await channel.relay(_frame("stop-video"))
    assert a.sent == [{"event": "stop-video"}]
    assert b.sent == []
    assert channel.connection_count == 1


@pytest.mark.asyncio
async def test_failed_send_drops_client_and_others_still_receive():
    channel = BroadcastChannel()
    broken, healthy = _BrokenConnection(), _FakeConnection()
    await channel.connect(broken)
    await channel.connect(healthy)

    await channel.broadcast(VideoEvent(event="play-video", data=9))

    assert healthy.sent == [{"event": "play-video", "data": 9}]
    assert channel.connection_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"data": 7}'])
async def test_undecodable_frames_are_skipped(raw: str):
    channel = BroadcastChannel()
    a = _FakeConnection()
    await channel.connect(a)

    await channel.relay(raw)

    assert a.sent == []


@pytest.mark.asyncio
async def test_unknown_events_are_ignored():
    channel = BroadcastChannel()
    a = _FakeConnection()
    await channel.connect(a)

    await channel.relay(_frame("pause-video", data=1))

    assert a.sent == []


@pytest.mark.asyncio
async def test_close_closes_every_connection():
    channel = BroadcastChannel()
    a, b = _FakeConnection(), _FakeConnection()
    await channel.connect(a)
    await channel.connect(b)

    await channel.close()

    assert a.closed and b.closed
    assert channel.connection_count == 0


@pytest.mark.asyncio
async def test_binary_frames_are_decoded_like_text():
    channel = BroadcastChannel()
    a = _FakeConnection()
    await channel.connect(a)

    await channel.relay(b'{"event": "play-video", "data": 4}')

    assert a.sent == [{"event": "play-video", "data": 4}]
