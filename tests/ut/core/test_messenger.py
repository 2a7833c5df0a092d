import asyncio

import pytest

from peernet.core.errors import CodecError, MessengerDestroyedError
from peernet.core.models.events import SentEvent


@pytest.mark.ut
@pytest.mark.asyncio
async def test_ping_between_local_peers(network, sender, sent_events):
    peer_a = await network.create_messenger("peerA")
    peer_b = await network.create_messenger("peerB")
    received = []
    peer_b.on("ping", received.append)

    await peer_a.send("peerB", "ping", {"n": 1})
    await asyncio.sleep(0)

    assert received == [{"n": 1}]
    assert sender.sent == []
    assert len(sent_events) == 1
    assert sent_events[0].to_address == "peerB"
    assert sent_events[0].in_memory is True


@pytest.mark.ut
@pytest.mark.asyncio
async def test_send_to_destroyed_peer_uses_raw_sender(network, sender, sent_events):
    peer_a = await network.create_messenger("peerA")
    peer_b = await network.create_messenger("peerB")

    await peer_b.destroy()
    await peer_a.send("peerB", "ping")

    payload = network.codec.encode("ping")
    assert sender.sent == [("peerB", payload)]
    assert sent_events == [SentEvent("peerB", payload, in_memory=False)]


@pytest.mark.ut
@pytest.mark.asyncio
async def test_destroy_racing_in_flight_send(network, sender):
    peer_a = await network.create_messenger("peerA")
    peer_b = await network.create_messenger("peerB")
    received = []
    peer_b.on("ping", received.append)

    await peer_a.send("peerB", "ping", 1)
    await peer_b.destroy()
    await network.drain()

    assert received == []
    assert sender.sent == [("peerB", network.codec.encode("ping", 1))]


@pytest.mark.ut
@pytest.mark.asyncio
async def test_send_does_not_attach_sender_address(network, sender):
    peer_a = await network.create_messenger("peerA")

    await peer_a.send("remote", "hello", "reply-to", "peerA")

    address, payload = sender.sent[0]
    assert address == "remote"
    assert network.codec.decode(payload) == ("hello", ["reply-to", "peerA"])


@pytest.mark.ut
@pytest.mark.asyncio
async def test_receive_message_emits_event_with_ordered_args(network, serializer):
    messenger = await network.create_messenger("peerA")
    received = []

    @messenger.on("move")
    def on_move(x, y, meta):
        received.append((x, y, meta))

    messenger.receive_message(serializer.serialize(["move", 3, 4, {"fast": True}]))

    assert received == [(3, 4, {"fast": True})]


@pytest.mark.ut
@pytest.mark.asyncio
async def test_receive_message_runs_async_handlers(network, serializer):
    messenger = await network.create_messenger("peerA")
    done = asyncio.Event()

    @messenger.on("ping")
    async def on_ping(value):
        assert value == 42
        done.set()

    messenger.receive_message(serializer.serialize(["ping", 42]))

    await asyncio.wait_for(done.wait(), timeout=1)


@pytest.mark.ut
@pytest.mark.asyncio
async def test_receive_message_propagates_decode_errors(network):
    messenger = await network.create_messenger("peerA")

    with pytest.raises(CodecError):
        messenger.receive_message(b"not json")


@pytest.mark.ut
@pytest.mark.asyncio
async def test_destroy_unregisters_and_announces(network):
    unsubscribed = []

    @network.on("unsubscribe")
    async def on_unsubscribe(address):
        await asyncio.sleep(0)
        unsubscribed.append((address, network.manages_address(address)))

    messenger = await network.create_messenger("peerA")
    await messenger.destroy()

    assert messenger.destroyed
    assert not network.manages_address("peerA")
    assert unsubscribed == [("peerA", False)]


@pytest.mark.ut
@pytest.mark.asyncio
async def test_destroy_twice_announces_once(network):
    unsubscribed = []
    network.on("unsubscribe", unsubscribed.append)
    messenger = await network.create_messenger("peerA")

    await messenger.destroy()
    await messenger.destroy()

    assert unsubscribed == ["peerA"]


@pytest.mark.ut
@pytest.mark.asyncio
async def test_destroy_stale_messenger_keeps_replacement(network):
    unsubscribed = []
    network.on("unsubscribe", unsubscribed.append)
    stale = await network.create_messenger("peerA")
    fresh = await network.create_messenger("peerA")

    await stale.destroy()

    assert stale.destroyed
    assert network.get_messenger("peerA") is fresh
    assert network.manages_address("peerA")
    assert unsubscribed == []

    await fresh.destroy()

    assert unsubscribed == ["peerA"]


@pytest.mark.ut
@pytest.mark.asyncio
async def test_destroy_after_forget_still_announces(network):
    unsubscribed = []
    network.on("unsubscribe", unsubscribed.append)
    messenger = await network.create_messenger("peerA")

    network.forget_address("peerA")
    await messenger.destroy()

    assert unsubscribed == ["peerA"]


@pytest.mark.ut
@pytest.mark.asyncio
async def test_destroyed_messenger_is_inert(network, serializer):
    messenger = await network.create_messenger("peerA")
    await messenger.destroy()

    with pytest.raises(MessengerDestroyedError):
        await messenger.send("peerB", "ping")

    with pytest.raises(MessengerDestroyedError):
        messenger.receive_message(serializer.serialize(["ping"]))
