import pytest

from peernet.core.network import PeerNetwork
from tests.fake.fake_resolver import FakeResolver
from tests.fake.fake_sender import FakeSender
from tests.fake.fake_serializer import JsonSerializer


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PEERNETCONFIG", "PEERNET_PROTOCOL", "PEERNET_INTERFACE", "PEERNET_ADDRESS", "PEERNET_PORT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def serializer():
    return JsonSerializer()


@pytest.fixture
def resolver():
    return FakeResolver({"lo": "127.0.0.1", "eth0": "10.0.0.5"})


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def network(serializer, resolver, sender):
    net = PeerNetwork(
        serializer=serializer,
        resolver=resolver,
        options={"interface": "eth0", "port": 4000},
    )
    net.set_message_sender(sender)
    return net


@pytest.fixture
def sent_events(network):
    events = []
    network.on("sent", events.append)
    return events
