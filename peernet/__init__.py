from peernet.bootstrap.deps import create_network
from peernet.core.errors import (
    CodecError,
    ConfigurationError,
    MessengerDestroyedError,
    PeerNetError,
    SenderNotConfiguredError,
    UriParseError,
)
from peernet.core.helpers.utils import setup_logging
from peernet.core.messenger import PeerMessenger
from peernet.core.models.events import NetworkEvent, SentEvent
from peernet.core.network import PeerNetwork

create = create_network

__all__ = [
    "CodecError",
    "ConfigurationError",
    "MessengerDestroyedError",
    "NetworkEvent",
    "PeerMessenger",
    "PeerNetError",
    "PeerNetwork",
    "SenderNotConfiguredError",
    "SentEvent",
    "UriParseError",
    "create",
    "create_network",
    "setup_logging",
]
