from dataclasses import dataclass
from enum import StrEnum


class NetworkEvent(StrEnum):
    """
    Lifecycle events emitted by a PeerNetwork.
    """
    subscribe = "subscribe"
    unsubscribe = "unsubscribe"
    sent = "sent"


@dataclass(frozen=True)
class SentEvent:
    """
    Emitted with `NetworkEvent.sent` once a send has been carried out.
    """
    to_address: str
    """
    Destination address of the message.
    """

    payload: bytes
    """
    The serialized message, exactly as handed to the network.
    """

    in_memory: bool
    """
    True when the message was delivered to a local messenger, False when it
    went through the raw sender.
    """
