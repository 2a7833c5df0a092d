import logging
from typing import Any, TYPE_CHECKING

from peernet.core.errors import MessengerDestroyedError
from peernet.core.events import EventEmitter
from peernet.core.models.events import NetworkEvent

if TYPE_CHECKING:
    from peernet.core.network import PeerNetwork


class PeerMessenger(EventEmitter):
    """
    A handle through which a caller speaks as one address.

    Messengers are created by `PeerNetwork.create_messenger` and stay
    registered in the network's address table until destroyed. Incoming
    payloads are decoded and re-emitted as application events on the
    messenger itself, so callers subscribe with `on(event, handler)`.

    The messenger never chooses a transport: `send` encodes the event and
    hands it to the owning network, which decides whether the destination
    is local or remote.

    A messenger is either active or destroyed. Destruction is terminal;
    any later `send` or `receive_message` raises MessengerDestroyedError.
    """

    def __init__(self, network: "PeerNetwork", address: str) -> None:
        super().__init__()
        self._network = network
        self._address = address
        self._destroyed = False
        self._logger = logging.getLogger("core.messenger")

    @property
    def address(self) -> str:
        return self._address

    @property
    def network(self) -> "PeerNetwork":
        return self._network

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def receive_message(self, payload: bytes) -> None:
        """
        Decode a payload addressed to this messenger and emit it.

        Codec errors propagate to the caller.
        """
        self._ensure_active()
        event, args = self._network.codec.decode(payload)
        self._logger.debug(f"{self._address} received '{event}'")
        self.emit(event, *args)

    async def send(self, to_address: str, event: str, *args: Any) -> None:
        """
        Send `event` with `args` to `to_address`.

        The sender's own address is not attached; include it in `args`
        when the receiver needs to reply.
        """
        self._ensure_active()
        payload = self._network.codec.encode(event, *args)
        await self._network.send(to_address, payload)

    async def destroy(self) -> None:
        """
        Deregister this messenger and announce it to `unsubscribe` listeners.

        Destroying an already destroyed messenger does nothing. A messenger
        replaced by a newer one for the same address is only marked destroyed.
        """
        if self._destroyed:
            return

        self._destroyed = True
        # A newer messenger registered for the same address keeps its entry
        # and the address stays subscribed.
        current = self._network.get_messenger(self._address)
        if current is not None and current is not self:
            return

        self._network.forget_address(self._address)
        await self._network.emit_async(NetworkEvent.unsubscribe, self._address)

    def _ensure_active(self) -> None:
        if self._destroyed:
            raise MessengerDestroyedError(f"Messenger '{self._address}' has been destroyed")

    def __repr__(self) -> str:
        state = "destroyed" if self._destroyed else "active"
        return f"<PeerMessenger address={self._address!r} {state}>"
