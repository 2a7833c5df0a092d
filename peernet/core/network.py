import inspect
import logging
from typing import Any, Mapping

from pydantic import ValidationError

from peernet.bootstrap.config.settings import NetworkOptions
from peernet.core.codec import MessageCodec
from peernet.core.errors import ConfigurationError, SenderNotConfiguredError
from peernet.core.events import EventEmitter
from peernet.core.helpers.spawn import TaskSpawner
from peernet.core.messenger import PeerMessenger
from peernet.core.models.endpoint import Endpoint, Port, parse_uri
from peernet.core.models.events import NetworkEvent, SentEvent
from peernet.core.ports.resolver import InterfaceResolver
from peernet.core.ports.sender import MessageSender
from peernet.core.ports.serializer import Serializer


class PeerNetwork(EventEmitter):
    """
    Routes messages between addresses, in memory when it can.

    The network keeps an address table of the messengers it manages. A
    message sent to a managed address is delivered directly to that
    messenger on a later loop iteration; any other message is handed to
    the raw sender installed by the host application.

    Lifecycle events:
    - `subscribe(address)`: a messenger was created, awaited by
      `create_messenger`.
    - `unsubscribe(address)`: a messenger was destroyed, awaited by
      `PeerMessenger.destroy`.
    - `sent(SentEvent)`: a send completed, telling which path was used.

    The network also carries the node's own endpoint (protocol, interface,
    address, port), which is only ever replaced as a whole.
    """

    def __init__(
        self,
        serializer: Serializer,
        resolver: InterfaceResolver,
        options: NetworkOptions | Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self._codec = MessageCodec(serializer)
        self._resolver = resolver
        self._messengers: dict[str, PeerMessenger] = {}
        self._sender: MessageSender | None = None
        self._deliveries = TaskSpawner()
        self._endpoint: Endpoint | None = None
        self._logger = logging.getLogger("core.network")

        if options is not None:
            self.configure(options)

    @property
    def codec(self) -> MessageCodec:
        return self._codec

    @property
    def endpoint(self) -> Endpoint:
        if self._endpoint is None:
            raise ConfigurationError("Network endpoint has not been configured")
        return self._endpoint

    @property
    def protocol(self) -> str:
        return self.endpoint.protocol

    @property
    def interface(self) -> str | None:
        return self.endpoint.interface

    @property
    def address(self) -> str:
        return self.endpoint.address

    @property
    def port(self) -> Port:
        return self.endpoint.port

    def configure(self, options: NetworkOptions | Mapping[str, Any]) -> None:
        """
        Set the node's own endpoint from configuration options.

        Whichever of `interface` / `address` is missing is derived from the
        other through the resolver. Fails with ConfigurationError when no
        address can be determined.

        A plain mapping is validated as given; environment variables and
        configuration files only apply to NetworkSettings instances.
        """
        if not isinstance(options, NetworkOptions):
            try:
                options = NetworkOptions.model_validate(dict(options))
            except ValidationError as ex:
                raise ConfigurationError(f"Invalid network options: {ex}") from ex

        interface = options.interface
        address = options.address

        if address is None:
            if interface is None:
                raise ConfigurationError("Either an interface or an address is required")
            address = self._resolver.address_for(interface)
            if address is None:
                raise ConfigurationError(f"No address found for interface '{interface}'")
        elif interface is None:
            interface = self._resolver.interface_for(address)

        self._endpoint = Endpoint(
            protocol=options.protocol,
            interface=interface,
            address=address,
            port=options.port,
        )
        self._logger.debug(f"Network configured as {self._endpoint.uri}")

    def set_own_uri(self, uri: str) -> None:
        """
        Replace the node's own endpoint with the one described by `uri`.

        Raises UriParseError on malformed URIs, leaving the current
        endpoint untouched.
        """
        endpoint = parse_uri(uri)
        self._endpoint = endpoint.with_interface(self._resolver.interface_for(endpoint.address))

    def get_own_uri(self) -> str:
        return self.endpoint.uri

    async def create_messenger(self, address: str) -> PeerMessenger:
        """
        Register a messenger for `address` and announce it.

        A previous messenger for the same address is replaced. The new one
        is in the table before `subscribe` listeners run, so a listener may
        already send to it.
        """
        messenger = PeerMessenger(self, address)
        self._messengers[address] = messenger

        await self.emit_async(NetworkEvent.subscribe, address)

        return messenger

    def set_message_sender(self, sender: MessageSender) -> None:
        self._sender = sender

    def receive_message(self, address: str, payload: bytes) -> None:
        """
        Hand a payload received from the raw transport to its messenger.

        Payloads for unmanaged addresses are dropped.
        """
        messenger = self._messengers.get(address)

        if messenger is None:
            self._logger.debug(f"Dropping message for unmanaged address '{address}'")
            return

        messenger.receive_message(payload)

    def manages_address(self, address: str) -> bool:
        return address in self._messengers

    def get_messenger(self, address: str) -> PeerMessenger | None:
        return self._messengers.get(address)

    def addresses(self) -> list[str]:
        return list(self._messengers)

    def forget_address(self, address: str) -> None:
        self._messengers.pop(address, None)

    async def send(self, to_address: str, payload: bytes) -> None:
        """
        Route `payload` to `to_address`.

        A managed destination gets a deferred delivery: the table is read
        again on the next loop iteration, and if the messenger is gone by
        then the payload falls back to the raw sender. An unmanaged
        destination goes to the raw sender before this coroutine yields.
        """
        if to_address in self._messengers:
            self._deliveries.spawn(
                self._deliver(to_address, payload),
                name=f"deliver:{to_address}"
            )
            return

        await self._send_raw(to_address, payload)

    async def drain(self) -> None:
        """
        Wait for every pending deferred delivery to complete.
        """
        await self._deliveries.join()

    async def close(self) -> None:
        """
        Flush pending deliveries, then destroy every managed messenger.
        """
        await self.drain()

        for messenger in list(self._messengers.values()):
            await messenger.destroy()

    async def _deliver(self, to_address: str, payload: bytes) -> None:
        messenger = self._messengers.get(to_address)

        if messenger is None:
            self._logger.debug(f"'{to_address}' was released before delivery, using raw sender")
            await self._send_raw(to_address, payload)
            return

        messenger.receive_message(payload)
        self.emit(NetworkEvent.sent, SentEvent(to_address, payload, in_memory=True))

    async def _send_raw(self, to_address: str, payload: bytes) -> None:
        if self._sender is None:
            raise SenderNotConfiguredError(
                f"No message sender installed, cannot send to '{to_address}'"
            )

        result = self._sender(to_address, payload)
        if inspect.isawaitable(result):
            await result

        self.emit(NetworkEvent.sent, SentEvent(to_address, payload, in_memory=False))

    def __repr__(self) -> str:
        uri = self._endpoint.uri if self._endpoint else None
        return f"<PeerNetwork uri={uri!r} addresses={len(self._messengers)}>"
