from typing import Any

from peernet.core.errors import CodecError
from peernet.core.ports.serializer import Serializer


class MessageCodec:
    """
    Turns an application event into a payload and back.

    An event is an event name followed by positional arguments. It is
    serialized as the single list `[event, *args]`, so argument order is
    preserved by any Serializer that preserves sequence order.
    """

    def __init__(self, serializer: Serializer) -> None:
        self._serializer = serializer

    def encode(self, event: str, *args: Any) -> bytes:
        if not isinstance(event, str):
            raise CodecError(f"Event name must be a string, got {type(event).__name__}")

        try:
            return self._serializer.serialize([event, *args])
        except Exception as ex:
            raise CodecError(f"Unable to encode event '{event}': {ex}") from ex

    def decode(self, payload: bytes) -> tuple[str, list[Any]]:
        try:
            message = self._serializer.deserialize(payload)
        except Exception as ex:
            raise CodecError(f"Unable to decode payload: {ex}") from ex

        if not isinstance(message, (list, tuple)) or not message:
            raise CodecError(f"Decoded payload is not an event: {message!r}")

        event, *args = message
        if not isinstance(event, str):
            raise CodecError(f"Decoded event name is not a string: {event!r}")

        return event, args
