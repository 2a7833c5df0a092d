from typing import Protocol, Any


class Serializer(Protocol):
    """
    Defines the interface for encoding/decoding the payloads exchanged
    between messengers, whether delivered in memory or over the raw
    transport.

    Implementations must be:
    - deterministic for a given network instance
    - pure (no side effects)
    - order preserving for sequences
    """

    def serialize(self, message: Any) -> bytes:
        """Encode a Python object into bytes suitable for transport."""

    def deserialize(self, data: bytes) -> Any:
        """Decode bytes produced by `serialize` back into a Python object."""
