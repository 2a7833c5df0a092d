class PeerNetError(Exception):
    """Base class for every error raised by peernet itself."""


class ConfigurationError(PeerNetError):
    """
    The node's own endpoint could not be configured.

    Raised at setup time when neither an interface nor an address can be
    resolved, or when the supplied options fail validation.
    """


class UriParseError(ConfigurationError):
    """A URI handed to `set_own_uri` is malformed."""


class CodecError(PeerNetError):
    """
    A payload could not be encoded or decoded.

    Wraps the serializer's own exception (available as `__cause__`) or
    signals that a decoded payload is not an `[event, *args]` sequence.
    """


class SenderNotConfiguredError(PeerNetError):
    """A message had to leave the process but no raw sender is installed."""


class MessengerDestroyedError(PeerNetError):
    """A destroyed messenger was used to send or receive."""
