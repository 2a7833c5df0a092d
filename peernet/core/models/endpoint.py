from dataclasses import dataclass, replace
from typing import Literal
from urllib.parse import urlsplit

from peernet.core.errors import UriParseError


Port = int | Literal["*"]

UNASSIGNED_PORT: Literal["*"] = "*"


@dataclass(frozen=True)
class Endpoint:
    """
    The node's own endpoint, as advertised to its peers.

    The value is immutable: a network only ever swaps the whole endpoint,
    so protocol, interface, address and port always describe the same
    host at any point in time.
    """
    protocol: str
    """
    Transport scheme, e.g. "tcp".
    """

    address: str
    """
    IP address (or host name) the node is reachable at.
    """

    interface: str | None = None
    """
    Name of the local network interface carrying `address`, if known.
    """

    port: Port = UNASSIGNED_PORT
    """
    Port number, or "*" while the port has not been assigned yet.
    """

    @property
    def uri(self) -> str:
        host = f"[{self.address}]" if ":" in self.address else self.address
        return f"{self.protocol}://{host}:{self.port}"

    def with_interface(self, interface: str | None) -> "Endpoint":
        return replace(self, interface=interface)


def parse_uri(uri: str) -> Endpoint:
    """
    Parse `<protocol>://<host>[:<port>]` into an Endpoint.

    The host is kept as written, without the brackets of IPv6 literals.
    A missing port, or a port of "*", yields an unassigned port. The
    interface is left unset; resolving it is the caller's concern.
    """
    if not isinstance(uri, str) or "://" not in uri:
        raise UriParseError(f"Malformed URI {uri!r}: expected <protocol>://<host>:<port>")

    scheme, _, netloc = uri.partition("://")
    if not scheme:
        raise UriParseError(f"Malformed URI {uri!r}: missing protocol")

    port: Port = UNASSIGNED_PORT
    if netloc.endswith(":*"):
        netloc = netloc[:-2]

    try:
        parts = urlsplit(f"{scheme}://{netloc}")
        if parts.port is not None:
            port = parts.port
        host = _split_host(parts.netloc)
    except ValueError as ex:
        raise UriParseError(f"Malformed URI {uri!r}: {ex}") from ex

    if not host:
        raise UriParseError(f"Malformed URI {uri!r}: missing host")

    if parts.path not in ("", "/") or parts.query or parts.fragment:
        raise UriParseError(f"Malformed URI {uri!r}: unexpected path or query")

    return Endpoint(protocol=scheme, address=host, port=port)


def _split_host(netloc: str) -> str:
    hostport = netloc.rpartition("@")[2]

    if hostport.startswith("["):
        return hostport[1:hostport.index("]")]

    return hostport.partition(":")[0]
