import socket

import psutil

from peernet.core.ports.resolver import InterfaceResolver


class PsutilInterfaceResolver(InterfaceResolver):
    """
    Resolves interfaces and addresses from the host's network interfaces,
    as reported by psutil. Only IPv4 addresses are considered.
    """
    def address_for(self, interface: str) -> str | None:
        for addr in psutil.net_if_addrs().get(interface, []):
            if addr.family == socket.AF_INET:
                return addr.address

        return None

    def interface_for(self, address: str) -> str | None:
        for name, addrs in psutil.net_if_addrs().items():
            if any(a.family == socket.AF_INET and a.address == address for a in addrs):
                return name

        return None
