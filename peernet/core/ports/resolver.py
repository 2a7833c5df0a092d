from typing import Protocol


class InterfaceResolver(Protocol):
    """
    Maps network interface names to IP addresses and back.

    Only used while configuring a network's own endpoint, to fill in
    whichever of `interface` / `address` was not given explicitly.
    Both lookups return None when nothing matches.
    """

    def address_for(self, interface: str) -> str | None:
        """Return the first IPv4 address bound to `interface`."""

    def interface_for(self, address: str) -> str | None:
        """Return the name of the interface carrying `address`."""
