from typing import Awaitable, Callable


MessageSender = Callable[[str, bytes], Awaitable[None] | None]
"""
Raw transport supplied by the host application.

Called with the destination address and the serialized payload whenever a
message cannot be delivered in memory. It may be a plain function or return
an awaitable; errors it raises are never caught by the network.
"""
