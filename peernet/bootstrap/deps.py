import json
from typing import Any

from pydantic import ValidationError

from peernet.bootstrap.config.settings import NetworkSettings
from peernet.core.errors import ConfigurationError
from peernet.core.network import PeerNetwork
from peernet.core.ports.resolver import InterfaceResolver
from peernet.core.ports.serializer import Serializer
from peernet.infra.msgpack_serializer import MsgPackSerializer
from peernet.infra.psutil_resolver import PsutilInterfaceResolver


def get_settings(**options: Any) -> NetworkSettings:
    try:
        return NetworkSettings(**options)
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        raise ConfigurationError("\n".join(msg)) from ex


def create_network(
    serializer: Serializer | None = None,
    resolver: InterfaceResolver | None = None,
    **options: Any,
) -> PeerNetwork:
    """
    Build a configured PeerNetwork.

    Options are read from keyword arguments, PEERNET_* environment
    variables and the optional PEERNETCONFIG file, in that order of
    precedence. Serializer and resolver default to msgpack and psutil.
    """
    return PeerNetwork(
        serializer=serializer or MsgPackSerializer(),
        resolver=resolver or PsutilInterfaceResolver(),
        options=get_settings(**options),
    )
