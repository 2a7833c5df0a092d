from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from peernet.bootstrap.config.loader import get_configfile


class NetworkOptions(BaseModel):
    """
    Options describing the node's own endpoint, taken only from what the
    caller passes in.
    """
    model_config = ConfigDict(extra="forbid")

    protocol: Annotated[
        str,
        Field(
            description="Transport scheme advertised in the node's own URI.",
            default="tcp"
        )
    ]

    interface: Annotated[
        str | None,
        Field(
            description=(
                "Name of the network interface the node is reachable on.\n"
                "When omitted, it is looked up from `address`."
            ),
            default=None
        )
    ]

    address: Annotated[
        str | None,
        Field(
            description=(
                "IP address the node is reachable at.\n"
                "When omitted, the first IPv4 address of `interface` is used."
            ),
            default=None
        )
    ]

    port: Annotated[
        int | Literal["*"],
        Field(
            description="Port of the node's own endpoint, '*' while unassigned.",
            default="*"
        )
    ]

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int | str) -> int | str:
        if isinstance(v, int) and not 0 <= v <= 65535:
            raise ValueError(f"Port {v} is out of range.")
        return v


class NetworkSettings(NetworkOptions, BaseSettings):
    """
    NetworkOptions completed from PEERNET_* environment variables and the
    optional PEERNETCONFIG file. Explicit keyword arguments win.
    """
    model_config = SettingsConfigDict(
        env_prefix="PEERNET_",
        extra="forbid"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: tuple[PydanticBaseSettingsSource, ...] = (init_settings, env_settings)
        configfile = get_configfile()

        if configfile is not None:
            sources += (YamlConfigSettingsSource(settings_cls, yaml_file=configfile),)

        return sources
