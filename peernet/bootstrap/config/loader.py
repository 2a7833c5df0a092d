import os
from pathlib import Path

from peernet.core.errors import ConfigurationError


CONFIG_ENV_VAR = "PEERNETCONFIG"


def get_configfile() -> Path | None:
    """
    Return the YAML configuration file named by PEERNETCONFIG, if any.

    Configuration files are optional: without the variable, options come
    from keyword arguments and PEERNET_* environment variables only.
    """
    raw = os.getenv(CONFIG_ENV_VAR)

    if not raw:
        return None

    file = Path(raw)

    if not file.is_file():
        raise ConfigurationError(
            f"[config] Configuration file not found: '{file}'.\n"
            f"  - Fix or unset the {CONFIG_ENV_VAR} environment variable."
        )

    return file
