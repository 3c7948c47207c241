"""
Runtime configuration resolved once from environment variables.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_PORT = 9001
DEFAULT_ENVIRONMENT_LABEL = "development"
DEFAULT_HOST = "0.0.0.0"


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be resolved or validated."""


class ServiceConfig(BaseModel):
    """Immutable service settings.

    Attributes:
        port: TCP port to listen on. 0 asks the OS for an ephemeral port.
        environment_label: Deployment tier name, only written to the startup log.
        host: Interface to bind.
    """

    model_config = ConfigDict(frozen=True)

    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    environment_label: str = Field(default=DEFAULT_ENVIRONMENT_LABEL)
    host: str = Field(default=DEFAULT_HOST, min_length=1)


def _env_value(env: Mapping[str, str], name: str) -> str | None:
    # Empty strings count as unset.
    value = env.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def config_resolve(env: Mapping[str, str]) -> ServiceConfig:
    """Build a ServiceConfig from an environment mapping.

    Reads PORT, NODE_ENV and HOST. Missing or empty values fall back to
    the documented defaults.

    Args:
        env: Mapping of environment variable names to values.

    Returns:
        ServiceConfig: Validated settings.

    Raises:
        SettingsLoadError: Raised when a value is present but invalid.
    """
    values = {}
    port = _env_value(env, "PORT")
    if port is not None:
        values["port"] = port
    environment_label = _env_value(env, "NODE_ENV")
    if environment_label is not None:
        values["environment_label"] = environment_label
    host = _env_value(env, "HOST")
    if host is not None:
        values["host"] = host

    try:
        return ServiceConfig.model_validate(values)
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Check PORT, NODE_ENV and HOST. Details: {error}"
        ) from error


def config_load_settings() -> ServiceConfig:
    """Resolve settings from the real process environment."""
    return config_resolve(os.environ)
