"""Client configuration for swayctl.

Binary paths are resolved once (usually at CLI startup) and the resulting
ClientConfig is threaded into ControlClient explicitly.

Configuration file: ~/.config/swayctl/config.json (optional)
Environment overrides: SWAYCTL_COMMAND_BINARY, SWAYCTL_VERSION_BINARY, SWAYCTL_TIMEOUT
"""

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError, ErrorCode


logger = logging.getLogger('swayctl.config')

DEFAULT_CONFIG_FILE = Path.home() / ".config/swayctl/config.json"

ENV_OVERRIDES = {
    "SWAYCTL_COMMAND_BINARY": "command_binary",
    "SWAYCTL_VERSION_BINARY": "version_binary",
    "SWAYCTL_TIMEOUT": "timeout",
}


class ClientConfig(BaseModel):
    """Settings for talking to the window manager's control binaries.

    Attributes:
        command_binary: Primary control binary (accepts commands and -tget_tree)
        version_binary: Secondary control binary queried with -v
        socket_env_var: Environment variable carrying the control socket path
        surface_attribute: Surface attribute key used as a socket fallback
        tree_query_argument: Argument that makes the primary binary print the tree
        version_argument: Argument that makes the secondary binary print its version
        timeout: Seconds to wait for a control binary before giving up

    Examples:
        >>> config = ClientConfig(command_binary="/usr/bin/swaymsg")
        >>> config.socket_env_var
        'SWAYSOCK'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    command_binary: str = Field(default="swaymsg", min_length=1, description="Primary control binary")
    version_binary: str = Field(default="sway", min_length=1, description="Secondary control binary")
    socket_env_var: str = Field(default="SWAYSOCK", min_length=1, description="Socket environment variable")
    surface_attribute: str = Field(default="sway-socket", min_length=1, description="Surface attribute key")
    tree_query_argument: str = Field(default="-tget_tree", description="Tree query argument")
    version_argument: str = Field(default="-v", description="Version query argument")
    timeout: float = Field(default=10.0, gt=0, description="Per-invocation timeout in seconds")

    @field_validator("socket_env_var")
    @classmethod
    def validate_env_var_name(cls, v: str) -> str:
        """Environment variable names cannot contain '=' or NUL."""
        if "=" in v or "\0" in v:
            raise ValueError(f"Invalid environment variable name: {v!r}")
        return v

    @classmethod
    def load(
        cls,
        config_file: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ClientConfig":
        """Load configuration from disk and environment.

        A missing config file yields defaults. Environment overrides win over
        file values.

        Args:
            config_file: Path to config.json (default: ~/.config/swayctl/config.json)
            environ: Environment to read overrides from (default: os.environ)

        Returns:
            ClientConfig instance (binaries not yet resolved)

        Raises:
            ConfigurationError: If the file is unreadable, not JSON, or invalid
        """
        if config_file is None:
            config_file = DEFAULT_CONFIG_FILE
        if environ is None:
            environ = os.environ

        data: Dict[str, Any] = {}
        if config_file.exists():
            try:
                with config_file.open("r") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                raise ConfigurationError(
                    ErrorCode.CONFIG_LOAD_FAILED,
                    f"Failed to load configuration from {config_file}: {e}",
                    suggestion="Check file syntax and permissions",
                )
            if not isinstance(data, dict):
                raise ConfigurationError(
                    ErrorCode.CONFIG_LOAD_FAILED,
                    f"Configuration in {config_file} must be a JSON object",
                )
            logger.debug(f"Loaded configuration from {config_file}")

        for env_name, field_name in ENV_OVERRIDES.items():
            value = environ.get(env_name)
            if value:
                logger.debug(f"Override {field_name} from {env_name}")
                data[field_name] = value

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(
                ErrorCode.CONFIG_LOAD_FAILED,
                f"Invalid configuration: {e}",
                suggestion="Remove unknown keys and check value types",
            )

    def resolve_binaries(self, path: Optional[str] = None) -> "ClientConfig":
        """Return a copy with both binaries resolved to absolute paths.

        Args:
            path: Search path to use instead of $PATH

        Raises:
            ConfigurationError: If either binary cannot be found
        """
        resolved = {}
        for field_name in ("command_binary", "version_binary"):
            name = getattr(self, field_name)
            found = shutil.which(name, path=path)
            if found is None:
                raise ConfigurationError(
                    ErrorCode.BINARY_NOT_FOUND,
                    f"Could not find {field_name.replace('_', ' ')} '{name}'",
                    suggestion=f"Install it or set SWAYCTL_{field_name.upper()}",
                )
            resolved[field_name] = found
        return self.model_copy(update=resolved)
