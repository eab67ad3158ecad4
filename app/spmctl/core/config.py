"""Configuration model and I/O.

Configuration is stored in ~/.config/spmctl/config.toml. Every setting has
a default, so a missing file simply yields the default configuration.

Recognized keys:
- manifest_url: URL of the remote package manifest
- operation_timeout_seconds: budget for each backend operation
- poll_interval_seconds: delay between poller ticks
- http_timeout_seconds: transport timeout for the manifest fetch
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from spmctl.core.paths import get_config_path
from spmctl.errors import ConfigError, ConfigParseError

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_URL = "https://shusmo.io/SPM/packages.json"
DEFAULT_OPERATION_TIMEOUT = 60.0

# Environment variable overriding manifest_url
MANIFEST_URL_ENV = "SPMCTL_MANIFEST_URL"


class SpmConfig(BaseModel):
    """Static configuration for the package tracker.

    Attributes:
        manifest_url: Endpoint serving the package manifest JSON.
        operation_timeout_seconds: Timeout for list/install/update operations.
        poll_interval_seconds: Seconds between poller ticks.
        http_timeout_seconds: Transport timeout for the manifest request.
    """

    model_config = ConfigDict(extra="forbid")

    manifest_url: Annotated[
        str,
        Field(min_length=1, description="Package manifest URL"),
    ] = DEFAULT_MANIFEST_URL
    operation_timeout_seconds: Annotated[
        float,
        Field(gt=0, le=3600, description="Operation timeout in seconds"),
    ] = DEFAULT_OPERATION_TIMEOUT
    poll_interval_seconds: Annotated[
        float,
        Field(ge=0.01, le=5.0, description="Poller tick interval in seconds"),
    ] = 0.1
    http_timeout_seconds: Annotated[
        float,
        Field(gt=0, le=600, description="Manifest request timeout in seconds"),
    ] = 30.0


def load_config(path: Path | None = None) -> SpmConfig:
    """Load configuration from a TOML file.

    A missing file yields the defaults. The SPMCTL_MANIFEST_URL environment
    variable overrides manifest_url from the file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated SpmConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or violates the schema.
    """
    config_path = path or get_config_path()
    data: dict[str, object] = {}

    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config: {e}") from e
    else:
        logger.debug("No config file at %s, using defaults", config_path)

    env_url = os.environ.get(MANIFEST_URL_ENV)
    if env_url:
        data["manifest_url"] = env_url

    try:
        return SpmConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: SpmConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written to a temporary file in the same directory and then
    moved into place with os.replace().

    Args:
        config: The configuration to save.
        path: Destination path. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
