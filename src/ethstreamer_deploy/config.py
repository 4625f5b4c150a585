"""Toolchain configuration loading for ethstreamer-deploy."""

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from loguru import logger

from .constants import (
    DEFAULT_NETWORK,
    DEFAULT_OPTIMIZER,
    DEFAULT_PATHS,
    DEFAULT_SOLIDITY_VERSION,
    NETWORK_CONFIG,
    SOLC_OUTPUT_SELECTION,
)
from .exceptions import ConfigurationError, NetworkNotFoundError
from .paths import get_default_config_path, resolve_project_path

_SEMVER = re.compile(r"^\d+\.\d+\.\d+$")


@dataclass(frozen=True)
class OptimizerSettings:
    """Solidity optimizer settings."""

    enabled: bool
    runs: int


@dataclass(frozen=True)
class SolidityConfig:
    """Compiler version and settings."""

    version: str  # e.g., "0.8.30"
    optimizer: OptimizerSettings


@dataclass(frozen=True)
class NetworkConfig:
    """A named network endpoint."""

    name: str
    url: str  # JSON-RPC endpoint
    chain_id: int


@dataclass(frozen=True)
class ProjectPaths:
    """Absolute project directories."""

    root: Path
    sources: Path
    artifacts: Path


@dataclass(frozen=True)
class ToolchainConfig:
    """Immutable toolchain configuration, loaded once per process."""

    solidity: SolidityConfig
    networks: Mapping[str, NetworkConfig]
    default_network: str
    paths: ProjectPaths
    source: Optional[Path] = field(default=None, compare=False)

    def network(self, name: Optional[str] = None) -> NetworkConfig:
        """
        Resolve a network by name.

        Args:
            name: Network name (defaults to default_network)

        Returns:
            NetworkConfig for the network

        Raises:
            NetworkNotFoundError: If the network is not configured
        """
        if name is None:
            name = self.default_network
        if name not in self.networks:
            available = ", ".join(sorted(self.networks)) or "none"
            raise NetworkNotFoundError(
                f"Network '{name}' not found in config (available: {available})"
            )
        return self.networks[name]

    def solc_settings(self) -> Dict[str, Any]:
        """
        Build the solc standard-JSON settings block.

        Returns:
            Dictionary with optimizer and outputSelection entries
        """
        return {
            "optimizer": {
                "enabled": self.solidity.optimizer.enabled,
                "runs": self.solidity.optimizer.runs,
            },
            "outputSelection": SOLC_OUTPUT_SELECTION,
        }


def default_config_data() -> Dict[str, Any]:
    """Return the built-in configuration as raw config-file data."""
    return {
        "solidity": {
            "version": DEFAULT_SOLIDITY_VERSION,
            "settings": {"optimizer": dict(DEFAULT_OPTIMIZER)},
        },
        "networks": {name: dict(entry) for name, entry in NETWORK_CONFIG.items()},
        "defaultNetwork": DEFAULT_NETWORK,
        "paths": dict(DEFAULT_PATHS),
    }


def load_config(path: Optional[Union[Path, str]] = None) -> ToolchainConfig:
    """
    Load and validate the toolchain configuration file.

    If no path is given and the default file does not exist, the built-in
    defaults are used with the working directory as project root.

    Args:
        path: Path to ethstreamer.config.json
              (defaults to $ETHSTREAMER_CONFIG or ./ethstreamer.config.json)

    Returns:
        ToolchainConfig

    Raises:
        ConfigurationError: If the file is missing (explicit path), unreadable,
                            not valid JSON, or fails validation
    """
    explicit = path is not None
    config_path = Path(path).absolute() if explicit else get_default_config_path()

    if not config_path.exists():
        if explicit:
            raise ConfigurationError(f"Config file not found at {config_path}")
        logger.debug(f"No config file at {config_path}, using built-in defaults")
        return parse_config(default_config_data(), Path.cwd())

    try:
        with open(config_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e

    logger.debug(f"Loaded config from {config_path}")
    return parse_config(data, config_path.parent, source=config_path)


def parse_config(
    data: Any, root: Path, source: Optional[Path] = None
) -> ToolchainConfig:
    """
    Validate raw config data and build a ToolchainConfig.

    Args:
        data: Parsed config file contents
        root: Directory relative paths are resolved against
        source: File the data came from (informational)

    Returns:
        ToolchainConfig

    Raises:
        ConfigurationError: If any recognized key has the wrong type or value
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Config must be a JSON object")

    solidity = _parse_solidity(data.get("solidity", DEFAULT_SOLIDITY_VERSION))
    networks = _parse_networks(data.get("networks", NETWORK_CONFIG))

    default_network = data.get("defaultNetwork", DEFAULT_NETWORK)
    if not isinstance(default_network, str):
        raise ConfigurationError("defaultNetwork must be a string")
    if default_network not in networks:
        raise ConfigurationError(
            f"defaultNetwork '{default_network}' is not defined in networks"
        )

    paths = _parse_paths(data.get("paths", {}), Path(root).absolute())

    return ToolchainConfig(
        solidity=solidity,
        networks=MappingProxyType(networks),
        default_network=default_network,
        paths=paths,
        source=source,
    )


def _parse_solidity(value: Any) -> SolidityConfig:
    # Shorthand: "solidity": "0.8.30"
    if isinstance(value, str):
        value = {"version": value}
    if not isinstance(value, dict):
        raise ConfigurationError("solidity must be a version string or an object")

    version = value.get("version")
    if not isinstance(version, str) or not _SEMVER.match(version):
        raise ConfigurationError(
            f"solidity.version must be a full version like '0.8.30', got {version!r}"
        )

    settings = value.get("settings", {})
    if not isinstance(settings, dict):
        raise ConfigurationError("solidity.settings must be an object")
    optimizer = settings.get("optimizer", {"enabled": False, "runs": 200})
    if not isinstance(optimizer, dict):
        raise ConfigurationError("solidity.settings.optimizer must be an object")

    enabled = optimizer.get("enabled", False)
    if not isinstance(enabled, bool):
        raise ConfigurationError("solidity.settings.optimizer.enabled must be a boolean")

    runs = optimizer.get("runs", 200)
    # bool is an int subclass
    if isinstance(runs, bool) or not isinstance(runs, int) or runs < 0:
        raise ConfigurationError(
            "solidity.settings.optimizer.runs must be a non-negative integer"
        )

    return SolidityConfig(version=version, optimizer=OptimizerSettings(enabled, runs))


def _parse_networks(value: Any) -> Dict[str, NetworkConfig]:
    if not isinstance(value, dict):
        raise ConfigurationError("networks must be an object")

    networks: Dict[str, NetworkConfig] = {}
    for name, entry in value.items():
        if not isinstance(entry, dict):
            raise ConfigurationError(f"networks.{name} must be an object")

        # Environment override, e.g. LOCALHOST_RPC_URL
        env_key = f"{name.upper().replace('-', '_')}_RPC_URL"
        url = os.environ.get(env_key) or entry.get("url")
        if not isinstance(url, str) or not url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"networks.{name}.url must be an http(s) URL, got {url!r}"
            )

        chain_id = entry.get("chainId")
        if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id <= 0:
            raise ConfigurationError(
                f"networks.{name}.chainId must be a positive integer, got {chain_id!r}"
            )

        networks[name] = NetworkConfig(name=name, url=url, chain_id=chain_id)

    return networks


def _parse_paths(value: Any, root: Path) -> ProjectPaths:
    if not isinstance(value, dict):
        raise ConfigurationError("paths must be an object")

    resolved = {}
    for key, default in DEFAULT_PATHS.items():
        entry = value.get(key, default)
        if not isinstance(entry, str) or not entry:
            raise ConfigurationError(f"paths.{key} must be a non-empty string")
        resolved[key] = resolve_project_path(root, entry)

    return ProjectPaths(root=root, sources=resolved["sources"], artifacts=resolved["artifacts"])
