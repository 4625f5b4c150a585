"""Path management utilities for ethstreamer-deploy."""

import os
from pathlib import Path
from typing import Optional, Union

from .constants import CONFIG_ENV, CONFIG_FILENAME


def get_default_config_path() -> Path:
    """
    Get default configuration file path.

    Returns:
        $ETHSTREAMER_CONFIG if set, otherwise ./ethstreamer.config.json
    """
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).absolute()
    return Path.cwd() / CONFIG_FILENAME


def resolve_project_path(root: Path, value: Union[Path, str]) -> Path:
    """
    Resolve a configured path against the project root.

    Args:
        root: Directory holding the configuration file
        value: Absolute path, or path relative to root

    Returns:
        Absolute path
    """
    path = Path(value)
    if path.is_absolute():
        return path
    return (root / path).absolute()


def get_artifact_path(artifacts_dir: Path, source_name: str, contract_name: str) -> Path:
    """
    Get the artifact file path for a compiled contract.

    Args:
        artifacts_dir: Root artifacts directory
        source_name: Source unit name, e.g. "contracts/EthStreamer.sol"
        contract_name: Contract name, e.g. "EthStreamer"

    Returns:
        Path to <artifacts>/<source_name>/<contract_name>.json
    """
    return artifacts_dir / source_name / f"{contract_name}.json"


def get_source_name(sources_dir: Path, source_file: Path, root: Optional[Path] = None) -> str:
    """
    Get the source unit name used as key in compiler input and artifact paths.

    Args:
        sources_dir: Configured sources directory
        source_file: Solidity file inside sources_dir
        root: Project root (defaults to parent of sources_dir)

    Returns:
        POSIX-style path relative to root, e.g. "contracts/EthStreamer.sol"
    """
    if root is None:
        root = sources_dir.parent
    try:
        return source_file.relative_to(root).as_posix()
    except ValueError:
        return source_file.relative_to(sources_dir).as_posix()
