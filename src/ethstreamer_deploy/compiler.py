"""Solidity compilation into hardhat artifacts."""

from pathlib import Path
from typing import Any, Dict, List

import solcx
from loguru import logger
from solcx.exceptions import SolcError

from .artifacts import artifact_from_solc_output, write_artifact
from .config import ToolchainConfig
from .exceptions import CompilationError
from .paths import get_source_name


def collect_sources(config: ToolchainConfig) -> Dict[str, Dict[str, str]]:
    """
    Read every Solidity file under the configured sources directory.

    Args:
        config: Toolchain configuration

    Returns:
        Standard-JSON "sources" mapping: source name -> {"content": ...}
    """
    sources_dir = config.paths.sources
    if not sources_dir.exists():
        return {}

    sources: Dict[str, Dict[str, str]] = {}
    for source_file in sorted(sources_dir.rglob("*.sol")):
        source_name = get_source_name(sources_dir, source_file, config.paths.root)
        sources[source_name] = {"content": source_file.read_text(encoding="utf-8")}
    return sources


def build_compiler_input(
    config: ToolchainConfig, sources: Dict[str, Dict[str, str]]
) -> Dict[str, Any]:
    """Build the solc standard-JSON input for the given sources."""
    return {
        "language": "Solidity",
        "sources": sources,
        "settings": config.solc_settings(),
    }


def ensure_solc(version: str) -> None:
    """Install the requested solc version if it is not available yet."""
    installed = {str(v) for v in solcx.get_installed_solc_versions()}
    if version not in installed:
        logger.info(f"Installing solc {version}")
        solcx.install_solc(version)


def compile_contracts(config: ToolchainConfig) -> List[Path]:
    """
    Compile all sources and write one artifact per contract.

    Args:
        config: Toolchain configuration

    Returns:
        Paths of the written artifacts (empty if there are no sources)

    Raises:
        CompilationError: If solc fails or reports errors
    """
    sources = collect_sources(config)
    if not sources:
        logger.warning(f"No Solidity sources found in {config.paths.sources}")
        return []

    version = config.solidity.version
    optimizer = config.solidity.optimizer
    logger.info(
        f"Compiling {len(sources)} file(s) with solc {version} "
        f"(optimizer: {'on' if optimizer.enabled else 'off'}, runs: {optimizer.runs})"
    )

    ensure_solc(version)

    try:
        output = solcx.compile_standard(
            build_compiler_input(config, sources),
            solc_version=version,
            allow_paths=[str(config.paths.root)],
        )
    except SolcError as e:
        raise CompilationError(f"solc {version} failed: {e}") from e

    errors = []
    for diagnostic in output.get("errors", []):
        message = diagnostic.get("formattedMessage") or diagnostic.get("message", "")
        if diagnostic.get("severity") == "error":
            errors.append(message.strip())
        else:
            logger.warning(message.strip())

    if errors:
        raise CompilationError("Compilation failed:\n" + "\n".join(errors))

    written: List[Path] = []
    for source_name, contracts in output.get("contracts", {}).items():
        for contract_name, contract_output in contracts.items():
            artifact = artifact_from_solc_output(contract_output, source_name, contract_name)
            written.append(write_artifact(config.paths.artifacts, artifact))
            logger.debug(f"Wrote artifact {artifact.fully_qualified_name}")

    logger.info(f"Compiled {len(written)} contract(s)")
    return written
