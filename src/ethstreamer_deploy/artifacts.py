"""Compiled artifact parsing and lookup for ethstreamer-deploy."""

import json
from pathlib import Path
from typing import Any, Dict, List

from .exceptions import AmbiguousArtifactError, ArtifactNotFoundError, DeploymentError
from .paths import get_artifact_path
from .types import ContractArtifact


def parse_artifact(file_path: Path) -> ContractArtifact:
    """
    Parse a hardhat artifact JSON file.

    Args:
        file_path: Path to <artifacts>/<source>/<Name>.json

    Returns:
        ContractArtifact

    Raises:
        ArtifactNotFoundError: If the file does not exist
        DeploymentError: If required fields are missing
    """
    try:
        with open(file_path) as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ArtifactNotFoundError(f"Artifact not found: {file_path}") from e
    except json.JSONDecodeError as e:
        raise DeploymentError(f"Invalid JSON in artifact {file_path}: {e}") from e

    missing = [k for k in ("contractName", "sourceName", "abi", "bytecode") if k not in data]
    if missing:
        raise DeploymentError(
            f"Artifact {file_path} is missing required fields: {', '.join(missing)}"
        )

    return ContractArtifact(
        contract_name=data["contractName"],
        source_name=data["sourceName"],
        abi=data["abi"],
        bytecode=_hex(data["bytecode"]),
        deployed_bytecode=_hex(data["deployedBytecode"]) if "deployedBytecode" in data else None,
        link_references=data.get("linkReferences", {}),
        deployed_link_references=data.get("deployedLinkReferences", {}),
    )


def artifact_from_solc_output(
    contract_output: Dict[str, Any], source_name: str, contract_name: str
) -> ContractArtifact:
    """
    Build an artifact from one contract entry of solc standard-JSON output.

    Args:
        contract_output: output["contracts"][source_name][contract_name]
        source_name: Source unit name
        contract_name: Contract name

    Returns:
        ContractArtifact
    """
    evm = contract_output.get("evm", {})
    bytecode = evm.get("bytecode", {})
    deployed = evm.get("deployedBytecode", {})

    return ContractArtifact(
        contract_name=contract_name,
        source_name=source_name,
        abi=contract_output.get("abi", []),
        bytecode=_hex(bytecode.get("object", "")),
        deployed_bytecode=_hex(deployed.get("object", "")),
        link_references=bytecode.get("linkReferences", {}),
        deployed_link_references=deployed.get("linkReferences", {}),
    )


def list_artifact_files(artifacts_dir: Path) -> List[Path]:
    """
    List contract artifact files under an artifacts directory.

    Skips build-info and *.dbg.json debug files.

    Args:
        artifacts_dir: Root artifacts directory

    Returns:
        Sorted list of artifact paths
    """
    if not artifacts_dir.exists():
        return []

    return sorted(
        p
        for p in artifacts_dir.rglob("*.json")
        if not p.name.endswith(".dbg.json")
        and "build-info" not in p.relative_to(artifacts_dir).parts
    )


def find_artifact(artifacts_dir: Path, name: str) -> ContractArtifact:
    """
    Find a compiled artifact by contract name.

    Accepts a bare name ("EthStreamer") or a fully qualified name
    ("contracts/EthStreamer.sol:EthStreamer").

    Args:
        artifacts_dir: Root artifacts directory
        name: Contract name

    Returns:
        ContractArtifact

    Raises:
        ArtifactNotFoundError: If no artifact matches
        AmbiguousArtifactError: If a bare name matches several artifacts
    """
    if ":" in name:
        source_name, contract_name = name.rsplit(":", 1)
        path = get_artifact_path(artifacts_dir, source_name, contract_name)
        if not path.exists():
            raise ArtifactNotFoundError(
                f"Artifact for {name} not found in {artifacts_dir}. "
                "Run the compile task first."
            )
        return parse_artifact(path)

    matches = [p for p in list_artifact_files(artifacts_dir) if p.stem == name]

    if not matches:
        raise ArtifactNotFoundError(
            f"Artifact for contract '{name}' not found in {artifacts_dir}. "
            "Run the compile task first."
        )

    if len(matches) > 1:
        candidates = ", ".join(
            f"{p.parent.relative_to(artifacts_dir).as_posix()}:{name}" for p in matches
        )
        raise AmbiguousArtifactError(
            f"Contract name '{name}' matches several artifacts, use a fully "
            f"qualified name: {candidates}"
        )

    return parse_artifact(matches[0])


def write_artifact(artifacts_dir: Path, artifact: ContractArtifact) -> Path:
    """
    Write an artifact to disk in hardhat layout.

    Creates parent directories if they don't exist.

    Args:
        artifacts_dir: Root artifacts directory
        artifact: Compiled contract

    Returns:
        Path of the written file
    """
    path = get_artifact_path(artifacts_dir, artifact.source_name, artifact.contract_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(artifact.to_dict(), f, indent=2)
    return path


def _hex(value: str) -> str:
    if value.startswith("0x"):
        return value
    return "0x" + value
