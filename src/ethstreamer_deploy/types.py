"""Data types and dataclasses for ethstreamer-deploy."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import ARTIFACT_FORMAT


@dataclass
class ContractArtifact:
    """Compiled contract in hardhat artifact form."""

    # Required fields
    contract_name: str  # e.g., "EthStreamer"
    source_name: str  # e.g., "contracts/EthStreamer.sol"
    abi: List[Dict[str, Any]]  # Full contract ABI
    bytecode: str  # 0x-prefixed creation bytecode

    # Optional fields
    deployed_bytecode: Optional[str] = None
    link_references: Dict[str, Any] = field(default_factory=dict)
    deployed_link_references: Dict[str, Any] = field(default_factory=dict)

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"

    def constructor_abi(self) -> Optional[Dict[str, Any]]:
        """Return the constructor ABI entry, or None for the implicit constructor."""
        for item in self.abi:
            if item.get("type") == "constructor":
                return item
        return None

    def constructor_inputs(self) -> List[str]:
        """Return the canonical ABI types of the constructor parameters."""
        constructor = self.constructor_abi()
        if constructor is None:
            return []
        return [_canonical_type(param) for param in constructor.get("inputs", [])]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to hardhat artifact JSON layout."""
        return {
            "_format": ARTIFACT_FORMAT,
            "contractName": self.contract_name,
            "sourceName": self.source_name,
            "abi": self.abi,
            "bytecode": self.bytecode,
            "deployedBytecode": self.deployed_bytecode or "0x",
            "linkReferences": self.link_references,
            "deployedLinkReferences": self.deployed_link_references,
        }


def _canonical_type(param: Dict[str, Any]) -> str:
    # Tuples are spelled out from their components, e.g. (address,uint256)[]
    abi_type = param["type"]
    if abi_type.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){abi_type[len('tuple'):]}"
    return abi_type
