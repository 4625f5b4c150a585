"""Shared pytest fixtures for ethstreamer-deploy tests."""

import json
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest
import responses

from ethstreamer_deploy.config import ToolchainConfig, load_config

NODE_URL = "http://127.0.0.1:8545"

# First two hardhat dev node accounts
DEV_ACCOUNTS = [
    "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266",
    "0x70997970c51812dc3a010c7d01b50e0d17dc79c8",
]


class DevNode:
    """Emulates the JSON-RPC surface of a local automining dev node."""

    def __init__(self, chain_id: int = 31337, accounts: Optional[List[str]] = None):
        self.chain_id = chain_id
        self.accounts = list(DEV_ACCOUNTS if accounts is None else accounts)
        self.requests: List[Dict[str, Any]] = []
        self.sent: List[Dict[str, Any]] = []
        self.receipts: Dict[str, Dict[str, Any]] = {}
        self.code: Dict[str, str] = {}
        # Number of receipt polls answered with null before the receipt
        self.pending_polls = 0
        self.revert = False
        self.errors: Dict[str, Dict[str, Any]] = {}

    def methods(self) -> List[str]:
        return [r["method"] for r in self.requests]

    def __call__(self, request) -> tuple:
        body = json.loads(request.body)
        self.requests.append(body)
        method = body["method"]

        if method in self.errors:
            payload = {"jsonrpc": "2.0", "id": body["id"], "error": self.errors[method]}
        else:
            result = self._handle(method, body["params"])
            payload = {"jsonrpc": "2.0", "id": body["id"], "result": result}
        return (200, {}, json.dumps(payload))

    def _handle(self, method: str, params: List[Any]) -> Any:
        match method:
            case "eth_chainId":
                return hex(self.chain_id)
            case "eth_accounts":
                return self.accounts
            case "eth_sendTransaction":
                return self._mine(params[0])
            case "eth_getTransactionReceipt":
                if self.pending_polls > 0:
                    self.pending_polls -= 1
                    return None
                return self.receipts.get(params[0])
            case "eth_getCode":
                return self.code.get(params[0].lower(), "0x")
        raise AssertionError(f"Unexpected RPC method {method}")

    def _mine(self, transaction: Dict[str, Any]) -> str:
        self.sent.append(transaction)
        nonce = len(self.sent)
        tx_hash = "0x" + f"{nonce:064x}"
        address = "0x" + f"{0x5fbdb2315678afecb367f032d93f642f64180aa2 + nonce:040x}"

        self.receipts[tx_hash] = {
            "transactionHash": tx_hash,
            "status": "0x0" if self.revert else "0x1",
            "contractAddress": address,
        }
        if not self.revert:
            self.code[address] = "0x6080604052"
        return tx_hash


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def dev_node():
    """Mock a local dev node at 127.0.0.1:8545."""
    node = DevNode()
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add_callback(
            responses.POST, NODE_URL, callback=node, content_type="application/json"
        )
        yield node


@pytest.fixture
def project_dir(tmp_path: Path, fixtures_dir: Path) -> Path:
    """Create a project with the default config file and EthStreamer artifacts."""
    config = {
        "solidity": {
            "version": "0.8.30",
            "settings": {"optimizer": {"enabled": True, "runs": 1000}},
        },
        "networks": {"localhost": {"url": NODE_URL, "chainId": 31337}},
    }
    (tmp_path / "ethstreamer.config.json").write_text(json.dumps(config, indent=2))
    shutil.copytree(fixtures_dir / "artifacts", tmp_path / "artifacts")
    return tmp_path


@pytest.fixture
def toolchain_config(project_dir: Path) -> ToolchainConfig:
    """Load the project configuration."""
    return load_config(project_dir / "ethstreamer.config.json")


@pytest.fixture
def write_artifact_file() -> Callable[..., Path]:
    """Return a helper writing a minimal hardhat artifact with a given constructor."""

    def _write(
        artifacts_dir: Path,
        name: str,
        constructor_types: Optional[List[str]] = None,
        source_name: Optional[str] = None,
    ) -> Path:
        if source_name is None:
            source_name = f"contracts/{name}.sol"
        abi: List[Dict[str, Any]] = []
        if constructor_types is not None:
            abi.append(
                {
                    "type": "constructor",
                    "stateMutability": "nonpayable",
                    "inputs": [
                        {"name": f"arg{i}", "type": t, "internalType": t}
                        for i, t in enumerate(constructor_types)
                    ],
                }
            )
        path = artifacts_dir / source_name / f"{name}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(
                {
                    "_format": "hh-sol-artifact-1",
                    "contractName": name,
                    "sourceName": source_name,
                    "abi": abi,
                    "bytecode": "0x6080604052348015600f57600080fd5b50",
                    "deployedBytecode": "0x6080604052",
                    "linkReferences": {},
                    "deployedLinkReferences": {},
                }
            )
        )
        return path

    return _write
