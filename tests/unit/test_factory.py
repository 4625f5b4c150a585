"""Unit tests for contract factories and deployments."""

import pytest
from eth_abi import decode
from eth_utils import to_checksum_address

from ethstreamer_deploy.constants import DEFAULT_STREAMER_ADDRESS
from ethstreamer_deploy.exceptions import (
    ConstructorArgumentError,
    DeploymentError,
    InvalidAddressError,
    TransactionFailedError,
)
from ethstreamer_deploy.factory import ContractFactory, DeployedContract, Signer
from ethstreamer_deploy.rpc import JSONRPCClient
from ethstreamer_deploy.types import ContractArtifact

DEPLOYER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
BYTECODE = "0x6080604052348015600f57600080fd5b50"


def make_artifact(constructor_types=None, **overrides) -> ContractArtifact:
    abi = []
    if constructor_types is not None:
        abi.append(
            {
                "type": "constructor",
                "inputs": [{"name": f"a{i}", "type": t} for i, t in enumerate(constructor_types)],
            }
        )
    fields = {
        "contract_name": "EthStreamer",
        "source_name": "contracts/EthStreamer.sol",
        "abi": abi,
        "bytecode": BYTECODE,
    }
    fields.update(overrides)
    return ContractArtifact(**fields)


@pytest.fixture
def client() -> JSONRPCClient:
    return JSONRPCClient("http://127.0.0.1:8545")


@pytest.fixture
def signer(client) -> Signer:
    return Signer(DEPLOYER, client)


class TestContractFactory:
    """Test ContractFactory construction and transaction building."""

    def test_rejects_unlinked_libraries(self, signer):
        """Test that artifacts needing library linking are refused."""
        artifact = make_artifact(
            link_references={"contracts/Lib.sol": {"Lib": [{"start": 1, "length": 20}]}}
        )
        with pytest.raises(DeploymentError, match="linked libraries"):
            ContractFactory(artifact, signer)

    def test_rejects_empty_bytecode(self, signer):
        """Test that interfaces and abstract contracts are refused."""
        with pytest.raises(DeploymentError, match="no bytecode"):
            ContractFactory(make_artifact(bytecode="0x"), signer)

    def test_zero_argument_transaction(self, signer):
        """Test that a zero-argument deployment carries only the bytecode."""
        factory = ContractFactory(make_artifact([]), signer)

        assert factory.get_deploy_transaction() == {"from": DEPLOYER, "data": BYTECODE}

    def test_implicit_constructor_takes_no_arguments(self, signer):
        """Test that an ABI without a constructor entry means zero arguments."""
        factory = ContractFactory(make_artifact(None), signer)
        assert factory.get_deploy_transaction()["data"] == BYTECODE

    def test_address_argument_is_encoded(self, signer):
        """Test that the address argument is ABI-encoded after the bytecode."""
        factory = ContractFactory(make_artifact(["address"]), signer)

        data = factory.get_deploy_transaction(DEFAULT_STREAMER_ADDRESS)["data"]

        assert data.startswith(BYTECODE)
        encoded = bytes.fromhex(data[len(BYTECODE):])
        assert len(encoded) == 32
        (decoded,) = decode(["address"], encoded)
        assert decoded.lower() == DEFAULT_STREAMER_ADDRESS.lower()

    def test_lowercase_address_argument_accepted(self, signer):
        """Test that unchecksummed lowercase addresses are accepted."""
        factory = ContractFactory(make_artifact(["address"]), signer)
        lower = factory.get_deploy_transaction(DEFAULT_STREAMER_ADDRESS.lower())
        checksummed = factory.get_deploy_transaction(DEFAULT_STREAMER_ADDRESS)
        assert lower == checksummed

    def test_malformed_address_argument_rejected(self, signer):
        """Test that the truncated address literal is rejected before sending."""
        factory = ContractFactory(make_artifact(["address"]), signer)

        with pytest.raises(InvalidAddressError):
            factory.get_deploy_transaction("0xf39Fd6e51aad88F6F4ce6aB8827279cffFb9226")

    def test_argument_given_to_zero_argument_constructor(self, signer):
        """Test that passing an argument to a zero-argument constructor is fatal."""
        factory = ContractFactory(make_artifact([]), signer)

        with pytest.raises(ConstructorArgumentError, match="takes 0 argument"):
            factory.get_deploy_transaction(DEFAULT_STREAMER_ADDRESS)

    def test_missing_argument_for_address_constructor(self, signer):
        """Test that omitting the constructor argument is fatal."""
        factory = ContractFactory(make_artifact(["address"]), signer)

        with pytest.raises(ConstructorArgumentError, match=r"takes 1 argument.*got 0"):
            factory.get_deploy_transaction()

    def test_string_arguments_coerced(self, signer):
        """Test that command-line strings are converted for int and bool types."""
        factory = ContractFactory(make_artifact(["uint256", "bool", "string"]), signer)

        data = factory.get_deploy_transaction("0x10", "true", "streams")["data"]

        encoded = bytes.fromhex(data[len(BYTECODE):])
        assert decode(["uint256", "bool", "string"], encoded) == (16, True, "streams")

    def test_bad_integer_argument(self, signer):
        """Test that unparseable integers raise ConstructorArgumentError."""
        factory = ContractFactory(make_artifact(["uint256"]), signer)

        with pytest.raises(ConstructorArgumentError, match="uint256"):
            factory.get_deploy_transaction("ten")

    def test_out_of_range_argument(self, signer):
        """Test that values the encoder rejects raise ConstructorArgumentError."""
        factory = ContractFactory(make_artifact(["uint8"]), signer)

        with pytest.raises(ConstructorArgumentError, match="Cannot encode"):
            factory.get_deploy_transaction(256)


class TestDeploy:
    """Test deploying against a dev node."""

    def test_deploy_returns_pending_contract(self, dev_node, signer):
        """Test that deploy() submits once and returns before confirmation."""
        factory = ContractFactory(make_artifact(["address"]), signer)

        pending = factory.deploy(DEFAULT_STREAMER_ADDRESS)

        assert isinstance(pending, DeployedContract)
        assert dev_node.methods() == ["eth_sendTransaction"]
        assert dev_node.sent[0]["from"] == DEPLOYER
        with pytest.raises(DeploymentError, match="not confirmed"):
            pending.get_address()

    def test_wait_for_deployment_sets_address(self, dev_node, signer):
        """Test that the address is available after confirmation."""
        factory = ContractFactory(make_artifact([]), signer)

        deployed = factory.deploy().wait_for_deployment()

        address = deployed.get_address()
        assert address.lower() == deployed.receipt["contractAddress"]
        assert address == to_checksum_address(address)
        assert dev_node.methods()[-1] == "eth_getCode"

    def test_wait_for_deployment_is_idempotent(self, dev_node, signer):
        """Test that waiting twice does not poll again."""
        deployed = ContractFactory(make_artifact([]), signer).deploy().wait_for_deployment()
        calls = len(dev_node.requests)

        deployed.wait_for_deployment()

        assert len(dev_node.requests) == calls

    def test_reverted_deployment_raises(self, dev_node, signer):
        """Test that a reverted deployment is fatal."""
        dev_node.revert = True
        pending = ContractFactory(make_artifact([]), signer).deploy()

        with pytest.raises(TransactionFailedError, match="reverted"):
            pending.wait_for_deployment()

    def test_null_status_treated_as_success(self, dev_node, signer):
        """Test that a receipt without a status value is not taken as a revert."""
        pending = ContractFactory(make_artifact([]), signer).deploy()
        dev_node.receipts[pending.deployment_transaction]["status"] = None

        deployed = pending.wait_for_deployment()

        assert deployed.get_address().lower() == deployed.receipt["contractAddress"]

    def test_no_code_at_address_raises(self, dev_node, signer):
        """Test that a receipt without deployed code is fatal."""
        pending = ContractFactory(make_artifact([]), signer).deploy()
        dev_node.code.clear()

        with pytest.raises(TransactionFailedError, match="No code"):
            pending.wait_for_deployment()

    def test_arity_mismatch_sends_nothing(self, dev_node, signer):
        """Test that a constructor arity mismatch fails before any transaction."""
        factory = ContractFactory(make_artifact(["address"]), signer)

        with pytest.raises(ConstructorArgumentError):
            factory.deploy()

        assert dev_node.sent == []
