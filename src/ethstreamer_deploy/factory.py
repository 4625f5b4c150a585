"""Contract factories and deployments."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from eth_abi import encode
from eth_abi.exceptions import EncodingError
from loguru import logger

from .addresses import validate_address
from .exceptions import ConstructorArgumentError, DeploymentError, TransactionFailedError
from .rpc import JSONRPCClient
from .types import ContractArtifact


@dataclass
class Signer:
    """A node-managed signing account."""

    address: str  # Checksummed address
    client: JSONRPCClient

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        return self.client.send_transaction({"from": self.address, **transaction})


class ContractFactory:
    """Builds and submits deployment transactions for a compiled contract."""

    def __init__(self, artifact: ContractArtifact, signer: Signer):
        """
        Initialize the factory.

        Args:
            artifact: Compiled contract
            signer: Account the deployment is sent from

        Raises:
            DeploymentError: If the bytecode is empty or needs library linking
        """
        if artifact.link_references:
            libraries = ", ".join(sorted(artifact.link_references))
            raise DeploymentError(
                f"{artifact.contract_name} needs linked libraries ({libraries}), "
                "which is not supported"
            )
        if artifact.bytecode in ("", "0x"):
            raise DeploymentError(
                f"{artifact.contract_name} has no bytecode (abstract contract or interface?)"
            )

        self.artifact = artifact
        self.signer = signer

    @property
    def contract_name(self) -> str:
        return self.artifact.contract_name

    def encode_constructor_args(self, args: Sequence[Any]) -> bytes:
        """
        ABI-encode constructor arguments.

        Address-typed arguments are validated and checksummed first.

        Args:
            args: Constructor arguments in declaration order

        Returns:
            Encoded arguments (empty for a zero-argument constructor)

        Raises:
            ConstructorArgumentError: If the argument count or types don't match
            InvalidAddressError: If an address argument is malformed
        """
        types = self.artifact.constructor_inputs()
        if len(args) != len(types):
            raise ConstructorArgumentError(
                f"{self.contract_name} constructor takes {len(types)} argument(s) "
                f"({', '.join(types) or 'none'}), got {len(args)}"
            )
        if not types:
            return b""

        values = [_coerce(abi_type, value) for abi_type, value in zip(types, args)]

        try:
            return encode(types, values)
        except (EncodingError, TypeError, ValueError) as e:
            raise ConstructorArgumentError(
                f"Cannot encode {self.contract_name} constructor arguments: {e}"
            ) from e

    def get_deploy_transaction(self, *args: Any) -> Dict[str, Any]:
        """Build the unsent deployment transaction."""
        data = self.artifact.bytecode + self.encode_constructor_args(args).hex()
        return {"from": self.signer.address, "data": data}

    def deploy(self, *args: Any) -> "DeployedContract":
        """
        Submit the deployment transaction.

        Returns once the node accepted the transaction; call
        wait_for_deployment() on the result to block until it is mined.

        Args:
            *args: Constructor arguments

        Returns:
            DeployedContract in pending state
        """
        transaction = self.get_deploy_transaction(*args)
        tx_hash = self.signer.send_transaction(transaction)
        logger.debug(f"{self.contract_name} deployment submitted in {tx_hash}")
        return DeployedContract(self.artifact, self.signer.client, tx_hash)


class DeployedContract:
    """Result of a deployment; has an address once confirmed."""

    def __init__(self, artifact: ContractArtifact, client: JSONRPCClient, tx_hash: str):
        self.artifact = artifact
        self.client = client
        self.deployment_transaction = tx_hash
        self.receipt: Optional[Dict[str, Any]] = None
        self._address: Optional[str] = None

    def wait_for_deployment(
        self, poll_interval: float = 0.5, timeout: Optional[float] = None
    ) -> "DeployedContract":
        """
        Block until the deployment transaction is mined.

        Args:
            poll_interval: Seconds between receipt polls
            timeout: Seconds to wait (None waits indefinitely)

        Returns:
            self, now confirmed

        Raises:
            TransactionFailedError: If the deployment reverted or left no code
        """
        if self._address is not None:
            return self

        receipt = self.client.wait_for_receipt(
            self.deployment_transaction, poll_interval=poll_interval, timeout=timeout
        )
        self.receipt = receipt

        name = self.artifact.contract_name
        if int(receipt.get("status") or "0x1", 16) == 0:
            raise TransactionFailedError(
                f"{name} deployment reverted in {self.deployment_transaction}"
            )

        contract_address = receipt.get("contractAddress")
        if not contract_address:
            raise TransactionFailedError(
                f"Receipt for {self.deployment_transaction} has no contract address"
            )
        address = validate_address(contract_address)

        if self.client.get_code(address) in ("", "0x"):
            raise TransactionFailedError(f"No code at {name} address {address}")

        self._address = address
        return self

    def get_address(self) -> str:
        """
        Return the checksummed contract address.

        Raises:
            DeploymentError: If called before wait_for_deployment()
        """
        if self._address is None:
            raise DeploymentError(
                f"{self.artifact.contract_name} deployment "
                f"{self.deployment_transaction} is not confirmed yet"
            )
        return self._address


def _coerce(abi_type: str, value: Any) -> Any:
    # Command-line values arrive as strings
    if abi_type == "address":
        return validate_address(value)
    if not isinstance(value, str):
        return value
    if abi_type.startswith(("uint", "int")) and "[" not in abi_type:
        try:
            return int(value, 0)
        except ValueError as e:
            raise ConstructorArgumentError(f"Expected {abi_type}, got {value!r}") from e
    if abi_type == "bool":
        if value.lower() not in ("true", "false"):
            raise ConstructorArgumentError(f"Expected bool, got {value!r}")
        return value.lower() == "true"
    return value
