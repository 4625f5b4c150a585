"""Runtime environment passed to tasks."""

from typing import List, Optional

from loguru import logger

from .addresses import validate_address
from .artifacts import find_artifact
from .config import NetworkConfig, ToolchainConfig
from .exceptions import ChainIdMismatchError, NoAccountsError
from .factory import ContractFactory, Signer
from .rpc import JSONRPCClient


class RuntimeEnvironment:
    """Configuration plus a connection to the selected network."""

    def __init__(self, config: ToolchainConfig, network_name: Optional[str] = None):
        """
        Initialize the runtime environment.

        No network traffic happens until a task first needs the node.

        Args:
            config: Loaded toolchain configuration
            network_name: Network to use (defaults to config.default_network)

        Raises:
            NetworkNotFoundError: If the network is not configured
        """
        self.config = config
        self.network: NetworkConfig = config.network(network_name)
        self._client: Optional[JSONRPCClient] = None

    @property
    def client(self) -> JSONRPCClient:
        """
        JSON-RPC client for the selected network.

        The node's chain id is checked against the config on first use.

        Raises:
            ChainIdMismatchError: If the node reports a different chain id
            RPCError: If the node is unreachable
        """
        if self._client is None:
            client = JSONRPCClient(self.network.url)
            chain_id = client.chain_id()
            if chain_id != self.network.chain_id:
                raise ChainIdMismatchError(
                    f"Network '{self.network.name}' is configured with chainId "
                    f"{self.network.chain_id} but {self.network.url} reports {chain_id}"
                )
            logger.debug(f"Connected to {self.network.name} ({self.network.url}, chain {chain_id})")
            self._client = client
        return self._client

    def get_signers(self) -> List[Signer]:
        """
        Get the node-managed signing accounts.

        Returns:
            Signers in node order

        Raises:
            NoAccountsError: If the node exposes no accounts
        """
        addresses = self.client.accounts()
        if not addresses:
            raise NoAccountsError(
                f"No accounts available on network '{self.network.name}'"
            )
        return [Signer(validate_address(a), self.client) for a in addresses]

    def get_contract_factory(
        self, name: str, signer: Optional[Signer] = None
    ) -> ContractFactory:
        """
        Get a deployment factory for a compiled contract.

        Args:
            name: Bare or fully qualified contract name
            signer: Deploying account (defaults to the first signer)

        Returns:
            ContractFactory

        Raises:
            ArtifactNotFoundError: If no artifact matches the name
            NoAccountsError: If no signer is given and the node has no accounts
        """
        artifact = find_artifact(self.config.paths.artifacts, name)
        if signer is None:
            signer = self.get_signers()[0]
        return ContractFactory(artifact, signer)
