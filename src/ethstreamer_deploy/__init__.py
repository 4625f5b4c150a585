"""
ethstreamer-deploy: build and deploy toolchain for the EthStreamer contract
"""

from importlib.metadata import PackageNotFoundError, version

from .config import NetworkConfig, ToolchainConfig, load_config
from .exceptions import (
    AmbiguousArtifactError,
    ArtifactNotFoundError,
    ChainIdMismatchError,
    CompilationError,
    ConfigurationError,
    ConstructorArgumentError,
    DeploymentError,
    InvalidAddressError,
    NetworkNotFoundError,
    NoAccountsError,
    RPCError,
    TransactionFailedError,
)
from .factory import ContractFactory, DeployedContract, Signer
from .runtime import RuntimeEnvironment
from .tasks import deploy_eth_streamer
from .types import ContractArtifact

try:
    __version__ = version("ethstreamer-deploy")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "load_config",
    "ToolchainConfig",
    "NetworkConfig",
    "RuntimeEnvironment",
    "ContractArtifact",
    "ContractFactory",
    "DeployedContract",
    "Signer",
    "deploy_eth_streamer",
    "DeploymentError",
    "ConfigurationError",
    "NetworkNotFoundError",
    "RPCError",
    "ChainIdMismatchError",
    "NoAccountsError",
    "ArtifactNotFoundError",
    "AmbiguousArtifactError",
    "InvalidAddressError",
    "ConstructorArgumentError",
    "TransactionFailedError",
    "CompilationError",
]
