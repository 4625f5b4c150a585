"""Custom exception classes for ethstreamer-deploy."""

from typing import Any, Optional


class DeploymentError(Exception):
    """Base exception for build and deployment errors."""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when the toolchain configuration is malformed."""

    pass


class NetworkNotFoundError(DeploymentError, ValueError):
    """Raised when requested network is not configured."""

    pass


class RPCError(DeploymentError, RuntimeError):
    """Raised when the node is unreachable or answers with a JSON-RPC error."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data


class ChainIdMismatchError(RPCError):
    """Raised when the node's chain id differs from the configured one."""

    pass


class NoAccountsError(DeploymentError, LookupError):
    """Raised when the node exposes no signing accounts."""

    pass


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when no compiled artifact exists for a contract name."""

    pass


class AmbiguousArtifactError(DeploymentError, ValueError):
    """Raised when a bare contract name matches more than one artifact."""

    pass


class InvalidAddressError(DeploymentError, ValueError):
    """Raised when a value is not a well-formed account address."""

    pass


class ConstructorArgumentError(DeploymentError, ValueError):
    """Raised when constructor arguments do not match the contract ABI."""

    pass


class TransactionFailedError(DeploymentError, RuntimeError):
    """Raised when a mined deployment transaction reverted or left no code."""

    pass


class CompilationError(DeploymentError, RuntimeError):
    """Raised when the Solidity compiler reports errors."""

    pass
